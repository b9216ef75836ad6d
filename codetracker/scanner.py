"""Project tree scanner.

Contains:
- FileInfo: A tracked file with its content and fingerprint
- compute_file_hash: SHA256 of raw file bytes
- Scanner: Walks the project tree and collects tracked files
"""

import hashlib
import logging
import os
import stat
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from codetracker.config import Config
from codetracker.ignore import IgnoreMatcher

logger = logging.getLogger(__name__)


@dataclass
class FileInfo:
    """A tracked file as seen by one scan."""

    relative_path: str  # forward slashes
    hash: str  # SHA256 hex digest of the raw bytes
    content: str
    size: int


def compute_file_hash(data: bytes) -> str:
    """Compute SHA256 hash of raw file bytes.

    Args:
        data: The file content.

    Returns:
        SHA256 hex digest.
    """
    return hashlib.sha256(data).hexdigest()


class Scanner:
    """Collects the tracked files under a project root."""

    def __init__(self, project_root: Path, config: Config):
        """Initialize the scanner.

        Args:
            project_root: The root directory to scan.
            config: Project configuration (patterns, extensions, size limit).
        """
        self.project_root = Path(project_root)
        self.ignore_matcher = IgnoreMatcher(config.ignore_patterns)
        self.track_extensions = set(config.track_extensions)
        self.max_file_size = config.max_file_size

    def should_ignore(self, relative_path: str) -> bool:
        """Check if a path is ignored.

        Dotfiles and dot-directories are always ignored.

        Args:
            relative_path: Path relative to the project root, "/" separated.

        Returns:
            True if the path is ignored.
        """
        basename = relative_path.rsplit("/", 1)[-1]
        if basename.startswith("."):
            return True
        return self.ignore_matcher.should_ignore(relative_path, basename)

    def should_track(self, relative_path: str) -> bool:
        """Check if a file is tracked (not ignored and extension listed)."""
        if self.should_ignore(relative_path):
            return False
        return os.path.splitext(relative_path)[1] in self.track_extensions

    def _relative(self, path: str) -> str:
        return os.path.relpath(path, self.project_root).replace(os.sep, "/")

    def _read_file(self, path: str, relative_path: str) -> Optional[FileInfo]:
        """Read one file, or return None if it cannot or should not be recorded."""
        try:
            st = os.lstat(path)
            if not stat.S_ISREG(st.st_mode) or st.st_size > self.max_file_size:
                return None
            with open(path, "rb") as f:
                data = f.read()
        except OSError as e:
            logger.debug("Skipping unreadable file %s: %s", relative_path, e)
            return None

        # the file may have grown since lstat
        if len(data) > self.max_file_size:
            return None

        return FileInfo(
            relative_path=relative_path,
            hash=compute_file_hash(data),
            content=data.decode("utf-8", errors="replace"),
            size=len(data),
        )

    def scan(self) -> dict[str, FileInfo]:
        """Scan all tracked files.

        Returns:
            Mapping of relative path to FileInfo. No ordering is promised.
        """
        tracked: dict[str, FileInfo] = {}

        # walk errors are ignored; per-entry errors skip the entry
        for dirpath, dirnames, filenames in os.walk(self.project_root):
            # prune ignored directories in place so os.walk does not descend
            dirnames[:] = [
                d for d in dirnames
                if not self.should_ignore(self._relative(os.path.join(dirpath, d)))
            ]

            for filename in filenames:
                path = os.path.join(dirpath, filename)
                relative_path = self._relative(path)
                try:
                    relative_path.encode("utf-8")
                except UnicodeEncodeError:
                    logger.debug("Skipping file with undecodable name %r", relative_path)
                    continue
                if not self.should_track(relative_path):
                    continue
                info = self._read_file(path, relative_path)
                if info is not None:
                    tracked[relative_path] = info

        logger.debug("Scanned %d tracked files under %s", len(tracked), self.project_root)
        return tracked
