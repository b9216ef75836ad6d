"""Gitignore-style path matching.

Contains:
- pattern_to_regex: Translate a gitignore-style pattern into a regex string
- IgnorePattern: A single compiled pattern
- IgnoreMatcher: A set of patterns, matching if any pattern matches

The dialect is a practical subset of gitignore. Character classes are not
supported: "[" is matched literally.
"""

import logging
import re
from dataclasses import dataclass
from typing import Iterable, Optional

logger = logging.getLogger(__name__)

# Characters escaped to match literally
_REGEX_SPECIAL = set(".+^$(){}|\\[")


def pattern_to_regex(pattern: str) -> str:
    """Translate a gitignore-style pattern into an unanchored regex string.

    Args:
        pattern: The gitignore-style pattern (without a trailing "/").

    Returns:
        Regex source matching the pattern.
    """
    result = []
    i = 0
    n = len(pattern)

    while i < n:
        ch = pattern[i]
        if ch == "*":
            if i + 1 < n and pattern[i + 1] == "*":
                if i + 2 < n and pattern[i + 2] == "/":
                    # **/ matches zero or more directories
                    result.append("(?:.*/)?")
                    i += 3
                else:
                    # trailing or interior ** matches anything, "/" included
                    result.append(".*")
                    i += 2
            else:
                result.append("[^/]*")
                i += 1
        elif ch == "?":
            result.append("[^/]")
            i += 1
        elif ch in _REGEX_SPECIAL:
            result.append("\\" + ch)
            i += 1
        else:
            result.append(ch)
            i += 1

    return "".join(result)


@dataclass(frozen=True)
class IgnorePattern:
    """A compiled gitignore-style pattern."""

    original: str
    regex: re.Pattern
    is_dir: bool  # pattern ends with "/"
    has_slash: bool  # pattern contains "/" before any trailing one

    @classmethod
    def compile(cls, pattern: str) -> "IgnorePattern":
        """Compile a pattern.

        Args:
            pattern: The gitignore-style pattern.

        Returns:
            The compiled IgnorePattern.

        Raises:
            re.error: If the translated regex is invalid.
        """
        is_dir = pattern.endswith("/")
        stripped = pattern[:-1] if is_dir else pattern
        source = pattern_to_regex(stripped)
        if is_dir:
            # matches the directory itself or anything below it
            source += "(?:/.*)?"
        return cls(
            original=pattern,
            regex=re.compile(source),
            is_dir=is_dir,
            has_slash="/" in stripped,
        )

    def match(self, relative_path: str, basename: str) -> bool:
        """Check if a path matches this pattern.

        Args:
            relative_path: Path relative to the project root.
            basename: Final component of the path.

        Returns:
            True if the path matches.
        """
        normalized = relative_path.replace("\\", "/")

        if self.is_dir or self.has_slash:
            return self.regex.fullmatch(normalized) is not None

        if self.regex.fullmatch(basename):
            return True
        return any(self.regex.fullmatch(part) for part in normalized.split("/"))


class IgnoreMatcher:
    """Matches paths against a list of gitignore-style patterns."""

    def __init__(self, patterns: Optional[Iterable[str]] = None):
        """Compile the given patterns.

        Empty and invalid patterns are skipped.

        Args:
            patterns: Gitignore-style pattern strings.
        """
        self.patterns: list[IgnorePattern] = []
        for pattern in patterns or []:
            if not pattern:
                continue
            try:
                self.patterns.append(IgnorePattern.compile(pattern))
            except re.error as e:
                logger.debug("Skipping invalid ignore pattern %r: %s", pattern, e)

    def should_ignore(self, relative_path: str, basename: str) -> bool:
        """Check if any pattern matches the path."""
        return any(p.match(relative_path, basename) for p in self.patterns)
