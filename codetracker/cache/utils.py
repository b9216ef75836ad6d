"""Cache utility functions for codetracker.

Contains:
- write_text_atomic: Replace a file's content via a sibling temp file
"""

import os
import tempfile
from pathlib import Path


def write_text_atomic(path: Path, text: str) -> None:
    """Write text to a file atomically.

    Parent directories are created. The text is written to a temp file in
    the same directory and renamed over the target, so readers see either
    the old or the new document, never a truncated one.

    Args:
        path: The destination file.
        text: The full file content.

    Raises:
        OSError: If the directory cannot be created or the file written.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(text)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_name, path)
    except BaseException:
        try:
            os.unlink(tmp_name)
        except OSError:
            pass
        raise
