"""Assistant transcript reading.

The transcript is a JSONL file maintained by the host tool. Lines that are
blank after trimming are not counted. The line cursor stored in the cache
counts non-empty lines only.

Contains:
- TranscriptEntry: One parsed transcript line
- TranscriptPage: Entries read from a cursor position
- count_transcript_lines: Count non-empty lines
- read_transcript_entries: Read entries starting at a line cursor
- filter_entry: Reduce an entry to a user/assistant text record
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterator, Optional, Union

from pydantic import BaseModel, ValidationError

from codetracker.api.models import ConversationEntry

logger = logging.getLogger(__name__)

MAX_LINE_SIZE = 10 * 1024 * 1024  # 10 MiB

TRACKED_ROLES = ("user", "assistant")


class TranscriptMessage(BaseModel):
    """The message part of a transcript entry.

    content is a string, a list of strings, or a list of typed blocks such
    as {"type": "text", "text": ...}. It is reduced to a string by filter_entry.
    """

    content: Union[str, list[Any], None] = None


class TranscriptEntry(BaseModel):
    """A transcript line. Unknown fields are kept in the raw dict only."""

    type: str = ""
    message: Optional[TranscriptMessage] = None


@dataclass
class TranscriptPage:
    """Result of reading the transcript from a cursor."""

    entries: list[dict] = field(default_factory=list)
    lines_read: int = 0  # non-empty lines consumed, parsable or not


def _iter_nonempty_lines(path: Path) -> Iterator[bytes]:
    """Yield stripped non-empty lines.

    Reading stops at a line longer than MAX_LINE_SIZE.
    """
    with open(path, "rb") as f:
        while True:
            line = f.readline(MAX_LINE_SIZE + 1)
            if not line:
                return
            if len(line) > MAX_LINE_SIZE:
                logger.warning("Transcript line exceeds %d bytes, stopping read", MAX_LINE_SIZE)
                return
            stripped = line.strip()
            if stripped:
                yield stripped


def count_transcript_lines(transcript_path: str) -> int:
    """Count non-empty lines in the transcript.

    Args:
        transcript_path: Path to the JSONL transcript.

    Returns:
        Number of non-empty lines, or 0 if the file cannot be read.
    """
    if not transcript_path:
        return 0
    try:
        return sum(1 for _ in _iter_nonempty_lines(Path(transcript_path)))
    except OSError as e:
        logger.warning("Failed to count transcript lines in %s: %s", transcript_path, e)
        return 0


def read_transcript_entries(
    transcript_path: str,
    start_line: int,
    max_entries: int,
) -> TranscriptPage:
    """Read transcript entries starting at a non-empty line index.

    Up to max_entries non-empty lines are consumed. Lines that are not JSON
    objects are consumed without producing an entry, so the cursor moves past
    them.

    Args:
        transcript_path: Path to the JSONL transcript.
        start_line: Number of non-empty lines already consumed.
        max_entries: Maximum number of lines to consume.

    Returns:
        TranscriptPage with the parsed entries and the number of lines consumed.
    """
    page = TranscriptPage()
    if not transcript_path or max_entries <= 0:
        return page

    try:
        for index, line in enumerate(_iter_nonempty_lines(Path(transcript_path))):
            if index < start_line:
                continue
            page.lines_read += 1
            try:
                data = json.loads(line)
            except (json.JSONDecodeError, UnicodeDecodeError):
                logger.debug("Skipping undecodable transcript line %d", index)
                data = None
            if isinstance(data, dict):
                page.entries.append(data)
            if page.lines_read >= max_entries:
                break
    except OSError as e:
        logger.warning("Failed to read transcript %s: %s", transcript_path, e)

    return page


def _user_text(content: Union[str, list[Any], None]) -> str:
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        return "".join(item for item in content if isinstance(item, str))
    return ""


def _assistant_text(content: Union[str, list[Any], None]) -> str:
    if not isinstance(content, list):
        return ""
    texts = [
        block["text"]
        for block in content
        if isinstance(block, dict) and block.get("type") == "text" and isinstance(block.get("text"), str)
    ]
    return "\n".join(texts)


def filter_entry(data: dict) -> Optional[ConversationEntry]:
    """Reduce a raw transcript entry to a role and its text.

    Only user and assistant entries are kept. User content is a string or the
    concatenation of the strings in a list; assistant content is the text of
    its "text" blocks joined by newlines.

    Args:
        data: A parsed transcript line.

    Returns:
        ConversationEntry, or None if the entry carries no text to ship.
    """
    try:
        entry = TranscriptEntry.model_validate(data)
    except ValidationError:
        return None

    if entry.type not in TRACKED_ROLES or entry.message is None:
        return None

    if entry.type == "user":
        text = _user_text(entry.message.content)
    else:
        text = _assistant_text(entry.message.content)

    text = text.strip()
    if not text:
        return None

    return ConversationEntry(entry_type=entry.type, entry_data=text)
