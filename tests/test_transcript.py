"""Tests for codetracker.transcript module."""

import json

import pytest

from codetracker.transcript import (
    count_transcript_lines,
    filter_entry,
    read_transcript_entries,
)


def user(text):
    return {"type": "user", "message": {"content": text}}


def assistant(*texts):
    return {"type": "assistant", "message": {"content": [{"type": "text", "text": t} for t in texts]}}


@pytest.fixture
def write_transcript(temp_dir):
    """Return a helper that writes raw lines to a transcript file."""

    def _write(lines: list) -> str:
        path = temp_dir / "transcript.jsonl"
        path.write_text("".join((line if isinstance(line, str) else json.dumps(line)) + "\n" for line in lines))
        return str(path)

    return _write


class TestCountTranscriptLines:
    """Tests for count_transcript_lines function."""

    def test_counts_nonempty_lines(self, write_transcript):
        """Test that blank lines are not counted."""
        path = write_transcript([user("a"), "", "   ", user("b")])
        assert count_transcript_lines(path) == 2

    def test_missing_file(self, temp_dir):
        """Test that a missing file counts as zero."""
        assert count_transcript_lines(str(temp_dir / "nope.jsonl")) == 0

    def test_empty_path(self):
        """Test that an empty path counts as zero."""
        assert count_transcript_lines("") == 0

    def test_malformed_lines_counted(self, write_transcript):
        """Test that non-JSON lines still count."""
        path = write_transcript(["not json", user("a")])
        assert count_transcript_lines(path) == 2


class TestReadTranscriptEntries:
    """Tests for read_transcript_entries function."""

    def test_reads_from_start(self, write_transcript):
        """Test reading all entries from the beginning."""
        path = write_transcript([user("a"), assistant("b")])

        page = read_transcript_entries(path, 0, 100)

        assert page.lines_read == 2
        assert page.entries == [user("a"), assistant("b")]

    def test_respects_start_line(self, write_transcript):
        """Test that lines before the cursor are skipped."""
        path = write_transcript([user("1"), user("2"), user("3")])

        page = read_transcript_entries(path, 2, 100)

        assert page.entries == [user("3")]
        assert page.lines_read == 1

    def test_respects_max_entries(self, write_transcript):
        """Test that at most max_entries lines are consumed."""
        path = write_transcript([user(str(i)) for i in range(5)])

        page = read_transcript_entries(path, 1, 2)

        assert page.entries == [user("1"), user("2")]
        assert page.lines_read == 2

    def test_blank_lines_not_indexed(self, write_transcript):
        """Test that blank lines do not move the cursor."""
        path = write_transcript([user("1"), "", user("2"), "  ", user("3")])

        page = read_transcript_entries(path, 1, 100)

        assert page.entries == [user("2"), user("3")]
        assert page.lines_read == 2

    def test_malformed_lines_consumed(self, write_transcript):
        """Test that malformed and non-object lines are read past without entries."""
        path = write_transcript([user("1"), "{broken", "[1, 2]", user("2")])

        page = read_transcript_entries(path, 0, 100)

        assert page.entries == [user("1"), user("2")]
        assert page.lines_read == 4

    def test_cursor_past_end(self, write_transcript):
        """Test that a cursor past the end reads nothing."""
        path = write_transcript([user("1")])

        page = read_transcript_entries(path, 5, 100)

        assert page.entries == []
        assert page.lines_read == 0

    def test_missing_file(self, temp_dir):
        """Test that a missing file reads nothing."""
        page = read_transcript_entries(str(temp_dir / "nope.jsonl"), 0, 100)
        assert page.entries == []
        assert page.lines_read == 0

    def test_zero_max_entries(self, write_transcript):
        """Test that a non-positive page size reads nothing."""
        path = write_transcript([user("1")])
        assert read_transcript_entries(path, 0, 0).lines_read == 0

    def test_oversized_line_stops_reading(self, write_transcript, mocker):
        """Test that a line above the size limit ends the read."""
        mocker.patch("codetracker.transcript.MAX_LINE_SIZE", 40)
        path = write_transcript([user("short"), user("x" * 100), user("after")])

        page = read_transcript_entries(path, 0, 100)

        assert page.entries == [user("short")]
        assert page.lines_read == 1


class TestFilterEntry:
    """Tests for filter_entry function."""

    def test_user_string(self):
        """Test that user string content is kept."""
        entry = filter_entry(user("  hello  "))
        assert entry.entry_type == "user"
        assert entry.entry_data == "hello"

    def test_user_string_list(self):
        """Test that string items in a user list are concatenated."""
        entry = filter_entry(user(["ab", {"type": "tool_result"}, "cd"]))
        assert entry.entry_data == "abcd"

    def test_user_blocks_only(self):
        """Test that a user list without strings is dropped."""
        assert filter_entry(user([{"type": "tool_result", "content": "x"}])) is None

    def test_assistant_text_blocks(self):
        """Test that assistant text blocks are joined with newlines."""
        entry = filter_entry(assistant("first", "second"))
        assert entry.entry_type == "assistant"
        assert entry.entry_data == "first\nsecond"

    def test_assistant_non_text_blocks_skipped(self):
        """Test that tool use and thinking blocks are skipped."""
        data = {
            "type": "assistant",
            "message": {
                "content": [
                    {"type": "thinking", "thinking": "hmm"},
                    {"type": "text", "text": "done"},
                    {"type": "tool_use", "name": "Edit"},
                ]
            },
        }
        assert filter_entry(data).entry_data == "done"

    def test_assistant_string_content_dropped(self):
        """Test that assistant content must be a block list."""
        assert filter_entry({"type": "assistant", "message": {"content": "plain"}}) is None

    def test_whitespace_only_dropped(self):
        """Test that whitespace-only text is dropped."""
        assert filter_entry(user("  \n ")) is None
        assert filter_entry(assistant(" ")) is None

    @pytest.mark.parametrize("entry_type", ["summary", "system", "file-history-snapshot", ""])
    def test_other_types_dropped(self, entry_type):
        """Test that non-conversation entry types are dropped."""
        assert filter_entry({"type": entry_type, "message": {"content": "x"}}) is None

    def test_missing_message(self):
        """Test that entries without a message are dropped."""
        assert filter_entry({"type": "user"}) is None

    def test_malformed_message(self):
        """Test that a wrongly shaped message is dropped."""
        assert filter_entry({"type": "user", "message": "text"}) is None
        assert filter_entry({"type": "user", "message": {"content": 5}}) is None
