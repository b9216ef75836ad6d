"""Tests for codetracker.scanner module."""

import hashlib
import os
import sys

import pytest

from codetracker.config import Config
from codetracker.scanner import FileInfo, Scanner, compute_file_hash


def make_config(**overrides) -> Config:
    """Build a Config tracking .py and .txt files by default."""
    data = {"track_extensions": [".py", ".txt"]}
    data.update(overrides)
    return Config.model_validate(data)


def write(root, relative_path: str, content) -> None:
    """Write a file below root, creating parent directories."""
    path = root / relative_path
    path.parent.mkdir(parents=True, exist_ok=True)
    if isinstance(content, bytes):
        path.write_bytes(content)
    else:
        path.write_text(content)


class TestComputeFileHash:
    """Tests for compute_file_hash function."""

    def test_sha256_hex(self):
        """Test that the hash is the lower-case SHA256 hex digest."""
        assert compute_file_hash(b"print(1)\n") == hashlib.sha256(b"print(1)\n").hexdigest()
        assert len(compute_file_hash(b"")) == 64


class TestScan:
    """Tests for Scanner.scan."""

    def test_collects_tracked_files(self, temp_dir):
        """Test that files with tracked extensions are collected."""
        write(temp_dir, "a.py", "print(1)\n")
        write(temp_dir, "notes.txt", "x")
        write(temp_dir, "image.png", b"\x89PNG")

        files = Scanner(temp_dir, make_config()).scan()

        assert set(files) == {"a.py", "notes.txt"}
        info = files["a.py"]
        assert isinstance(info, FileInfo)
        assert info.relative_path == "a.py"
        assert info.hash == hashlib.sha256(b"print(1)\n").hexdigest()
        assert info.content == "print(1)\n"
        assert info.size == 9

    def test_nested_paths_use_forward_slashes(self, temp_dir):
        """Test that nested keys are relative and slash separated."""
        write(temp_dir, "pkg/sub/mod.py", "x = 1\n")

        files = Scanner(temp_dir, make_config()).scan()

        assert "pkg/sub/mod.py" in files
        assert files["pkg/sub/mod.py"].relative_path == "pkg/sub/mod.py"

    def test_extension_filter(self, temp_dir):
        """Test that only listed extensions are emitted."""
        write(temp_dir, "a.py", "")
        write(temp_dir, "b.txt", "")

        files = Scanner(temp_dir, make_config(track_extensions=[".py"])).scan()

        assert set(files) == {"a.py"}

    def test_no_extensions_tracks_nothing(self, temp_dir):
        """Test that an empty track_extensions list tracks nothing."""
        write(temp_dir, "a.py", "")

        files = Scanner(temp_dir, make_config(track_extensions=[])).scan()

        assert files == {}

    def test_files_without_extension_skipped(self, temp_dir):
        """Test that extension-less files are not tracked."""
        write(temp_dir, "Makefile", "all:\n")

        assert Scanner(temp_dir, make_config()).scan() == {}

    def test_dotfiles_ignored(self, temp_dir):
        """Test that dotfiles and dot-directories are never emitted."""
        write(temp_dir, ".hidden.py", "")
        write(temp_dir, ".git/hooks/pre-commit.py", "")
        write(temp_dir, "src/.cache/x.py", "")
        write(temp_dir, ".codetracker/cache/last.py", "")
        write(temp_dir, "src/ok.py", "")

        files = Scanner(temp_dir, make_config(track_extensions=[".py"])).scan()

        assert set(files) == {"src/ok.py"}

    def test_ignore_patterns(self, temp_dir):
        """Test that configured ignore patterns exclude files and directories."""
        write(temp_dir, "node_modules/lib/index.py", "")
        write(temp_dir, "build/out.py", "")
        write(temp_dir, "src/generated_pb2.py", "")
        write(temp_dir, "src/app.py", "")

        config = make_config(ignore_patterns=["node_modules/", "build/**", "*_pb2.py"])
        files = Scanner(temp_dir, config).scan()

        assert set(files) == {"src/app.py"}

    def test_component_pattern_prunes_nested_directory(self, temp_dir):
        """Test that a slash-less pattern prunes matching directories at any depth."""
        write(temp_dir, "web/vendor/lib.py", "")
        write(temp_dir, "web/app.py", "")

        files = Scanner(temp_dir, make_config(ignore_patterns=["vendor"])).scan()

        assert set(files) == {"web/app.py"}

    def test_size_filter(self, temp_dir):
        """Test that files above max_file_size are skipped."""
        write(temp_dir, "small.py", "x" * 10)
        write(temp_dir, "exact.py", "x" * 20)
        write(temp_dir, "large.py", "x" * 21)

        files = Scanner(temp_dir, make_config(max_file_size=20)).scan()

        assert set(files) == {"small.py", "exact.py"}

    def test_content_kept_verbatim(self, temp_dir):
        """Test that CRLF line endings are not normalized."""
        write(temp_dir, "win.py", b"a\r\nb\r\n")

        info = Scanner(temp_dir, make_config()).scan()["win.py"]

        assert info.content == "a\r\nb\r\n"
        assert info.size == 6
        assert info.hash == hashlib.sha256(b"a\r\nb\r\n").hexdigest()

    def test_undecodable_bytes_replaced(self, temp_dir):
        """Test that invalid UTF-8 is replaced while the hash covers raw bytes."""
        write(temp_dir, "bin.txt", b"ok\xff")

        info = Scanner(temp_dir, make_config()).scan()["bin.txt"]

        assert info.content == "ok�"
        assert info.hash == hashlib.sha256(b"ok\xff").hexdigest()
        assert info.size == 3

    def test_idempotent(self, temp_dir):
        """Test that scanning twice yields the same fingerprints."""
        write(temp_dir, "a.py", "1")
        write(temp_dir, "b/c.txt", "2")
        scanner = Scanner(temp_dir, make_config())

        first = scanner.scan()
        second = scanner.scan()

        assert {p: (i.hash, i.size) for p, i in first.items()} == {
            p: (i.hash, i.size) for p, i in second.items()
        }

    @pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks not supported")
    def test_symlinks_skipped(self, temp_dir):
        """Test that symlinks are not treated as regular files."""
        write(temp_dir, "real.py", "x")
        os.symlink(temp_dir / "real.py", temp_dir / "link.py")

        files = Scanner(temp_dir, make_config()).scan()

        assert set(files) == {"real.py"}

    def test_unreadable_file_skipped(self, temp_dir, mocker):
        """Test that a read error skips only the affected file."""
        write(temp_dir, "a.py", "1")
        write(temp_dir, "b.py", "2")
        real_open = open

        def flaky_open(path, *args, **kwargs):
            if str(path).endswith("b.py"):
                raise PermissionError("denied")
            return real_open(path, *args, **kwargs)

        mocker.patch("builtins.open", side_effect=flaky_open)

        files = Scanner(temp_dir, make_config()).scan()

        assert set(files) == {"a.py"}

    @pytest.mark.skipif(sys.platform != "linux", reason="needs a filesystem accepting arbitrary name bytes")
    def test_undecodable_file_name_skipped(self, temp_dir):
        """Test that a file whose name is not valid UTF-8 is skipped without failing the scan."""
        write(temp_dir, "a.py", "1")
        with open(os.path.join(os.fsencode(temp_dir), b"bad\xff.py"), "wb") as f:
            f.write(b"2")

        files = Scanner(temp_dir, make_config()).scan()

        assert set(files) == {"a.py"}

    def test_missing_root(self, temp_dir):
        """Test that a missing root yields an empty scan."""
        assert Scanner(temp_dir / "missing", make_config()).scan() == {}


class TestShouldIgnore:
    """Tests for Scanner.should_ignore."""

    def test_dot_component(self, temp_dir):
        """Test that a dot basename is ignored."""
        scanner = Scanner(temp_dir, make_config())
        assert scanner.should_ignore(".env")
        assert scanner.should_ignore("src/.venv")
        assert not scanner.should_ignore("src/env")
