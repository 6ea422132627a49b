"""Tests for processors/file_manager.py - File management utilities."""

from __future__ import annotations

from pathlib import Path

import pytest
from docx import Document

from modules.error_handler import FileProcessingError
from modules.types import ItemSpec
from processors.file_manager import (
    load_document,
    prepare_output_directory,
    resolve_log_path,
    resolve_output_path,
    save_document,
    should_skip_existing,
)


def _item(path: Path) -> ItemSpec:
    return ItemSpec("docx", path)


class TestResolveOutputPath:
    """Tests for resolve_output_path function."""

    def test_output_dir(self, temp_dir: Path):
        item = _item(Path("/data/thesis.docx"))

        result = resolve_output_path(item, temp_dir, "_linked")

        assert result == temp_dir / "thesis_linked.docx"

    def test_next_to_input(self, temp_dir: Path):
        item = _item(temp_dir / "paper.docx")

        assert resolve_output_path(item, None, "_linked") == temp_dir / "paper_linked.docx"

    def test_empty_suffix_in_other_dir(self, temp_dir: Path):
        item = _item(temp_dir / "in" / "paper.docx")

        assert resolve_output_path(item, temp_dir / "out", "") == temp_dir / "out" / "paper.docx"

    def test_overwriting_input_rejected(self, temp_dir: Path):
        item = _item(temp_dir / "paper.docx")

        with pytest.raises(FileProcessingError, match="overwrite"):
            resolve_output_path(item, temp_dir, "")


class TestResolveLogPath:
    """Tests for resolve_log_path function."""

    def test_log_beside_output(self, temp_dir: Path):
        output = temp_dir / "thesis_linked.docx"

        assert resolve_log_path(output) == temp_dir / "thesis_linked_citation_log.json"


class TestShouldSkipExisting:
    """Tests for should_skip_existing function."""

    def test_skip_when_exists(self, temp_dir: Path):
        output = temp_dir / "done.docx"
        output.write_bytes(b"")

        assert should_skip_existing(output, "skip") is True

    def test_overwrite_when_exists(self, temp_dir: Path):
        output = temp_dir / "done.docx"
        output.write_bytes(b"")

        assert should_skip_existing(output, "overwrite") is False

    def test_missing_output_not_skipped(self, temp_dir: Path):
        assert should_skip_existing(temp_dir / "new.docx", "skip") is False


class TestPrepareOutputDirectory:
    """Tests for prepare_output_directory."""

    def test_creates_nested_directory(self, temp_dir: Path):
        target = temp_dir / "linked" / "2026"

        assert prepare_output_directory(target) == target
        assert target.is_dir()

    def test_existing_directory_accepted(self, temp_dir: Path):
        assert prepare_output_directory(temp_dir) == temp_dir

    def test_file_in_the_way(self, temp_dir: Path):
        blocker = temp_dir / "linked"
        blocker.write_text("x", encoding="utf-8")

        with pytest.raises(FileProcessingError):
            prepare_output_directory(blocker)


class TestLoadAndSave:
    """Tests for load_document and save_document."""

    def test_save_creates_directory_and_reloads(self, temp_dir: Path):
        document = Document()
        document.add_paragraph("See [1].")
        output = temp_dir / "nested" / "out.docx"

        result = save_document(document, output)

        assert result == output
        assert output.exists()
        assert load_document(output).paragraphs[0].text == "See [1]."

    def test_missing_file(self, temp_dir: Path):
        with pytest.raises(FileProcessingError, match="not found"):
            load_document(temp_dir / "missing.docx")

    def test_directory_rejected(self, temp_dir: Path):
        with pytest.raises(FileProcessingError):
            load_document(temp_dir)

    def test_not_a_word_document(self, temp_dir: Path):
        fake = temp_dir / "notes.docx"
        fake.write_text("plain text, not a zip package", encoding="utf-8")

        with pytest.raises(FileProcessingError):
            load_document(fake)

    def test_save_failure_wrapped(self, temp_dir: Path):
        blocker = temp_dir / "blocker"
        blocker.write_text("x", encoding="utf-8")

        with pytest.raises(FileProcessingError, match="Could not save"):
            save_document(Document(), blocker / "out.docx")
