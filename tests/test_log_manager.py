"""Tests for processors/log_manager.py - JSON run logs."""

from __future__ import annotations

import json
from pathlib import Path

from modules.types import LinkingConfig, LinkingReport, TextRange
from processors.log_manager import append_to_log, finalize_log_file, initialize_log_file


def _read(log_path: Path):
    return json.loads(log_path.read_text(encoding="utf-8"))


class TestRunLog:
    """Tests for the initialize / append / finalize cycle."""

    def test_full_cycle_is_valid_json(self, temp_dir: Path):
        log_path = temp_dir / "thesis_linked_citation_log.json"
        report = LinkingReport(
            document="thesis",
            bibliography_range=TextRange(100, 200),
            links_created=3,
            uncited=[4],
        )

        assert initialize_log_file(log_path, "thesis.docx", "/in/thesis.docx", "link", LinkingConfig())
        assert append_to_log(log_path, report.to_dict())
        assert finalize_log_file(log_path)

        entries = _read(log_path)
        assert len(entries) == 2
        assert entries[0]["input_item_name"] == "thesis.docx"
        assert entries[0]["mode"] == "link"
        assert entries[0]["configuration"]["anchor_prefix"] == "BIB"
        assert entries[1]["links_created"] == 3
        assert entries[1]["bibliography_found"] is True
        assert entries[1]["bibliography_range"] == {"start": 100, "end": 200}

    def test_header_only(self, temp_dir: Path):
        log_path = temp_dir / "log.json"

        initialize_log_file(log_path, "a.docx", "/a.docx", "check", LinkingConfig())
        finalize_log_file(log_path)

        assert len(_read(log_path)) == 1

    def test_reinitialize_truncates(self, temp_dir: Path):
        log_path = temp_dir / "log.json"
        initialize_log_file(log_path, "a.docx", "/a.docx", "link", LinkingConfig())
        append_to_log(log_path, {"first": True})
        finalize_log_file(log_path)

        initialize_log_file(log_path, "a.docx", "/a.docx", "unlink", LinkingConfig())
        finalize_log_file(log_path)

        entries = _read(log_path)
        assert len(entries) == 1
        assert entries[0]["mode"] == "unlink"

    def test_unwritable_location(self, temp_dir: Path):
        blocker = temp_dir / "blocker"
        blocker.write_text("x", encoding="utf-8")

        assert initialize_log_file(blocker / "log.json", "a", "a", "link", LinkingConfig()) is False

    def test_unserializable_entry(self, temp_dir: Path):
        log_path = temp_dir / "log.json"
        initialize_log_file(log_path, "a.docx", "/a.docx", "link", LinkingConfig())

        assert append_to_log(log_path, {"bad": object()}) is False
        finalize_log_file(log_path)
