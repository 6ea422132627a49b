"""Tests for user_prompts module: selection parsing and interactive prompts.

Interactive functions are driven by patching ``builtins.input``.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from unittest.mock import patch

import pytest

from modules.user_prompts import (
    parse_selection,
    print_key_values,
    prompt_selection,
    prompt_yes_no,
)


# ============================================================================
# Test Fixtures
# ============================================================================
@dataclass
class MockItem:
    """Mock item class for testing selection functionality."""
    path: Path
    kind: str = "docx"

    def display_label(self) -> str:
        return f"Word document: {self.path.name} (from: {self.path.parent})"


@pytest.fixture
def sample_items() -> list[MockItem]:
    return [
        MockItem(Path("/theses/Chapter 1 Introduction.docx")),
        MockItem(Path("/theses/Chapter 2 Methods.docx")),
        MockItem(Path("/theses/Chapter 3 Results.docx")),
        MockItem(Path("/papers/Review 2021.docx")),
    ]


def display_func(item: MockItem) -> str:
    return item.display_label()


# ============================================================================
# parse_selection
# ============================================================================
class TestParseSelection:
    """Tests for parse_selection()."""

    def test_single_number(self):
        assert parse_selection("2", 4) == [1]

    def test_list_and_range(self):
        assert parse_selection("1,3-4", 4) == [0, 2, 3]

    def test_semicolons_and_spaces(self):
        assert parse_selection("1; 3", 4) == [0, 2]

    def test_duplicates_collapsed(self):
        assert parse_selection("2,2,1-2", 4) == [0, 1]

    @pytest.mark.parametrize("choice", ["0", "5", "3-5", "4-2", "x", "1-a"])
    def test_invalid(self, choice):
        with pytest.raises(ValueError):
            parse_selection(choice, 4)

    def test_single_mode_rejects_list(self):
        with pytest.raises(ValueError):
            parse_selection("1,2", 4, allow_multiple=False)


# ============================================================================
# prompt_selection
# ============================================================================
class TestPromptSelection:
    """Tests for prompt_selection()."""

    def test_select_range(self, sample_items):
        with patch("builtins.input", return_value="1-2"):
            selected = prompt_selection(sample_items, display_func)

        assert selected == sample_items[:2]

    def test_select_all(self, sample_items):
        with patch("builtins.input", return_value="all"):
            assert prompt_selection(sample_items, display_func) == sample_items

    def test_back(self, sample_items):
        with patch("builtins.input", return_value="back"):
            assert prompt_selection(sample_items, display_func, allow_back=True) is None

    def test_retries_after_invalid_input(self, sample_items, capsys):
        with patch("builtins.input", side_effect=["", "9", "4"]):
            selected = prompt_selection(sample_items, display_func)

        assert selected == [sample_items[3]]
        assert "Invalid selection" in capsys.readouterr().out

    def test_exit(self, sample_items):
        with patch("builtins.input", return_value="exit"):
            with pytest.raises(SystemExit):
                prompt_selection(sample_items, display_func)

    def test_empty_items(self):
        assert prompt_selection([], display_func) == []

    def test_long_labels_truncated(self, capsys):
        item = MockItem(Path("/x/" + "a" * 100 + ".docx"))

        with patch("builtins.input", return_value="1"):
            prompt_selection([item], display_func)

        assert "..." in capsys.readouterr().out


# ============================================================================
# prompt_yes_no
# ============================================================================
class TestPromptYesNo:
    """Tests for prompt_yes_no()."""

    @pytest.mark.parametrize("answer, expected", [("y", True), ("YES", True), ("n", False), ("no", False)])
    def test_answers(self, answer, expected):
        with patch("builtins.input", return_value=answer):
            assert prompt_yes_no("Proceed?") is expected

    def test_default_on_enter(self):
        with patch("builtins.input", return_value=""):
            assert prompt_yes_no("Proceed?", default=True) is True

    def test_reprompts_without_default(self):
        with patch("builtins.input", side_effect=["", "maybe", "y"]) as mock_input:
            assert prompt_yes_no("Proceed?") is True

        assert mock_input.call_count == 3

    def test_exit(self):
        with patch("builtins.input", return_value="quit"):
            with pytest.raises(SystemExit):
                prompt_yes_no("Proceed?")


# ============================================================================
# print_key_values
# ============================================================================
class TestPrintKeyValues:
    """Tests for print_key_values()."""

    def test_values_aligned(self, capsys):
        print_key_values([("Anchors created", 4), ("Links", 2)])

        lines = capsys.readouterr().out.splitlines()
        assert len(lines) == 2
        assert len(lines[0]) == len(lines[1])

    def test_empty_rows(self, capsys):
        print_key_values([])

        assert capsys.readouterr().out == ""
