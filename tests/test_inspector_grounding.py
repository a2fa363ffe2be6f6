# FILE: tests/test_inspector_grounding.py
"""Tests for sandboxed listings/inspections and the deterministic summaries built on them."""

import os

import pytest

from vocapp.fs import (
    build_deterministic_inspection_summary,
    build_grounding_command,
    build_listing_summary,
    build_voice_summary,
    quote_for_shell,
    run_internal_inspection,
    run_internal_listing,
    safe_resolve_target,
    target_exists,
)
from vocapp.security.command_policy import has_shell_operators, tokenize
from vocapp.translation.schemas import ListingKind


class TestSafeResolve:
    """Targets never escape the root."""

    def test_inside_root(self, workspace):
        root = str(workspace)
        assert safe_resolve_target("FutbolDB/src", root) == os.path.join(root, "FutbolDB", "src")
        assert safe_resolve_target("", root) == os.path.normpath(root)

    def test_parent_escape_rejected(self, workspace):
        assert safe_resolve_target("../etc", str(workspace)) is None
        assert safe_resolve_target("FutbolDB/../../x", str(workspace)) is None

    def test_target_exists(self, workspace):
        assert target_exists("FutbolDB", str(workspace)) is True
        assert target_exists("Ghost", str(workspace)) is False
        assert target_exists("..", str(workspace)) is False


class TestInternalListing:
    """One-level listings filtered by kind and hidden prefix."""

    def test_directories(self, workspace):
        result = run_internal_listing(".", ListingKind.DIRS, False, str(workspace))
        assert result.ok is True
        assert result.command == "internal:list dirs ."
        assert result.stdout_lines() == ["AndroidDevelpment", "FutbolDB", "Unity"]

    def test_files_hidden_excluded(self, workspace):
        result = run_internal_listing(".", ListingKind.FILES, False, str(workspace))
        assert result.stdout_lines() == ["notes.txt"]

    def test_files_hidden_included(self, workspace):
        result = run_internal_listing(".", ListingKind.FILES, True, str(workspace))
        assert result.stdout_lines() == [".secret", "notes.txt"]

    def test_entries_of_subfolder(self, workspace):
        result = run_internal_listing("FutbolDB", ListingKind.ENTRIES, False, str(workspace))
        assert result.stdout_lines() == ["README.md", "src"]

    def test_missing_target_is_not_a_failure(self, workspace):
        result = run_internal_listing("Ghost", ListingKind.DIRS, False, str(workspace))
        assert result.ok is True
        assert result.stdout == "Directory not found: Ghost\n"

    def test_escape_reads_as_not_found(self, workspace):
        result = run_internal_listing("../..", ListingKind.ENTRIES, True, str(workspace))
        assert result.ok is True
        assert result.stdout.startswith("Directory not found:")


class TestInternalInspection:
    """Top-level listing plus a capped depth-2 walk."""

    def test_layout(self, workspace):
        result = run_internal_inspection("FutbolDB", str(workspace))
        assert result.ok is True
        assert result.command == "internal:inspect FutbolDB"
        assert result.stdout_lines() == [
            "INSPECTION: FutbolDB",
            "README.md",
            "src/",
            "---DETAIL (max 200)---",
            "FutbolDB/README.md",
            "FutbolDB/src",
            "FutbolDB/src/main.py",
        ]

    def test_walk_stops_at_depth_two(self, workspace):
        (workspace / "deep" / "l1" / "l2" / "l3").mkdir(parents=True)
        lines = run_internal_inspection("deep", str(workspace)).stdout_lines()
        assert "deep/l1" in lines
        assert "deep/l1/l2" in lines
        assert "deep/l1/l2/l3" not in lines

    def test_detail_cap(self, workspace):
        lines = run_internal_inspection("FutbolDB", str(workspace), max_items=1).stdout_lines()
        divider = lines.index("---DETAIL (max 1)---")
        assert lines[divider + 1:] == ["FutbolDB/README.md"]

    def test_not_found(self, workspace):
        result = run_internal_inspection("Ghost", str(workspace))
        assert result.ok is True
        assert result.stdout.startswith("Not found: Ghost\n---PWD---\n")


class TestDeterministicSummary:
    """Counts built only from observed entries."""

    def test_counts_folders_and_files(self, workspace):
        stdout = run_internal_inspection("FutbolDB", str(workspace)).stdout
        assert build_deterministic_inspection_summary("FutbolDB", stdout) == (
            "The folder FutbolDB contains 1 folder and 1 file at the top level: README.md, src."
        )

    def test_empty_folder(self, workspace):
        (workspace / "Empty").mkdir()
        stdout = run_internal_inspection("Empty", str(workspace)).stdout
        assert build_deterministic_inspection_summary("Empty", stdout) == "The folder Empty is empty."

    def test_not_an_inspection(self):
        assert build_deterministic_inspection_summary("FutbolDB", "total 0\n") == ""
        assert build_deterministic_inspection_summary("FutbolDB", "INSPECTION: Unity\nA/\n") == ""

    def test_long_preview_is_elided(self):
        names = "\n".join(f"f{i}" for i in range(10))
        summary = build_deterministic_inspection_summary("X", f"INSPECTION: X\n{names}\n")
        assert "0 folders and 10 files" in summary
        assert summary.endswith("f7, ....")


class TestListingSummary:
    def test_bullets(self):
        assert build_listing_summary(ListingKind.DIRS, False, ".", "A\nB\n") == (
            "Folders in . (hidden excluded):\n- A\n- B"
        )

    def test_empty(self):
        assert build_listing_summary(ListingKind.FILES, True, "src", "") == (
            "Files in src (including hidden): nothing found."
        )

    def test_not_found_passes_through(self):
        assert build_listing_summary(ListingKind.DIRS, False, "Ghost", "Directory not found: Ghost\n") == (
            "Directory not found: Ghost"
        )

    def test_error(self):
        assert build_listing_summary(ListingKind.DIRS, False, "x", "", "Permission denied") == (
            "Could not list x. Error: Permission denied"
        )


class TestVoiceSummary:
    """Short spoken renditions."""

    def test_listing_preview(self):
        summary = "Folders in . (hidden excluded):\n" + "\n".join(f"- d{i}" for i in range(7))
        assert build_voice_summary(summary, False) == (
            "Folders in . (hidden excluded): 7 items. d0, d1, d2, d3, d4, and more."
        )

    def test_short_listing_has_no_tail(self):
        summary = "Files in src (hidden excluded):\n- a.py\n- b.py"
        assert build_voice_summary(summary, False) == "Files in src (hidden excluded): 2 items. a.py, b.py."

    def test_long_requested_returns_full_text(self):
        text = "word " * 100
        assert build_voice_summary(text, True) == text.strip()

    def test_long_text_is_cut(self):
        voice = build_voice_summary("word " * 100, False)
        assert voice.endswith(".")
        assert len(voice) <= 251

    def test_empty(self):
        assert build_voice_summary("", False) == ""
        assert build_voice_summary(None, True) == ""


class TestGroundingCommand:
    """The proposed inspection command passes the executor's own checks."""

    def test_root(self):
        assert build_grounding_command(None) == "ls -la"
        assert build_grounding_command(".") == "ls -la"

    def test_target_is_quoted(self):
        command = build_grounding_command("My Project")
        assert command == "ls -la 'My Project'"
        assert has_shell_operators(command) is False
        assert tokenize(command) == ["ls", "-la", "My Project"]

    def test_single_quote_in_name(self):
        command = build_grounding_command("it's")
        assert command == "ls -la " + quote_for_shell("it's")
        assert tokenize(command) == ["ls", "-la", "it's"]


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
