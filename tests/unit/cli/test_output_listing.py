"""Unit tests for CLI output formatting."""

from __future__ import annotations

from io import StringIO

from rich.console import Console

from preflighter.checklist.models import ChecklistFile
from preflighter.cli.output import (
    format_error,
    format_listing,
    print_listing,
)
from tests.fixtures.checklists import make_item


class TestFormatError:
    def test_message_only(self) -> None:
        assert format_error("boom") == "Error: boom"

    def test_details(self) -> None:
        text = format_error(
            "There are missing executables from your path:",
            details=["‣ Did not find 'helm'", "‣ Did not find 'kubectl'"],
        )
        assert text.splitlines() == [
            "Error: There are missing executables from your path:",
            "  ‣ Did not find 'helm'",
            "  ‣ Did not find 'kubectl'",
        ]


class TestFormatListing:
    def test_running_index_across_files(self) -> None:
        checklists = [
            ChecklistFile(
                title="Upgrade",
                filename="upgrade.yaml",
                checklist=[make_item("Backups"), make_item("Drain")],
            ),
            ChecklistFile(
                title="Runbook Checklist",
                filename="runbook:deploy-step-7",
                checklist=[make_item("Freeze")],
            ),
        ]
        assert format_listing(checklists).splitlines() == [
            "In upgrade.yaml (Upgrade):",
            "  1. Backups",
            "  2. Drain",
            "",
            "In runbook:deploy-step-7 (Runbook Checklist):",
            "  3. Freeze",
            "",
            "3 items in total",
        ]

    def test_empty(self) -> None:
        assert format_listing([]) == "0 items in total"

    def test_print_listing_keeps_brackets(self) -> None:
        output = StringIO()
        console = Console(file=output, width=120, color_system=None)
        checklist = ChecklistFile(
            title="T", filename="f.yaml", checklist=[make_item("Check [prod] tag")]
        )
        print_listing(console, [checklist])
        assert "  1. Check [prod] tag" in output.getvalue()
