"""Checklist fixtures.

Provides sample checklist YAML and model factories shared by the unit tests.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from preflighter.checklist.models import ChecklistFile, ChecklistItem, CheckSpec

SAMPLE_CHECKLIST_YAML = """\
title: Cluster Upgrade
env:
  REGION: us-east-1
  CONTEXT: "${echo prod-cluster}"
checklist:
  - title: Backups are recent
    check:
      run: "echo fresh"
  - title: Nodes are healthy
    check:
      script: |
        echo healthy
        exit 0
      tools: [sh]
  - title: On-call engineer notified
"""

RUNBOOK_CHECKLIST_YAML = """\
title: Deploy
runbookSteps:
  - deploy-step-7
  - deploy-step-8
checklist:
  - title: Local precondition
"""


def make_item(
    title: str,
    run: str | None = None,
    *,
    runbook_id: str | None = None,
    runbook_step: str | None = None,
    tools: list[str] | None = None,
) -> ChecklistItem:
    """Build a ChecklistItem, with a ``run`` check when ``run`` is given."""
    check = CheckSpec(run=run, tools=tools or []) if run is not None else None
    return ChecklistItem(
        title=title,
        check=check,
        runbook_id=runbook_id,
        runbook_step=runbook_step,
    )


@pytest.fixture
def sample_checklist_yaml() -> str:
    return SAMPLE_CHECKLIST_YAML


@pytest.fixture
def sample_checklist_path(temp_dir: Path, sample_checklist_yaml: str) -> Path:
    """Write the sample checklist to a temporary file."""
    path = temp_dir / "upgrade.yaml"
    path.write_text(sample_checklist_yaml)
    return path


@pytest.fixture
def runbook_checklist_path(temp_dir: Path) -> Path:
    path = temp_dir / "deploy.yaml"
    path.write_text(RUNBOOK_CHECKLIST_YAML)
    return path


@pytest.fixture
def three_item_checklist() -> ChecklistFile:
    """Checklist with two automated items around a manual one."""
    return ChecklistFile(
        title="Cluster Upgrade",
        filename="upgrade.yaml",
        checklist=[
            make_item("Backups are recent", "true"),
            make_item("Nodes are healthy", "false"),
            make_item("On-call engineer notified"),
        ],
    )
