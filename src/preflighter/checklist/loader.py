"""Load checklist sources into ChecklistFile models.

A source is either a path to a YAML checklist file or ``runbook:<step>``,
which yields a checklist built purely from one runbook step.
"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

import yaml
from pydantic import ValidationError

from preflighter.checklist.models import ChecklistFile
from preflighter.constants import RUNBOOK_CHECKLIST_TITLE, RUNBOOK_SOURCE_PREFIX
from preflighter.exceptions import ChecklistLoadError
from preflighter.logging import get_logger

__all__ = [
    "load_checklist",
    "load_checklist_sources",
    "runbook_checklist",
    "is_runbook_source",
]

logger = get_logger(__name__)


def is_runbook_source(source: str) -> bool:
    return source.startswith(RUNBOOK_SOURCE_PREFIX)


def runbook_checklist(step_id: str) -> ChecklistFile:
    """Synthesize a checklist whose items all come from one runbook step.

    Args:
        step_id: Runbook step identifier.

    Returns:
        A ChecklistFile with no local items and a single runbook step.

    Raises:
        ChecklistLoadError: If the step identifier is empty.
    """
    if not step_id:
        raise ChecklistLoadError(
            f"Missing runbook step in '{RUNBOOK_SOURCE_PREFIX}' source"
        )
    return ChecklistFile(
        title=RUNBOOK_CHECKLIST_TITLE,
        filename=f"{RUNBOOK_SOURCE_PREFIX}{step_id}",
        runbook_steps=[step_id],
    )


def _format_validation_error(error: ValidationError) -> str:
    parts = []
    for err in error.errors():
        location = ".".join(str(loc) for loc in err["loc"])
        parts.append(f"{location}: {err['msg']}" if location else err["msg"])
    return "; ".join(parts)


def load_checklist(path: Path | str) -> ChecklistFile:
    """Load and validate a YAML checklist file.

    Args:
        path: Path to the checklist file.

    Returns:
        The parsed checklist. ``filename`` is set to ``path`` as given.

    Raises:
        ChecklistLoadError: If the file is unreadable, not valid YAML, or
            does not match the checklist schema.
    """
    path = Path(path)
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ChecklistLoadError(
            f"Unable to read checklist {path}: {e.strerror or e}", path=path
        ) from e

    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ChecklistLoadError(f"Invalid YAML in {path}: {e}", path=path) from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ChecklistLoadError(
            f"Checklist {path} must contain a mapping at the top level", path=path
        )

    # Env values are markers; YAML scalars such as 8080 or true become strings.
    env = data.get("env")
    if isinstance(env, dict):
        data["env"] = {
            str(k): "" if v is None else str(v) for k, v in env.items()
        }

    try:
        checklist = ChecklistFile.model_validate({**data, "filename": str(path)})
    except ValidationError as e:
        raise ChecklistLoadError(
            f"Invalid checklist {path}: {_format_validation_error(e)}", path=path
        ) from e

    logger.debug(
        "checklist_loaded",
        path=str(path),
        items=len(checklist.checklist),
        runbook_steps=len(checklist.runbook_steps),
    )
    return checklist


def load_checklist_sources(sources: Iterable[str]) -> list[ChecklistFile]:
    """Load every checklist source in the order given.

    Args:
        sources: File paths and/or ``runbook:<step>`` references.

    Returns:
        One ChecklistFile per source, in the same order.

    Raises:
        ChecklistLoadError: On the first source that fails to load.
    """
    checklists: list[ChecklistFile] = []
    for source in sources:
        if is_runbook_source(source):
            checklists.append(
                runbook_checklist(source[len(RUNBOOK_SOURCE_PREFIX) :])
            )
        else:
            checklists.append(load_checklist(source))
    return checklists
