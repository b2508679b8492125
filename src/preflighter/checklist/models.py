"""Data models for checklists and checklist items.

Checklists are mutable pydantic models: they are built once while loading,
updated in place during environment resolution and runbook expansion, and
only read afterwards.
"""

from __future__ import annotations

from typing import Self

from pydantic import BaseModel, ConfigDict, Field, model_validator

__all__ = ["CheckSpec", "ChecklistItem", "ChecklistFile"]


class CheckSpec(BaseModel):
    """Automated check attached to a checklist item.

    Exactly one of ``run`` or ``script`` must be given.

    Attributes:
        run: One-line shell command, executed as ``<interpreter> -c <run>``.
        script: Inline script body, written to the run's temporary directory
            and executed as ``<interpreter> <file>``.
        interpreter: Program executing the check. Defaults to the configured
            shell when omitted.
        tools: Additional executables the check needs on PATH.
        timeout: Per-check timeout in seconds, overriding the configured one.
    """

    model_config = ConfigDict(extra="forbid")

    run: str | None = None
    script: str | None = None
    interpreter: str | None = None
    tools: list[str] = Field(default_factory=list)
    timeout: float | None = Field(default=None, gt=0.0)

    @model_validator(mode="after")
    def check_single_source(self) -> Self:
        if (self.run is None) == (self.script is None):
            raise ValueError("a check needs exactly one of 'run' or 'script'")
        return self


class ChecklistItem(BaseModel):
    """One checkable unit of a checklist.

    Attributes:
        title: Operator-facing description.
        check: Optional automated check. Items without one are manual-only.
        runbook_id: Identifier of the linked runbook item, if any.
        runbook_step: Runbook step the linked item belongs to, if any.
    """

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    title: str = Field(min_length=1)
    check: CheckSpec | None = None
    runbook_id: str | None = Field(default=None, alias="runbookId")
    runbook_step: str | None = Field(default=None, alias="runbookStep")

    @model_validator(mode="after")
    def check_runbook_linkage(self) -> Self:
        if bool(self.runbook_id) != bool(self.runbook_step):
            raise ValueError(
                "'runbook_id' and 'runbook_step' must be set together"
            )
        return self

    @property
    def is_linked(self) -> bool:
        """True if the item is linked to a runbook entry."""
        return bool(self.runbook_id)


class ChecklistFile(BaseModel):
    """One loaded or synthesized checklist source.

    Attributes:
        title: Label shown to the operator.
        filename: Origin of the checklist, or ``runbook:<step>`` for
            checklists synthesized from a runbook step.
        env: Variable name to requirement marker. Markers are replaced with
            their resolved values during environment resolution.
        checklist: Ordered checklist items.
        runbook_steps: Runbook steps whose items are appended to ``checklist``.
    """

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    title: str = ""
    filename: str = ""
    env: dict[str, str] = Field(default_factory=dict)
    checklist: list[ChecklistItem] = Field(default_factory=list)
    runbook_steps: list[str] = Field(default_factory=list, alias="runbookSteps")

    @property
    def needs_runbook(self) -> bool:
        """True if this checklist cannot be completed without the runbook service."""
        return bool(self.runbook_steps) or any(
            item.is_linked for item in self.checklist
        )
