"""Preflighter constants.

Single source of truth for requirement-marker syntax, default timeouts and
the operator-facing banner strings.
"""

from __future__ import annotations

# =============================================================================
# Requirement Markers
# =============================================================================

#: Prefix of a shell-computed requirement marker (``${command}``)
SHELL_MARKER_PREFIX: str = "${"

#: Suffix of a shell-computed requirement marker
SHELL_MARKER_SUFFIX: str = "}"

#: Marker requiring the variable to be present in the process environment
REQUIRED_MARKER: str = "<"

#: Characters trimmed from the end of a shell marker's output
SHELL_OUTPUT_TRAILING_CHARS: str = "\n\r\t "

# =============================================================================
# Checklist Sources
# =============================================================================

#: Prefix of a checklist source that is built purely from a runbook step
RUNBOOK_SOURCE_PREFIX: str = "runbook:"

#: Title given to checklists synthesized from a runbook step
RUNBOOK_CHECKLIST_TITLE: str = "Runbook Checklist"

# =============================================================================
# Skip Reasons
# =============================================================================

#: Reason shown for items skipped after an earlier failure
SKIP_REASON_ABORTED: str = "ABORTED"

#: Reason shown for manual items in unattended mode
SKIP_REASON_NO_CHECKS: str = "NO CHECKS"

# =============================================================================
# Timeouts and Retries
# =============================================================================

#: Default timeout for one automated check (seconds)
DEFAULT_CHECK_TIMEOUT: float = 300.0

#: Default timeout for one ``${command}`` marker (seconds)
DEFAULT_ENV_COMMAND_TIMEOUT: float = 30.0

#: Default timeout for one runbook service request (seconds)
DEFAULT_RUNBOOK_TIMEOUT: float = 10.0

#: Default number of retries for runbook service requests
DEFAULT_RUNBOOK_RETRIES: int = 3

#: Base delay for exponential backoff between runbook retries (seconds)
DEFAULT_RUNBOOK_RETRY_DELAY: float = 0.5

#: Default shell used for markers and checks
DEFAULT_SHELL: str = "bash"

# =============================================================================
# Banners
# =============================================================================

BANNER_RULE: str = "=" * 42

PASS_BANNER: str = "All checks are passing. You are clear to continue"

FAIL_BANNER: str = "There was a failed item. You are not clear to continue"
