"""Secret redaction for text that leaves the process.

Failure notes sent to the runbook service embed raw check output, which may
contain credentials pulled in through the checklist environment. Values
flagged by Yelp's detect-secrets plugins are replaced before sending.
"""

from __future__ import annotations

from functools import lru_cache
from typing import TYPE_CHECKING, Any

from detect_secrets.core.plugins.util import get_mapping_from_secret_type_to_class

from preflighter.logging import get_logger

if TYPE_CHECKING:
    from detect_secrets.plugins.base import BasePlugin

__all__ = [
    "redact_secrets",
    "DEFAULT_DETECTORS",
    "REDACTED",
]

logger = get_logger(__name__)

REDACTED = "***REDACTED***"

# Secret types with low false positive rates on command output
DEFAULT_DETECTORS: tuple[str, ...] = (
    "AWS Access Key",
    "Azure Storage Account access key",
    "GitHub Token",
    "GitLab Token",
    "Private Key",
    "JSON Web Token",
    "Slack Token",
    "Stripe Access Key",
    "Twilio API Key",
    "Basic Auth Credentials",
    "OpenAI Token",
    "SendGrid API Key",
    "NPM tokens",
    "PyPI Token",
)


@lru_cache(maxsize=1)
def _get_detectors() -> dict[str, BasePlugin]:
    # get_mapping_from_secret_type_to_class() returns a union type that mypy
    # cannot infer.
    type_to_class: dict[str, Any] = get_mapping_from_secret_type_to_class()
    return {
        name: type_to_class[name]()
        for name in DEFAULT_DETECTORS
        if name in type_to_class
    }


def _scan_line(line: str) -> dict[str, set[str]]:
    """Map secret type to the secret values found in one line."""
    found: dict[str, set[str]] = {}
    for secret_type, detector in _get_detectors().items():
        try:
            values = {str(v) for v in detector.analyze_string(line) if v}
        except Exception as e:
            logger.debug("detector_failed", detector=secret_type, error=str(e))
            continue
        if values:
            found[secret_type] = values
    return found


def redact_secrets(content: str) -> str:
    """Replace detected secret values in ``content`` with a placeholder.

    Line structure is preserved; only the matched values are replaced.
    """
    if not content:
        return content

    redacted_lines: list[str] = []
    redactions = 0
    for line in content.split("\n"):
        for values in _scan_line(line).values():
            # Longest first so overlapping matches are fully covered
            for value in sorted(values, key=len, reverse=True):
                if value in line:
                    line = line.replace(value, REDACTED)
                    redactions += 1
        redacted_lines.append(line)

    if redactions:
        logger.info("secrets_redacted", count=redactions)
    return "\n".join(redacted_lines)
