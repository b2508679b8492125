"""HTTP client for the runbook tracking service.

Endpoints, relative to the configured base URL:

- ``GET  /steps/{step_id}/checklist`` returns ``{"items": [...]}`` (or a bare
  list) where each item has ``id``, ``title`` and an optional ``check``.
- ``PUT  /steps/{step_id}/checklist/{item_id}`` accepts
  ``{"status": "completed" | "failed", "note": "..."}``.

Transient failures (timeouts, connection errors, HTTP 429 and 5xx) are
retried with exponential backoff.
"""

from __future__ import annotations

from typing import Any
from urllib.parse import quote

import aiohttp
from pydantic import ValidationError
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from preflighter.checklist.models import ChecklistItem, CheckSpec
from preflighter.config import RunbookConfig
from preflighter.constants import (
    DEFAULT_RUNBOOK_RETRIES,
    DEFAULT_RUNBOOK_RETRY_DELAY,
    DEFAULT_RUNBOOK_TIMEOUT,
)
from preflighter.exceptions import (
    RunbookConfigError,
    RunbookError,
    RunbookFetchError,
    RunbookUpdateError,
)
from preflighter.logging import get_logger
from preflighter.runbook.models import ItemStatus

__all__ = ["RunbookClient", "RETRYABLE_STATUS_CODES"]

logger = get_logger(__name__)

#: HTTP status codes that are retried in addition to all 5xx responses
RETRYABLE_STATUS_CODES: frozenset[int] = frozenset({408, 429})

#: Upper bound for the exponential backoff between retries (seconds)
MAX_RETRY_WAIT: float = 8.0


class _RetryableRunbookError(Exception):
    """Internal exception to signal a retryable request failure."""

    pass


class RunbookClient:
    """Async client for fetching runbook checklists and reporting outcomes.

    Args:
        base_url: Base URL of the runbook service.
        token: Optional bearer token.
        timeout: Total timeout per HTTP request in seconds.
        max_retries: Retries for transient failures.
        retry_delay: Base delay for exponential backoff.

    Example:
        ```python
        client = RunbookClient.from_config(config.runbook)
        items = await client.checklist_from_runbook("deploy-step-7")
        await client.update_checklist_item(
            "deploy-step-7", items[0].runbook_id, ItemStatus.COMPLETED
        )
        ```
    """

    def __init__(
        self,
        base_url: str,
        *,
        token: str | None = None,
        timeout: float = DEFAULT_RUNBOOK_TIMEOUT,
        max_retries: int = DEFAULT_RUNBOOK_RETRIES,
        retry_delay: float = DEFAULT_RUNBOOK_RETRY_DELAY,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._token = token
        self._timeout = timeout
        self._max_retries = max_retries
        self._retry_delay = retry_delay

    @classmethod
    def from_config(cls, config: RunbookConfig) -> RunbookClient:
        """Create a client from the ``runbook`` configuration section.

        Raises:
            RunbookConfigError: If no service URL is configured.
        """
        if not config.url:
            raise RunbookConfigError(
                "No runbook service URL configured "
                "(set PREFLIGHTER_RUNBOOK__URL or runbook.url in preflighter.yaml)"
            )
        return cls(
            config.url,
            token=config.token,
            timeout=config.timeout_seconds,
            max_retries=config.max_retries,
            retry_delay=config.retry_delay,
        )

    @property
    def base_url(self) -> str:
        return self._base_url

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        return headers

    def _url(self, *segments: str) -> str:
        return "/".join([self._base_url, *(quote(s, safe="") for s in segments)])

    async def _request(
        self,
        method: str,
        url: str,
        *,
        payload: dict[str, Any] | None = None,
        error: RunbookError,
        expect_json: bool = True,
    ) -> Any:
        """Send a request with retries and return the decoded JSON body.

        Args:
            method: HTTP method.
            url: Absolute request URL.
            payload: Optional JSON body.
            error: Error raised (chained) when the request ultimately fails.
                Its message is used as the prefix of the raised error.
            expect_json: Decode and return the response body.

        Raises:
            RunbookError: A copy of ``error`` with the failure detail appended.
        """

        async def _send() -> Any:
            timeout = aiohttp.ClientTimeout(total=self._timeout)
            try:
                async with (
                    aiohttp.ClientSession(
                        timeout=timeout, headers=self._headers()
                    ) as session,
                    session.request(method, url, json=payload) as resp,
                ):
                    if resp.status >= 500 or resp.status in RETRYABLE_STATUS_CODES:
                        text = await resp.text()
                        raise _RetryableRunbookError(f"HTTP {resp.status}: {text}")
                    if resp.status >= 400:
                        text = await resp.text()
                        raise _with_detail(error, f"HTTP {resp.status}: {text}")
                    if not expect_json:
                        return None
                    try:
                        return await resp.json(content_type=None)
                    except ValueError as e:
                        raise _with_detail(error, f"invalid JSON: {e}") from e
            except TimeoutError:
                raise _RetryableRunbookError("request timed out") from None
            except aiohttp.ClientError as e:
                raise _RetryableRunbookError(f"client error: {e}") from e

        try:
            async for attempt in AsyncRetrying(
                stop=stop_after_attempt(self._max_retries + 1),
                wait=wait_exponential(
                    multiplier=self._retry_delay,
                    min=self._retry_delay,
                    max=MAX_RETRY_WAIT,
                ),
                retry=retry_if_exception_type(_RetryableRunbookError),
                reraise=True,
            ):
                with attempt:
                    try:
                        return await _send()
                    except _RetryableRunbookError as e:
                        logger.warning(
                            "runbook_request_failed",
                            method=method,
                            url=url,
                            attempt=attempt.retry_state.attempt_number,
                            error=str(e),
                        )
                        raise
        except _RetryableRunbookError as e:
            raise _with_detail(error, str(e)) from e

    async def checklist_from_runbook(self, step_id: str) -> list[ChecklistItem]:
        """Fetch the ordered checklist items of a runbook step.

        Args:
            step_id: Runbook step identifier.

        Returns:
            Checklist items linked to ``step_id``, in service order.

        Raises:
            RunbookFetchError: If the request fails or the payload is invalid.
        """
        data = await self._request(
            "GET",
            self._url("steps", step_id, "checklist"),
            error=RunbookFetchError(
                f"Could not fetch checklist for step {step_id}", step_id=step_id
            ),
        )
        items = _parse_items(step_id, data)
        logger.info("runbook_step_fetched", step_id=step_id, items=len(items))
        return items

    async def update_checklist_item(
        self,
        step_id: str,
        item_id: str,
        status: ItemStatus,
        note: str = "",
    ) -> None:
        """Report the outcome of a checklist item.

        Raises:
            RunbookUpdateError: If the update cannot be delivered after retries.
        """
        await self._request(
            "PUT",
            self._url("steps", step_id, "checklist", item_id),
            payload={"status": status.value, "note": note},
            error=RunbookUpdateError(
                f"Could not update item {item_id} of step {step_id}",
                step_id=step_id,
                item_id=item_id,
            ),
            expect_json=False,
        )
        logger.info(
            "runbook_item_updated",
            step_id=step_id,
            item_id=item_id,
            status=status.value,
        )


def _with_detail(error: RunbookError, detail: str) -> RunbookError:
    """Return ``error`` with ``detail`` appended to its message."""
    message = f"{error.message}: {detail}"
    error.message = message
    error.args = (message,)
    return error


def _parse_items(step_id: str, data: Any) -> list[ChecklistItem]:
    raw_items = data.get("items") if isinstance(data, dict) else data
    if not isinstance(raw_items, list):
        raise RunbookFetchError(
            f"Could not fetch checklist for step {step_id}: "
            "response has no 'items' list",
            step_id=step_id,
        )

    items: list[ChecklistItem] = []
    for index, raw in enumerate(raw_items):
        if not isinstance(raw, dict) or not raw.get("id") or not raw.get("title"):
            raise RunbookFetchError(
                f"Could not fetch checklist for step {step_id}: "
                f"item {index} needs an 'id' and a 'title'",
                step_id=step_id,
            )
        try:
            check = raw.get("check")
            items.append(
                ChecklistItem(
                    title=str(raw["title"]),
                    check=CheckSpec.model_validate(check) if check else None,
                    runbook_id=str(raw["id"]),
                    runbook_step=step_id,
                )
            )
        except ValidationError as e:
            raise RunbookFetchError(
                f"Could not fetch checklist for step {step_id}: "
                f"invalid item {index}: {e.errors()[0]['msg']}",
                step_id=step_id,
            ) from e
    return items
