"""Debounced GS1 validation of the EAN being edited.

Each keystroke submits the current EAN. Lookups start only after the
input has been quiet for the debounce interval; a newer submission
cancels the in-flight lookup, and a response that arrives for a
superseded submission is discarded so the latest input always wins.
"""

import asyncio
import contextlib

import structlog

from variant_engine.application.rejection import normalize_ean, validate_ean
from variant_engine.domain.value_objects import Gs1Status
from variant_engine.infrastructure.config import Settings, settings
from variant_engine.infrastructure.gs1_client import (
    Gs1Client,
    Gs1ClientError,
    Gs1LookupResult,
)

logger = structlog.get_logger()

LOOKUP_FAILED_MESSAGE = "Failed to validate EAN number"


class Gs1Validator:
    """Tracks the latest GS1 status per normalized EAN.

    Example usage:
        validator = Gs1Validator(Gs1Client())
        validator.submit("8901234567890")
        status = await validator.wait()
    """

    def __init__(
        self,
        client: Gs1Client | None = None,
        debounce_seconds: float | None = None,
        app_settings: Settings | None = None,
    ) -> None:
        """Initialize validator.

        Args:
            client: GS1 client (created from settings when omitted).
            debounce_seconds: Quiet period before a lookup starts.
            app_settings: Settings to read defaults from.
        """
        source = app_settings or settings
        self.client = client or Gs1Client(app_settings=source)
        self.debounce_seconds = (
            debounce_seconds if debounce_seconds is not None else source.gs1_debounce_seconds
        )
        self.current_ean = ""
        self._statuses: dict[str, Gs1Status] = {}
        self._results: dict[str, Gs1LookupResult] = {}
        self._task: asyncio.Task[None] | None = None
        self._generation = 0

    # -------------------------------------------------------------------------
    # Input
    # -------------------------------------------------------------------------

    def submit(self, ean: str | None) -> Gs1Status:
        """Submit the EAN currently in the form.

        Must be called from a running event loop.

        Args:
            ean: Raw EAN as typed.

        Returns:
            PENDING when a lookup was scheduled, NOT_CHECKED otherwise.
        """
        self._supersede()
        normalized = normalize_ean(ean)
        if not normalized or validate_ean(normalized):
            self.current_ean = ""
            return Gs1Status.NOT_CHECKED

        self.current_ean = normalized
        self._statuses[normalized] = Gs1Status.PENDING
        self._results.pop(normalized, None)
        self._task = asyncio.create_task(self._lookup(normalized, self._generation))
        return Gs1Status.PENDING

    def _supersede(self) -> asyncio.Task[None] | None:
        self._generation += 1
        cancelled = None
        if self._task is not None and not self._task.done():
            self._task.cancel()
            cancelled = self._task
            if self._statuses.get(self.current_ean) is Gs1Status.PENDING:
                del self._statuses[self.current_ean]
            logger.debug("GS1 lookup superseded", ean=self.current_ean)
        self._task = None
        return cancelled

    async def _lookup(self, ean: str, generation: int) -> None:
        await asyncio.sleep(self.debounce_seconds)
        try:
            result = await self.client.lookup_by_ean(ean)
        except (Gs1ClientError, ValueError) as e:
            logger.warning("GS1 validation failed", ean=ean, error=str(e))
            result = Gs1LookupResult.failed(LOOKUP_FAILED_MESSAGE)

        if generation != self._generation:
            logger.debug("Discarding stale GS1 response", ean=ean)
            return
        self._statuses[ean] = result.status
        self._results[ean] = result

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def status(self, ean: str | None = None) -> Gs1Status:
        """Latest status of an EAN (the current one when omitted)."""
        key = normalize_ean(ean) if ean is not None else self.current_ean
        if not key:
            return Gs1Status.NOT_CHECKED
        return self._statuses.get(key, Gs1Status.NOT_CHECKED)

    def result(self, ean: str | None = None) -> Gs1LookupResult | None:
        """Latest lookup result of an EAN (the current one when omitted)."""
        key = normalize_ean(ean) if ean is not None else self.current_ean
        return self._results.get(key)

    @property
    def statuses(self) -> dict[str, Gs1Status]:
        """Snapshot of every known status keyed by normalized EAN."""
        return dict(self._statuses)

    async def wait(self) -> Gs1Status:
        """Wait for the current lookup to finish.

        Returns:
            Status of the current EAN.
        """
        if self._task is not None:
            await self._task
        return self.status()

    async def close(self) -> None:
        """Cancel any pending lookup and close the client."""
        cancelled = self._supersede()
        if cancelled is not None:
            with contextlib.suppress(asyncio.CancelledError):
                await cancelled
        await self.client.close()
