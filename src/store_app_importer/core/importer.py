"""
Application creation against the management backend.

The backend's create call is eventually consistent for the next operation
(assignment), so after a successful create the importer waits before handing
control back: either a fixed settling delay, or bounded polling until the app
reports itself as published.
"""

import asyncio
import logging

import httpx

from store_app_importer.clients.graph import GraphClient
from store_app_importer.core.errors import ImportRejected, ImportTimedOut
from store_app_importer.core.resilience import ExponentialBackoff
from store_app_importer.models.backend import BackendAppDescriptor

logger = logging.getLogger(__name__)

DEFAULT_SETTLE_DELAY = 3.0
PUBLISHED_STATE = "published"


class AppImporter:
    """Creates application resources and waits for them to settle."""

    def __init__(
        self,
        graph: GraphClient,
        settle_delay: float = DEFAULT_SETTLE_DELAY,
        poll: bool = False,
        backoff: ExponentialBackoff | None = None,
        sleep=asyncio.sleep,
    ):
        self.graph = graph
        self.settle_delay = settle_delay
        self.poll = poll
        self.backoff = backoff or ExponentialBackoff()
        self._sleep = sleep

    async def create(self, app: BackendAppDescriptor) -> str:
        """
        Submit the descriptor and return the backend-assigned application id.

        Raises:
            ImportRejected: Non-2xx response, transport error, or no id returned.
            ImportTimedOut: Poll mode only, the app never reached published.
        """
        try:
            resp = await self.graph.create_mobile_app(app.to_payload())
        except httpx.HTTPError as e:
            raise ImportRejected(f"Create request failed ({type(e).__name__}): {e}") from e

        if not resp.is_success:
            raise ImportRejected(
                f"Backend rejected {app.package_identifier}",
                status_code=resp.status_code,
                body=resp.text,
            )

        try:
            app_id = resp.json()["id"]
        except (ValueError, KeyError, TypeError) as e:
            raise ImportRejected(
                f"Create response for {app.package_identifier} has no id",
                status_code=resp.status_code,
                body=resp.text,
            ) from e

        logger.info(f"Created {app.display_name} ({app.package_identifier}) as {app_id}")
        await self._settle(app_id)
        return app_id

    async def _settle(self, app_id: str) -> None:
        if not self.poll:
            logger.debug(f"Waiting {self.settle_delay:.1f}s for {app_id} to settle")
            await self._sleep(self.settle_delay)
            return

        waited = 0.0
        attempt = 0
        while True:
            state = await self._publishing_state(app_id)
            if state == PUBLISHED_STATE:
                logger.debug(f"{app_id} published after {attempt + 1} checks")
                return

            if not self.backoff.should_continue(waited):
                raise ImportTimedOut(
                    f"{app_id} still {state or 'unknown'} after {waited:.0f}s "
                    f"(limit {self.backoff.max_wait:.0f}s)"
                )

            delay = min(self.backoff.calculate_delay(attempt), self.backoff.max_wait - waited)
            logger.debug(f"{app_id} is {state or 'unknown'}, checking again in {delay:.1f}s")
            await self._sleep(delay)
            waited += delay
            attempt += 1

    async def _publishing_state(self, app_id: str) -> str | None:
        """Read the app's publishing state, None if it cannot be read yet."""
        try:
            resp = await self.graph.get_mobile_app(app_id)
        except httpx.HTTPError as e:
            logger.debug(f"Publishing state check for {app_id} failed: {e}")
            return None

        if not resp.is_success:
            return None
        try:
            return resp.json().get("publishingState")
        except (ValueError, AttributeError):
            return None
