"""Forwards deployment events to an HTTP webhook."""

import httpx

from spinup.core.events import BaseEvent
from spinup.utils.logging import get_logger

logger = get_logger(__name__)


class WebhookForwarder:
    """Event listener that POSTs every event it receives as JSON.

    Subscribe it to the dispatcher's wildcard stream. Delivery errors are
    raised so the dispatcher logs them; they never stop the pipeline.
    """

    def __init__(
        self,
        url: str,
        timeout: float = 10.0,
        client: httpx.Client | None = None,
    ):
        self.url = url
        self._client = client or httpx.Client(timeout=timeout)

    def __call__(self, event: BaseEvent) -> None:
        response = self._client.post(self.url, json=event.to_payload())
        response.raise_for_status()
        logger.debug(
            "webhook.delivered",
            event_type=event.type,
            status_code=response.status_code,
        )

    def close(self) -> None:
        self._client.close()
