"""Publish order events through the Inngest event API."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

import httpx
from pydantic import ValidationError

from storefront.adapters.http_resilience import ResilientClient
from storefront.domain.errors import PublishError
from storefront.domain.model import PublishReceipt

from .schema import SendEventResponse
from .translator import to_event_payload

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence
    from types import TracebackType

    from storefront.config.event_bus import EventBusConfig
    from storefront.config.http_resilience import ResilienceConfig
    from storefront.domain.model import OrderCreatedEvent

    from .schema import EventPayload

log = getLogger(__name__)


class InngestEventPublisher:
    """Event publisher that posts to ``{base_url}/e/{event_key}``.

    The event id is the order id, which Inngest uses to drop duplicate sends.
    One HTTP client, and with it one rate limiter, is shared by every send of
    this publisher until :meth:`aclose`.
    """

    def __init__(
        self,
        *,
        config: EventBusConfig,
        client_factory: Callable[[ResilienceConfig], ResilientClient] | None = None,
    ) -> None:
        self._config = config
        self._client_factory = client_factory or ResilientClient
        self._client: ResilientClient | None = None

    @property
    def endpoint(self) -> str:
        return f"{self._config.base_url.rstrip('/')}/e/{self._config.event_key}"

    async def __aenter__(self) -> InngestEventPublisher:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        client, self._client = self._client, None
        if client is not None:
            await client.aclose()

    def _http_client(self) -> ResilientClient:
        # created lazily so the limiter binds to the running event loop
        if self._client is None:
            self._client = self._client_factory(self._config.resilience)
        return self._client

    async def publish(self, event: OrderCreatedEvent) -> PublishReceipt:
        receipt = await self.send([to_event_payload(event)])
        log.info("Published %s %s", event.name, event.event_id)
        return receipt

    async def send(self, payloads: Sequence[EventPayload]) -> PublishReceipt:
        body = [payload.model_dump(mode="json", by_alias=True) for payload in payloads]
        try:
            response = await self._http_client().post(self.endpoint, json=body)
        except httpx.TimeoutException as exc:
            raise PublishError(f"Event bus timed out: {exc}") from exc
        except httpx.HTTPError as exc:
            raise PublishError(f"Event bus unreachable: {exc}") from exc

        if response.is_error:
            raise PublishError(
                f"Event bus rejected events with HTTP {response.status_code}: "
                f"{_error_detail(response)}",
                status_code=response.status_code,
            )

        try:
            acknowledgement = SendEventResponse.model_validate_json(response.content)
        except ValidationError as exc:
            raise PublishError(
                "Event bus returned an unreadable acknowledgement",
                status_code=response.status_code,
            ) from exc

        if acknowledgement.error or len(acknowledgement.ids) != len(payloads):
            raise PublishError(
                f"Event bus acknowledged {len(acknowledgement.ids)} of {len(payloads)} events"
                + (f": {acknowledgement.error}" if acknowledgement.error else ""),
                status_code=acknowledgement.status,
            )
        return PublishReceipt(event_ids=tuple(acknowledgement.ids))


def _error_detail(response: httpx.Response) -> str:
    try:
        payload = response.json()
    except ValueError:
        return response.text[:200] or response.reason_phrase
    if isinstance(payload, dict) and "error" in payload:
        return str(payload["error"])
    return response.text[:200]
