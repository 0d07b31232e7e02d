"""Event bus (Inngest) configuration values."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

from .env import env_flag, env_float, env_int, optional_env_var, require_env_var
from .http_resilience import RateLimit, ResilienceConfig, RetryPolicy

INNGEST_CLOUD_URL: Final[str] = "https://inn.gs"
INNGEST_DEV_SERVER_URL: Final[str] = "http://localhost:8288"
INNGEST_DEV_EVENT_KEY: Final[str] = "local"
EVENT_BUS_TIMEOUT_SECONDS: Final[float] = 10.0


@dataclass(frozen=True)
class EventBusConfig:
    """Holds the event bus endpoint and credentials."""

    event_key: str
    resilience: ResilienceConfig

    @property
    def base_url(self) -> str:
        return self.resilience.base_url or INNGEST_CLOUD_URL


def get_event_bus_config(*, resilience: ResilienceConfig | None = None) -> EventBusConfig:
    dev_mode = env_flag("INNGEST_DEV", default=False)
    if dev_mode:
        event_key = optional_env_var("INNGEST_EVENT_KEY") or INNGEST_DEV_EVENT_KEY
        default_url = INNGEST_DEV_SERVER_URL
    else:
        event_key = require_env_var("INNGEST_EVENT_KEY")
        default_url = INNGEST_CLOUD_URL

    return EventBusConfig(
        event_key=event_key,
        resilience=resilience
        or ResilienceConfig(
            name="inngest",
            base_url=optional_env_var("INNGEST_BASE_URL") or default_url,
            timeout_seconds=env_float("INNGEST_TIMEOUT_SECONDS", EVENT_BUS_TIMEOUT_SECONDS),
            retry=RetryPolicy(total=env_int("INNGEST_MAX_RETRIES", 0)),
            ratelimit=RateLimit(max_calls=50, per_seconds=1.0),
        ),
    )
