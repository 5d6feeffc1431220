"""Order source API configuration values."""

from __future__ import annotations

from dataclasses import dataclass, field

from .env import env_float, env_int, require_env_vars
from .http_resilience import RateLimit, ResilienceConfig, RetryPolicy

ORDERS_TIMEOUT_SECONDS = 30.0
ORDERS_MAX_PAGES = 10


@dataclass(frozen=True)
class OrderSourceConfig:
    """Holds order API credentials and transport settings."""

    url: str
    api_key: str
    user_agent: str
    max_pages: int = ORDERS_MAX_PAGES
    resilience: ResilienceConfig = field(default_factory=lambda: ResilienceConfig(name="orders"))

    @property
    def key_preview(self) -> str:
        return f"{self.api_key[:8]}..."


def get_order_source_config(*, resilience: ResilienceConfig | None = None) -> OrderSourceConfig:
    values = require_env_vars(("ORDERS_API_URL", "ORDERS_API_KEY", "ORDERS_USER_AGENT"))
    timeout = env_float("ORDERS_TIMEOUT_SECONDS", ORDERS_TIMEOUT_SECONDS)
    return OrderSourceConfig(
        url=values["ORDERS_API_URL"],
        api_key=values["ORDERS_API_KEY"],
        user_agent=values["ORDERS_USER_AGENT"],
        max_pages=env_int("ORDERS_MAX_PAGES", ORDERS_MAX_PAGES),
        resilience=resilience
        or ResilienceConfig(
            name="orders",
            timeout_seconds=timeout,
            retry=RetryPolicy(total=3),
            ratelimit=RateLimit(max_calls=5, per_seconds=1.0),
        ),
    )
