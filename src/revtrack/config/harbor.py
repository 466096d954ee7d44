"""Harbor registry configuration values."""

from __future__ import annotations

from dataclasses import dataclass, field

from .env import env_int, require_env_vars
from .errors import ConfigurationError
from .http_resilience import RateLimit, ResilienceConfig, RetryPolicy

HARBOR_TIMEOUT_SECONDS = 15.0
DEFAULT_PAGE_SIZE = 200
DEFAULT_MAX_PAGES = 50
DEFAULT_ALPHA_POLICY_ID = 1
DEFAULT_BETA_POLICY_ID = 3


@dataclass(frozen=True, slots=True)
class HarborConfig:
    """Connection settings for the Harbor replication job API."""

    base_url: str
    username: str
    password: str
    policy_ids: dict[str, int] = field(
        default_factory=lambda: {
            "alpha": DEFAULT_ALPHA_POLICY_ID,
            "beta": DEFAULT_BETA_POLICY_ID,
        }
    )
    page_size: int = DEFAULT_PAGE_SIZE
    max_pages: int = DEFAULT_MAX_PAGES
    resilience: ResilienceConfig = field(
        default_factory=lambda: ResilienceConfig(name="harbor")
    )

    def policy_id_for(self, environment: str) -> int:
        try:
            return self.policy_ids[environment]
        except KeyError as exc:
            raise ConfigurationError(
                f"No replication policy configured for environment {environment!r}"
            ) from exc


def get_harbor_config(*, resilience: ResilienceConfig | None = None) -> HarborConfig:
    values = require_env_vars(("HARBOR_URL", "HARBOR_USERNAME", "HARBOR_PASSWORD"))
    base_url = values["HARBOR_URL"].rstrip("/")
    return HarborConfig(
        base_url=base_url,
        username=values["HARBOR_USERNAME"],
        password=values["HARBOR_PASSWORD"],
        policy_ids={
            "alpha": env_int("HARBOR_POLICY_ALPHA", DEFAULT_ALPHA_POLICY_ID),
            "beta": env_int("HARBOR_POLICY_BETA", DEFAULT_BETA_POLICY_ID),
        },
        page_size=env_int("HARBOR_PAGE_SIZE", DEFAULT_PAGE_SIZE),
        resilience=resilience
        or ResilienceConfig(
            name="harbor",
            base_url=base_url,
            timeout_seconds=HARBOR_TIMEOUT_SECONDS,
            retry=RetryPolicy(total=3),
            ratelimit=RateLimit(max_calls=5, per_seconds=1.0),
        ),
    )
