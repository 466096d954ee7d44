"""HTTP client for the Harbor replication job API."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

import httpx
from pydantic import ValidationError

from revtrack.adapters.http_resilience import ResilientClient
from revtrack.config import HarborConfig, get_harbor_config
from revtrack.domain.ports.fetching import ReplicationFeedError

from .schema import ReplicationJobPage
from .translator import parse_replication_status

if TYPE_CHECKING:
    from collections.abc import Callable

    from revtrack.config import ResilienceConfig
    from revtrack.domain.model import ReplicationStatus

    from .schema import ReplicationJobPayload

log = getLogger(__name__)

REPLICATION_JOBS_PATH = "/api/jobs/replication"


def _default_client_factory(config: ResilienceConfig) -> ResilientClient:
    return ResilientClient(config)


@dataclass(slots=True)
class HarborReplicationFetcher:
    """Fetch every replication job page for a policy.

    Pages are requested until one comes back shorter than the page size or the
    configured page cap is reached.
    """

    config: HarborConfig = field(default_factory=get_harbor_config)
    client_factory: Callable[[ResilienceConfig], ResilientClient] = field(
        default=_default_client_factory
    )

    def __call__(self, *, policy_id: int) -> list[list[ReplicationStatus]]:
        return asyncio.run(self._fetch_pages_async(policy_id=policy_id))

    async def _fetch_pages_async(self, *, policy_id: int) -> list[list[ReplicationStatus]]:
        pages: list[list[ReplicationStatus]] = []
        async with self.client_factory(self.config.resilience) as client:
            for page in range(1, self.config.max_pages + 1):
                payloads = await self._request_page(client=client, policy_id=policy_id, page=page)
                pages.append([parse_replication_status(payload) for payload in payloads])
                if len(payloads) < self.config.page_size:
                    break
            else:
                log.warning(
                    "Stopped after %s replication pages for policy %s",
                    self.config.max_pages,
                    policy_id,
                )
        log.debug("Fetched %s replication pages for policy %s", len(pages), policy_id)
        return pages

    async def _request_page(
        self,
        *,
        client: ResilientClient,
        policy_id: int,
        page: int,
    ) -> list[ReplicationJobPayload]:
        params = httpx.QueryParams(
            {"policy_id": policy_id, "page": page, "page_size": self.config.page_size}
        )
        url = f"{self.config.base_url}{REPLICATION_JOBS_PATH}"
        try:
            response = await client.get(
                url,
                params=params,
                auth=httpx.BasicAuth(self.config.username, self.config.password),
            )
            response.raise_for_status()
            return ReplicationJobPage.validate_python(response.json())
        except httpx.HTTPError as exc:
            log.error(f"Harbor request for policy {policy_id} page {page} failed: {exc}")
            raise ReplicationFeedError(f"Could not fetch replication jobs: {exc}") from exc
        except (ValueError, ValidationError) as exc:
            raise ReplicationFeedError(f"Unexpected replication payload: {exc}") from exc


if TYPE_CHECKING:
    from revtrack.domain.ports.fetching import ReplicationStatusFetcher

    _fetcher_check: ReplicationStatusFetcher = HarborReplicationFetcher()
