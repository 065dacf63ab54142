"""
Hevy API client.

Fetches every page of ``GET /workouts`` before anything is converted. A
failure on any page aborts the whole fetch; pages already received are
discarded.
"""

import asyncio
import logging
from typing import List, Optional

import httpx
from pydantic import ValidationError

from liftlog_importer.config import Settings
from liftlog_importer.services.adapters.base import HevyAPIError
from liftlog_importer.services.hevy_models import HevyPageResponse, HevyWorkout

logger = logging.getLogger(__name__)


class PaginatedFetcher:
    """Walks the workouts endpoint page by page with a fixed delay between requests."""

    def __init__(self, settings: Settings, client: Optional[httpx.AsyncClient] = None):
        self.base_url = settings.HEVY_BASE_URL
        self.page_size = settings.HEVY_PAGE_SIZE
        self.page_delay = settings.HEVY_PAGE_DELAY_SECONDS
        self.timeout = settings.HTTP_TIMEOUT_SECONDS
        self._client = client

    async def fetch_all(self, api_key: str) -> List[HevyWorkout]:
        """
        Fetch all workouts, starting at page 1 and stopping after page_count.

        Raises:
            HevyAPIError: On any non-2xx status, network failure or undecodable page.
        """
        if self._client is not None:
            return await self._fetch_pages(self._client, api_key)

        async with httpx.AsyncClient(timeout=self.timeout) as client:
            return await self._fetch_pages(client, api_key)

    async def _fetch_pages(self, client: httpx.AsyncClient, api_key: str) -> List[HevyWorkout]:
        workouts: List[HevyWorkout] = []
        page = 1

        while True:
            response = await self._fetch_page(client, api_key, page)
            workouts.extend(response.workouts)
            logger.debug(f"Fetched Hevy page {response.page}/{response.page_count} ({len(response.workouts)} workouts)")

            if page >= response.page_count:
                break
            page += 1
            await asyncio.sleep(self.page_delay)

        logger.info(f"Fetched {len(workouts)} workouts from Hevy across {page} pages")
        return workouts

    async def _fetch_page(self, client: httpx.AsyncClient, api_key: str, page: int) -> HevyPageResponse:
        url = f"{self.base_url}/workouts"
        try:
            response = await client.get(
                url,
                params={"page": page, "pageSize": self.page_size},
                headers={"api-key": api_key, "accept": "application/json"},
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error(f"Hevy API returned {e.response.status_code} for page {page}")
            raise HevyAPIError() from e
        except httpx.HTTPError as e:
            logger.error(f"Hevy API request failed for page {page}: {e}")
            raise HevyAPIError() from e

        try:
            return HevyPageResponse.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            logger.error(f"Could not decode Hevy page {page}: {e}")
            raise HevyAPIError("Invalid response from API") from e
