"""Census ACS client for metro-area household income."""
from __future__ import annotations

import logging
from typing import Any, Optional

import requests

from msa_lending.clients.errors import DataSourceError
from msa_lending.config import settings

logger = logging.getLogger(__name__)

REGION_GEOGRAPHY = "metropolitan statistical area/micropolitan statistical area:*"


class CensusIncomeClient:
    """Fetches ``[NAME, <income variable>, <region id>]`` rows for every MSA."""

    def __init__(
        self,
        base_url: str | None = None,
        year: int | None = None,
        variable: str | None = None,
        timeout: Optional[float] = None,
        session: requests.Session | None = None,
    ) -> None:
        self.base_url = (base_url or settings.CENSUS_API_URL).rstrip("/")
        self.year = year or settings.ACS_YEAR
        self.variable = variable or settings.INCOME_VARIABLE
        self.timeout = timeout if timeout is not None else settings.HTTP_TIMEOUT
        self.session = session or requests.Session()

    @property
    def url(self) -> str:
        return f"{self.base_url}/{self.year}/acs/acs5/profile"

    def fetch_region_income(self) -> list[list[Any]]:
        """Return the raw payload rows, header row included.

        Raises DataSourceError on HTTP, connection or decoding failures.
        """
        params = {"get": f"NAME,{self.variable}", "for": REGION_GEOGRAPHY}
        logger.info("Fetching region income from %s", self.url)
        try:
            response = self.session.get(self.url, params=params, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            raise DataSourceError(f"Census income request failed: {e}") from e

        try:
            rows = response.json()
        except ValueError as e:
            raise DataSourceError(f"Census income response is not JSON: {e}") from e

        if not isinstance(rows, list):
            raise DataSourceError(
                f"Unexpected Census income payload type: {type(rows).__name__}"
            )
        logger.info("Fetched %d region income rows", len(rows))
        return rows
