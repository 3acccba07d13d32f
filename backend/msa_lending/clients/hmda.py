"""FFIEC HMDA data browser client for loan-level CSV."""
from __future__ import annotations

import logging
from typing import Iterable, Optional

import requests

from msa_lending.clients.errors import DataSourceError
from msa_lending.config import settings

logger = logging.getLogger(__name__)


class HmdaLoanClient:
    """Downloads loan records for a set of MSA/MD ids as CSV text."""

    def __init__(
        self,
        url: str | None = None,
        year: int | None = None,
        timeout: Optional[float] = None,
        session: requests.Session | None = None,
    ) -> None:
        self.url = url or settings.HMDA_API_URL
        self.year = year or settings.HMDA_YEAR
        self.timeout = timeout if timeout is not None else settings.HTTP_TIMEOUT
        self.session = session or requests.Session()

    def fetch_loan_csv(self, region_ids: Iterable[str]) -> str:
        """Return the CSV body for ``region_ids``.

        Raises DataSourceError when no ids are given or the request fails.
        """
        ids = [str(region_id) for region_id in region_ids]
        if not ids:
            raise DataSourceError("No region ids to request loan records for")

        params = {"msamds": ",".join(ids), "years": str(self.year)}
        logger.info("Fetching loan records for %d regions from %s", len(ids), self.url)
        try:
            response = self.session.get(self.url, params=params, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            raise DataSourceError(f"HMDA loan request failed: {e}") from e

        text = response.text
        logger.info("Fetched %d bytes of loan CSV", len(text))
        return text
