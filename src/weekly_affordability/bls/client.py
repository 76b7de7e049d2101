"""
Core BLS client implementation.
"""
import logging
import requests
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

class BLSClient:
    """Client for the BLS public timeseries API (v2)."""

    BASE_URL = "https://api.bls.gov/publicAPI/v2/timeseries/data/"

    def __init__(self, api_key: Optional[str], session: Optional[requests.Session] = None):
        """
        Initialize BLS client.

        Args:
            api_key: BLS registration key, passed through to the API as is
            session: Optional requests session to issue calls with
        """
        if not api_key:
            logger.warning("No BLS API key provided, the API applies its unregistered limits")
        self.api_key = api_key
        self.session = session or requests.Session()

    def get_series(self, series_id: str, start_year: int, end_year: int) -> Dict[str, Any]:
        """
        Fetch the raw data of a series between two years.

        Args:
            series_id: BLS series id (e.g. "CES0500000011")
            start_year: First year requested
            end_year: Last year requested

        Returns:
            Decoded JSON response
        """
        payload = {
            "seriesid": [series_id],
            "startyear": str(start_year),
            "endyear": str(end_year)
        }
        if self.api_key:
            payload["registrationkey"] = self.api_key

        logger.info(f"Fetching BLS series {series_id} for {start_year}-{end_year}")
        try:
            response = self.session.post(self.BASE_URL, json=payload)
            response.raise_for_status()
            return response.json()
        except requests.exceptions.RequestException as e:
            logger.error(f"BLS API request failed for {series_id}: {str(e)}")
            raise
