"""
Core FRED client implementation.
"""
import logging
import requests
from datetime import date
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

class FREDClient:
    """Client for the FRED series observations endpoint."""

    BASE_URL = "https://api.stlouisfed.org/fred/series/observations"

    def __init__(self, api_key: Optional[str], session: Optional[requests.Session] = None):
        """
        Initialize FRED client.

        Args:
            api_key: FRED API key, passed through to the API as is
            session: Optional requests session to issue calls with
        """
        if not api_key:
            logger.warning("No FRED API key provided, requests will be rejected by the API")
        self.api_key = api_key
        self.session = session or requests.Session()

    def _make_request(self, params: Dict[str, Any]) -> Dict[str, Any]:
        """Make a request to the FRED API."""
        params.update({
            "api_key": self.api_key,
            "file_type": "json"
        })

        try:
            response = self.session.get(self.BASE_URL, params=params)
            response.raise_for_status()
            return response.json()
        except requests.exceptions.RequestException as e:
            logger.error(f"FRED API request failed for {params.get('series_id')}: {str(e)}")
            raise

    def get_observations(self, series_id: str, start_date: date,
                         frequency: Optional[str] = None) -> Dict[str, Any]:
        """
        Fetch the raw observations of a series.

        Args:
            series_id: FRED series id (e.g. "MORTGAGE30US")
            start_date: First observation date requested
            frequency: Optional aggregation frequency code (e.g. "m", "w")

        Returns:
            Decoded JSON response with an ``observations`` list
        """
        params = {
            "series_id": series_id,
            "observation_start": start_date.strftime("%Y-%m-%d")
        }
        if frequency:
            params["frequency"] = frequency

        logger.info(f"Fetching FRED series {series_id} from {params['observation_start']}")
        data = self._make_request(params)
        logger.info(f"FRED series {series_id}: {len(data.get('observations', []))} observations")
        return data
