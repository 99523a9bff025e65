"""
HTTP client for the live RTP API.

Wraps a requests session with the retry policy the dashboard relies on:
timeouts and connection failures are reported straight away, every other
failure is retried with an increasing delay before giving up.
"""

import logging
import time
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional

import requests

from rtp_reporting_system.backend.config import BaseConfig

logger = logging.getLogger(__name__)

USER_MESSAGES = {
    401: "You are not authorized to access this data. Please log in again.",
    403: "You do not have permission to access this data.",
    404: "The requested data could not be found.",
    500: "The server encountered an error. Please try again later.",
    503: "The service is temporarily unavailable. Please try again later.",
    "TIMEOUT": "The request timed out. Please check your connection and try again.",
    "NETWORK": "A network error occurred. Please check your connection and try again.",
}
DEFAULT_USER_MESSAGE = "An error occurred while fetching data. Please try again later."


class RTPApiError(Exception):
    """Error raised for failed RTP API calls."""

    def __init__(self, message: str, status: Any, endpoint: str, data: Any = None):
        super().__init__(message)
        self.message = message
        self.status = status
        self.endpoint = endpoint
        self.data = data
        self.timestamp = datetime.now(timezone.utc).isoformat()

    def user_message(self) -> str:
        """Message suitable for showing to dashboard users."""
        return USER_MESSAGES.get(self.status, DEFAULT_USER_MESSAGE)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error": self.message,
            "status": self.status,
            "endpoint": self.endpoint,
            "data": self.data,
            "timestamp": self.timestamp,
        }

    def __repr__(self):
        return f"<RTPApiError {self.status} {self.endpoint}>"


class RTPApiClient:
    """Client for the RTP survey API."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        max_retries: int = BaseConfig.RTP_API_MAX_RETRIES,
        retry_delay: float = BaseConfig.RTP_API_RETRY_DELAY,
        timeout: float = BaseConfig.RTP_API_TIMEOUT,
        session: Optional[requests.Session] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """
        Initialize the RTP API client.

        Args:
            base_url: API base URL, e.g. http://localhost:5001/api/rtp (default from config)
            max_retries: Retries after the first failed attempt
            retry_delay: Base delay in seconds, multiplied by the retry number
            timeout: Per-request timeout in seconds
            session: Session to use (a new one by default)
            sleep: Function used to wait between retries
        """
        self.base_url = (base_url or BaseConfig.RTP_API_BASE_URL).rstrip("/")
        self.max_retries = max_retries
        self.retry_delay = retry_delay
        self.timeout = timeout
        self.sleep = sleep

        self.session = session or requests.Session()
        self.session.headers.update(
            {
                "Accept": "application/json",
                "Content-Type": "application/json",
            }
        )

    def _url(self, endpoint: str) -> str:
        return f"{self.base_url}/{endpoint.lstrip('/')}"

    def _request(self, method: str, endpoint: str, params: Optional[dict] = None,
                 json_data: Optional[dict] = None) -> Any:
        """
        Make a single request and decode the JSON body.

        Raises:
            RTPApiError: For HTTP error statuses (status code), timeouts
                ("TIMEOUT") and connection failures ("NETWORK")
            ValueError: If the body is not valid JSON
        """
        try:
            response = self.session.request(
                method=method,
                url=self._url(endpoint),
                params=params,
                json=json_data,
                timeout=self.timeout,
            )
        except requests.Timeout as exc:
            raise RTPApiError("Request timed out", "TIMEOUT", endpoint) from exc
        except requests.ConnectionError as exc:
            raise RTPApiError("Network error", "NETWORK", endpoint) from exc

        if not response.ok:
            try:
                error_data = response.json()
            except ValueError:
                error_data = None
            raise RTPApiError(
                f"API error: {response.status_code} {response.reason}",
                response.status_code,
                endpoint,
                error_data,
            )

        return response.json()

    def fetch(self, endpoint: str, params: Optional[dict] = None) -> Any:
        """
        GET an endpoint, retrying failures other than timeouts and network errors.

        Args:
            endpoint: Path relative to the base URL, e.g. "overview/recent"
            params: Query parameters

        Returns:
            Decoded JSON response

        Raises:
            RTPApiError: Once retries are exhausted, or immediately for
                timeouts and network errors
        """
        retries = 0
        while True:
            try:
                return self._request("GET", endpoint, params=params)
            except RTPApiError as exc:
                if exc.status in ("TIMEOUT", "NETWORK"):
                    logger.error("Error fetching from %s: %s", endpoint, exc.message)
                    raise
                error = exc
            except (requests.RequestException, ValueError) as exc:
                error = exc

            if retries >= self.max_retries:
                logger.error(
                    "Error fetching from %s after %d retries: %s", endpoint, retries, error
                )
                if isinstance(error, RTPApiError):
                    raise error
                raise RTPApiError(
                    str(error) or "Unknown error",
                    getattr(error, "status", None) or "UNKNOWN",
                    endpoint,
                ) from error

            retries += 1
            logger.warning(
                "Retrying fetch from %s (%d/%d)...", endpoint, retries, self.max_retries
            )
            self.sleep(self.retry_delay * retries)

    def post(self, endpoint: str, payload: Dict[str, Any]) -> Any:
        """POST JSON to an endpoint without retrying."""
        return self._request("POST", endpoint, json_data=payload)

    def fetch_statistics(self, path: str, params: Optional[dict] = None) -> Any:
        """
        GET a School Report statistics endpoint, e.g. "enrolment".

        Statistics live under /api/statistics next to the /api/rtp base URL.
        """
        root = self.base_url.rsplit("/rtp", 1)[0]
        url = f"{root}/statistics/{path.lstrip('/')}"
        try:
            response = self.session.get(url, params=params, timeout=self.timeout)
        except requests.Timeout as exc:
            raise RTPApiError("Request timed out", "TIMEOUT", path) from exc
        except requests.ConnectionError as exc:
            raise RTPApiError("Network error", "NETWORK", path) from exc
        if not response.ok:
            raise RTPApiError(
                f"API error: {response.status_code} {response.reason}",
                response.status_code,
                path,
            )
        return response.json()
