"""
Client for the public usage endpoint

Unwraps the {"code": 0, "data": ...} envelope and raises PublicUsageError for
any error response.
"""

import logging
from typing import Optional, Dict, Any

import httpx

from app.models.usage import PublicUsageStatsResponse

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0
USAGE_PATH = "/api/v1/public/usage"


class PublicUsageError(Exception):
    """Error envelope returned by the server"""

    def __init__(self, status_code: int, message: str):
        self.status_code = status_code
        self.message = message
        super().__init__(f"{status_code}: {message}")


class PublicUsageClient:
    """Thin synchronous client; usable as a context manager"""

    def __init__(self, base_url: str, timeout: float = DEFAULT_TIMEOUT,
                 transport: Optional[httpx.BaseTransport] = None):
        self._client = httpx.Client(
            base_url=base_url,
            timeout=timeout,
            headers={"Content-Type": "application/json"},
            transport=transport,
        )

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    def close(self):
        self._client.close()

    def get_usage_by_key(self, key: str, period: Optional[str] = None,
                         start_date: Optional[str] = None, end_date: Optional[str] = None,
                         timezone: Optional[str] = None) -> PublicUsageStatsResponse:
        """
        Fetch usage statistics for an API key
        
        Args:
            key: API key
            period: 'today', 'week' or 'month'
            start_date: YYYY-MM-DD, used together with end_date
            end_date: YYYY-MM-DD, used together with start_date
            timezone: IANA zone name
        """
        params = {
            "key": key,
            "period": period,
            "start_date": start_date,
            "end_date": end_date,
            "timezone": timezone,
        }
        params = {k: v for k, v in params.items() if v is not None}
        
        response = self._client.get(USAGE_PATH, params=params)
        body = self._json(response)
        
        if response.status_code != 200 or body.get("code") != 0:
            message = body.get("message") or response.reason_phrase
            logger.warning(f"Usage query failed: {response.status_code} {message}")
            raise PublicUsageError(response.status_code, message)
        
        return PublicUsageStatsResponse(**body["data"])

    def get_usage_by_period(self, key: str, period: str = "today",
                            timezone: Optional[str] = None) -> PublicUsageStatsResponse:
        return self.get_usage_by_key(key, period=period, timezone=timezone)

    def get_usage_by_date_range(self, key: str, start_date: str, end_date: str,
                                timezone: Optional[str] = None) -> PublicUsageStatsResponse:
        return self.get_usage_by_key(key, start_date=start_date, end_date=end_date, timezone=timezone)

    @staticmethod
    def _json(response: httpx.Response) -> Dict[str, Any]:
        try:
            body = response.json()
        except ValueError:
            return {}
        return body if isinstance(body, dict) else {}
