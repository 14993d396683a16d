import logging
from typing import Any, Dict, List
from urllib.parse import quote

import httpx

logger = logging.getLogger(__name__)


class ServiceError(Exception):
    """A record service call failed; the message is shown to the user as-is."""

    def __init__(self, message: str, status_code: int = None):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class RecordServiceClient:
    def __init__(self, base_url: str, transport: httpx.BaseTransport = None):
        self.client = httpx.Client(base_url=base_url, transport=transport)

    def close(self):
        self.client.close()

    def _request(self, method: str, path: str, **kwargs) -> Any:
        try:
            response = self.client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            logger.error(f"{method} {path} failed: {e}")
            raise ServiceError(str(e) or type(e).__name__)

        if response.is_error:
            try:
                message = response.json().get("error")
            except (ValueError, AttributeError):
                message = None
            message = message or f"Request failed with status code {response.status_code}"
            logger.error(f"{method} {path} returned {response.status_code}: {message}")
            raise ServiceError(message, status_code=response.status_code)
        return response.json()

    @staticmethod
    def _path(email: str) -> str:
        return f"/students/{quote(email, safe='@')}"

    def list_students(self) -> List[Dict[str, Any]]:
        return self._request("GET", "/students")

    def get_student(self, email: str) -> Dict[str, Any]:
        return self._request("GET", self._path(email))

    def create_student(self, values: Dict[str, Any]) -> Dict[str, Any]:
        return self._request("POST", "/students", json=values)

    def update_student(self, email: str, values: Dict[str, Any]) -> Dict[str, Any]:
        return self._request("PUT", self._path(email), json=values)

    def delete_student(self, email: str) -> Dict[str, Any]:
        return self._request("DELETE", self._path(email))
