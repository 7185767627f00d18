# http client shared by every api call, carries base url and auth token explicitly
from __future__ import annotations

from typing import Any, Callable, Dict, Optional

import httpx

from utils.config import API_BASE_URL, REQUEST_TIMEOUT
from utils.logger import get_logger

_logger = get_logger(__name__)


class ApiError(Exception):
    """
    Raised for any failed backend call: transport error, timeout or non-2xx.
    """

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class ValidationError(ValueError):
    """Client side check failed before anything was sent."""


class UnauthorizedError(ApiError):
    """401 from the backend, token missing, expired or rejected."""


class RequestTimeoutError(ApiError):
    """The backend did not answer within the timeout."""


class PartialReorderError(ApiError):
    """
    Sequential reorder stopped at ``failed_index``.
    Items before it carry their new order, the rest may not.
    """

    def __init__(self, failed_index: int, total: int, cause: ApiError) -> None:
        super().__init__(
            f"Reordered {failed_index} of {total} items before failure: {cause.message}",
            cause.status_code,
        )
        self.failed_index = failed_index
        self.total = total


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        msg = body.get("message") or body.get("error")
        if msg:
            return str(msg)
    return f"HTTP error! status: {response.status_code}"


class ApiClient:
    """
    Explicit request context: base url, bearer token and the underlying
    httpx.AsyncClient. Passed as first argument to every function in api.crud.
    """

    def __init__(
        self,
        base_url: str = API_BASE_URL,
        token: Optional[str] = None,
        timeout: float = REQUEST_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        on_unauthorized: Optional[Callable[[], None]] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.on_unauthorized = on_unauthorized
        self._http = httpx.AsyncClient(
            timeout=httpx.Timeout(timeout, connect=timeout), transport=transport
        )

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    @property
    def server_root(self) -> str:
        """Base url without the trailing /api, where uploaded files are served."""
        return self.base_url.removesuffix("/api")

    def absolute_url(self, url: str) -> str:
        if not url or url.startswith("http"):
            return url
        if not url.startswith("/"):
            url = "/" + url
        return self.server_root + url

    def _headers(self) -> Dict[str, str]:
        if self.token:
            return {"Authorization": f"Bearer {self.token}"}
        return {}

    async def request(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        params: Optional[Dict[str, Any]] = None,
        data: Optional[Dict[str, Any]] = None,
        files: Optional[Dict[str, Any]] = None,
        timeout: Optional[float] = None,
    ) -> Any:
        """
        Send one request to ``{base_url}{path}`` and return the decoded json body.

        Returns None for an empty body. Raises ApiError on any failure.
        """
        url = f"{self.base_url}{path}"
        kwargs: Dict[str, Any] = {"headers": self._headers()}
        if json is not None:
            kwargs["json"] = json
        if params:
            kwargs["params"] = params
        if data is not None:
            kwargs["data"] = data
        if files is not None:
            kwargs["files"] = files
        if timeout is not None:
            kwargs["timeout"] = httpx.Timeout(timeout, connect=REQUEST_TIMEOUT)

        _logger.debug(f"{method} {url}")
        try:
            response = await self._http.request(method, url, **kwargs)
        except httpx.TimeoutException as e:
            _logger.warning(f"{method} {path} timed out")
            raise RequestTimeoutError("Request timed out") from e
        except httpx.HTTPError as e:
            _logger.warning(f"{method} {path} failed: {e}")
            raise ApiError(f"Request failed: {e}") from e

        if response.status_code == 401:
            had_token = self.token is not None
            self.token = None
            if had_token and self.on_unauthorized:
                self.on_unauthorized()
            raise UnauthorizedError(_error_message(response), 401)

        if response.is_error:
            message = _error_message(response)
            _logger.warning(f"{method} {path} -> {response.status_code}: {message}")
            raise ApiError(message, response.status_code)

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise ApiError("Malformed response from server", response.status_code) from e
