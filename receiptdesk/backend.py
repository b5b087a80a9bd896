"""
HTTP client for the upstream ReceiptOS backend.
"""
from __future__ import annotations

import logging
from typing import Any, Generic, Optional, TypeVar
from urllib.parse import quote

import httpx
from pydantic import BaseModel

logger = logging.getLogger(__name__)

T = TypeVar("T")


def api_path(base: str, *segments: str) -> str:
    """Append ids to ``base`` as single, fully escaped path segments."""
    return "/".join([base.rstrip("/"), *(quote(str(s), safe="") for s in segments)])


class BackendError(Exception):
    """An upstream call failed (transport error or non-2xx status)."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code

    @property
    def not_found(self) -> bool:
        return self.status_code == 404


class ReadError(BaseModel):
    operation: str
    message: str
    status_code: Optional[int] = None


class ReadResult(BaseModel, Generic[T]):
    """Outcome of a degraded read: ``value`` is always usable."""
    value: T
    error: Optional[ReadError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def failed(cls, value: T, operation: str, exc: BackendError) -> "ReadResult[T]":
        return cls(
            value=value,
            error=ReadError(operation=operation, message=str(exc), status_code=exc.status_code),
        )


class BackendClient:
    """Thin JSON wrapper around ``httpx.Client``.

    No timeout and no retries: a pending call stays pending until the
    transport resolves, and a failure is reported once.
    """

    def __init__(self, base_url: str, http: Optional[httpx.Client] = None) -> None:
        self._http = http or httpx.Client(
            base_url=base_url,
            headers={"Content-Type": "application/json"},
            timeout=None,
        )

    def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        try:
            response = self._http.request(method, path, **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise BackendError(
                f"{method} {path} failed with {e.response.status_code}",
                status_code=e.response.status_code,
            ) from e
        except httpx.HTTPError as e:
            raise BackendError(f"{method} {path} failed: {e}") from e
        return response

    def _json(self, method: str, path: str, **kwargs: Any) -> Any:
        response = self._request(method, path, **kwargs)
        try:
            return response.json()
        except ValueError as e:
            raise BackendError(
                f"{method} {path} returned a non-JSON body",
                status_code=response.status_code,
            ) from e

    def get_json(self, path: str, params: Optional[dict[str, Any]] = None) -> Any:
        return self._json("GET", path, params=params)

    def post_json(self, path: str, payload: Any) -> Any:
        return self._json("POST", path, json=payload)

    def delete(self, path: str) -> None:
        self._request("DELETE", path)

    def close(self) -> None:
        self._http.close()
