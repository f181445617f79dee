"""Shared HTTP plumbing for the wallet and service API clients."""

from __future__ import annotations

import logging
from typing import Any

import requests

from ..exceptions import TransportError
from .config import APIClientConfig
from .response import handle_api_response

logger = logging.getLogger(__name__)


class BaseAPIClient:
    """Issue JSON requests against one API surface and classify the responses."""

    def __init__(
        self,
        config: APIClientConfig,
        session: requests.Session | None = None,
    ) -> None:
        self._config = config
        self._session = session or requests.Session()
        self._base_url = config.resolved_base_url()

    @property
    def config(self) -> APIClientConfig:
        return self._config

    @property
    def base_url(self) -> str:
        return self._base_url

    # ------------------------------------------------------------------
    # Header injection
    # ------------------------------------------------------------------
    def with_access_token(self, token: str | None):
        """Return a client sharing this session that sends ``Authorization: Bearer``."""

        return type(self)(self._config.with_access_token(token), self._session)

    def with_child_user(self, username: str | None):
        """Return a client sharing this session that acts on behalf of a child user."""

        return type(self)(self._config.with_child_user(username), self._session)

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------
    def _request(
        self,
        method: str,
        path: str,
        *,
        response_type: Any = None,
        json: Any = None,
        params: dict[str, Any] | None = None,
    ) -> Any:
        url = f"{self._base_url}{path}"
        logger.debug("%s %s", method, url)

        try:
            response = self._session.request(
                method,
                url,
                json=json,
                params=params,
                headers=self._config.headers(),
                timeout=self._config.request_timeout,
            )
        except requests.RequestException as exc:
            logger.error("%s %s failed: %s", method, url, exc)
            raise TransportError(
                f"Request to {path} failed",
                endpoint=url,
                details={"method": method, "error": str(exc)},
            ) from exc

        return handle_api_response(response, response_type)

    def _get(self, path: str, response_type: Any = None, **kwargs: Any) -> Any:
        return self._request("GET", path, response_type=response_type, **kwargs)

    def _post(self, path: str, body: Any, response_type: Any = None) -> Any:
        payload = body.to_dict() if hasattr(body, "to_dict") else body
        return self._request("POST", path, response_type=response_type, json=payload)
