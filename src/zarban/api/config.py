"""Configuration containers for the Zarban REST clients."""

from __future__ import annotations

from dataclasses import dataclass, replace

from ..constants import HEADER_AUTHORIZATION, HEADER_CHILD_USER, APISurface, get_base_url

DEFAULT_REQUEST_TIMEOUT = 10.0


@dataclass(frozen=True)
class APIClientConfig:
    """Aggregated configuration for one API surface."""

    surface: APISurface = APISurface.SERVICE
    testnet: bool = True
    base_url: str | None = None
    access_token: str | None = None
    child_user: str | None = None
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT

    def resolved_base_url(self) -> str:
        """Return the API base URL, defaulting to official endpoints."""

        if self.base_url:
            return self.base_url.rstrip("/")
        return get_base_url(self.surface, self.testnet)

    def headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json", "Accept": "application/json"}
        if self.access_token:
            headers[HEADER_AUTHORIZATION] = f"Bearer {self.access_token}"
        if self.child_user:
            headers[HEADER_CHILD_USER] = self.child_user
        return headers

    def with_access_token(self, token: str | None) -> APIClientConfig:
        return replace(self, access_token=token)

    def with_child_user(self, username: str | None) -> APIClientConfig:
        return replace(self, child_user=username)
