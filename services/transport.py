"""httpx client construction shared by the sensor and display connections."""

from __future__ import annotations

import httpx

from settings import Settings


def build_auth(user: str, password: str, scheme: str = "digest") -> httpx.Auth:
    if scheme == "basic":
        return httpx.BasicAuth(user, password)
    if scheme == "digest":
        return httpx.DigestAuth(user, password)
    raise ValueError(f"Unsupported authentication scheme {scheme!r}.")


def build_sensor_client(settings: Settings) -> httpx.Client:
    # The stream is unbounded, so only connecting is time limited.
    return httpx.Client(
        auth=build_auth(settings.sensor_user, settings.sensor_password, settings.auth_scheme),
        timeout=httpx.Timeout(None, connect=settings.connect_timeout),
        verify=settings.verify_tls,
    )


def build_display_client(settings: Settings, timeout: float = 10.0) -> httpx.Client:
    return httpx.Client(
        base_url=settings.display_base_url,
        auth=build_auth(settings.display_user, settings.display_password, settings.auth_scheme),
        timeout=timeout,
        verify=settings.verify_tls,
    )
