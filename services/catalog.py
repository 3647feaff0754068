"""Authenticated and anonymous JSON GETs against the catalog endpoints."""
from __future__ import annotations

import http.client
import json
import logging
import socket
import urllib.error
import urllib.request
from typing import Any, Callable

from launcher_config.constants import AUTH_HEADER, DEFAULT_ENDPOINTS, Endpoints
from services.errors import DecodeError, HttpStatusError, TransportError
from services.models import HardwareInfo, LaunchParams, ProductMetaRecord, StationProductRecord

logger = logging.getLogger(__name__)

Opener = Callable[..., Any]


class CatalogClient:
    """Thin wrapper around urllib for the station catalog API.

    Every failure propagates immediately: transport problems as
    ``TransportError``, non-success statuses as ``HttpStatusError`` and
    malformed payloads as ``DecodeError``.
    """

    def __init__(
        self,
        endpoints: Endpoints | None = None,
        *,
        timeout: float = 20.0,
        opener: Opener | None = None,
    ) -> None:
        self._endpoints = endpoints or DEFAULT_ENDPOINTS
        self._timeout = timeout
        self._opener = opener or urllib.request.urlopen

    @property
    def endpoints(self) -> Endpoints:
        return self._endpoints

    def get_bytes(self, url: str, token: str | None = None) -> bytes:
        headers = {"User-Agent": "drova-launcher", "Accept": "application/json"}
        if token:
            headers[AUTH_HEADER] = token
        logger.debug("HTTP GET %s", url)
        try:
            request = urllib.request.Request(url, headers=headers)
            with self._opener(request, timeout=self._timeout) as response:
                status = getattr(response, "status", 200)
                body = response.read()
        except urllib.error.HTTPError as exc:
            self._log_failure_body(url, exc.code, _read_error_body(exc))
            raise HttpStatusError(exc.code) from exc
        except (urllib.error.URLError, socket.timeout, ConnectionError) as exc:
            reason = getattr(exc, "reason", exc)
            raise TransportError(str(reason)) from exc
        except (ValueError, http.client.HTTPException) as exc:
            # malformed URL or a broken response stream
            raise TransportError(str(exc)) from exc
        if status >= 400:
            self._log_failure_body(url, status, body)
            raise HttpStatusError(status)
        return body

    def get_json(self, url: str, token: str | None = None) -> Any:
        body = self.get_bytes(url, token)
        try:
            return json.loads(body.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise DecodeError(str(exc)) from exc

    def fetch_station_products(self, station_uuid: str, token: str) -> list[StationProductRecord]:
        payload = self.get_json(self._endpoints.station_products_url(station_uuid), token)
        return [StationProductRecord.from_dict(item) for item in _require_list(payload, "station products")]

    def fetch_products_full(self, token: str | None = None) -> list[ProductMetaRecord]:
        payload = self.get_json(self._endpoints.products_full_url(), token)
        return [ProductMetaRecord.from_dict(item) for item in _require_list(payload, "products")]

    def fetch_launch_details(self, station_uuid: str, product_id: str, token: str) -> LaunchParams:
        payload = self.get_json(self._endpoints.launch_details_url(station_uuid, product_id), token)
        return LaunchParams.from_details(payload)

    def fetch_station_info(self, station_uuid: str) -> dict[str, str]:
        payload = self.get_json(self._endpoints.station_info_url(station_uuid))
        if not isinstance(payload, dict):
            raise DecodeError("station info is not an object")
        return {
            "name": str(payload.get("name") or ""),
            "description": str(payload.get("description") or ""),
        }

    def fetch_station_hardware(self, station_uuid: str) -> HardwareInfo:
        payload = self.get_json(self._endpoints.station_hardware_url(station_uuid))
        return HardwareInfo.from_dict(payload)

    def _log_failure_body(self, url: str, status: int, body: bytes) -> None:
        logger.debug("HTTP %s from %s: %s", status, url, body.decode("utf-8", errors="replace"))


def _require_list(payload: Any, what: str) -> list[Any]:
    if not isinstance(payload, list):
        raise DecodeError(f"{what} is not a list")
    return payload


def _read_error_body(exc: urllib.error.HTTPError) -> bytes:
    try:
        return exc.read() or b""
    except (OSError, AttributeError):
        return b""
