"""Station uuid and auth token lookup (Windows registry or environment)."""
from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from typing import Mapping, Protocol

from launcher_config.constants import (
    ENV_AUTH_TOKEN,
    ENV_STATION_UUID,
    ERRORS,
    REGISTRY_SERVER_KEY,
    REGISTRY_STATION_KEY,
    REGISTRY_STATION_VALUE,
    REGISTRY_TOKEN_VALUE,
)
from launcher_config.user_settings import load_env_file
from services.errors import MissingCredentialsError
from services.models import StationInfo

try:  # Windows-only dependency, optional for test doubles
    import winreg  # type: ignore
except ImportError:  # pragma: no cover - not available on Linux runners
    winreg = None  # type: ignore

logger = logging.getLogger(__name__)


class StationInfoProvider(Protocol):
    def get_station_info(self) -> StationInfo:  # pragma: no cover - protocol
        ...


class RegistryAccessor(Protocol):
    def get_value(self, path: str, value_name: str) -> str | int | None:  # pragma: no cover - protocol
        ...


class WindowsRegistryAccessor:
    """Minimal read-only registry helper backed by winreg."""

    def __init__(self) -> None:
        if winreg is None:
            raise RuntimeError("winreg not available on this platform")

    def get_value(self, path: str, value_name: str) -> str | int | None:
        hive, subkey = self._split_path(path)
        try:
            with winreg.OpenKey(hive, subkey) as key:  # type: ignore[arg-type]
                value, _ = winreg.QueryValueEx(key, value_name)
                return value
        except FileNotFoundError:
            return None

    def _split_path(self, path: str) -> tuple[object, str]:
        cleaned = path.replace("/", "\\")
        marker = ":\\"
        if marker not in cleaned:
            raise ValueError(f"Invalid registry path: {path}")
        hive_name, subkey = cleaned.split(marker, 1)
        hive_map = {
            "HKLM": winreg.HKEY_LOCAL_MACHINE,
            "HKCU": winreg.HKEY_CURRENT_USER,
        }
        try:
            hive = hive_map[hive_name.upper()]
        except KeyError as exc:  # pragma: no cover - constants only use HKLM
            raise ValueError(f"Unsupported hive: {hive_name}") from exc
        return hive, subkey.lstrip("\\")


class RegistryStationInfoProvider:
    def __init__(self, registry: RegistryAccessor | None = None) -> None:
        self._registry = registry or WindowsRegistryAccessor()

    def get_station_info(self) -> StationInfo:
        station_uuid = self._read(REGISTRY_STATION_KEY, REGISTRY_STATION_VALUE)
        token = self._read(REGISTRY_SERVER_KEY.format(station_uuid=station_uuid), REGISTRY_TOKEN_VALUE)
        logger.debug("Loaded station info from registry: uuid=%s, token_len=%d", station_uuid, len(token))
        return StationInfo(station_uuid=station_uuid, auth_token=token)

    def _read(self, path: str, value_name: str) -> str:
        try:
            value = self._registry.get_value(path, value_name)
        except OSError as exc:
            raise MissingCredentialsError(ERRORS.registry_missing.format(detail=exc)) from exc
        if value is None or str(value).strip() == "":
            raise MissingCredentialsError(ERRORS.registry_missing.format(detail=f"{path}\\{value_name}"))
        return str(value).strip()


class EnvStationInfoProvider:
    def __init__(self, environ: Mapping[str, str] | None = None, *, dotenv_path: Path | None = None) -> None:
        self._environ = environ
        self._dotenv_path = dotenv_path

    def get_station_info(self) -> StationInfo:
        env = self._environ
        if env is None:
            load_env_file(self._dotenv_path)
            env = os.environ
        station_uuid = _require_env(env, ENV_STATION_UUID)
        token = _require_env(env, ENV_AUTH_TOKEN)
        logger.debug("Loaded station info from env: uuid=%s, token_len=%d", station_uuid, len(token))
        return StationInfo(station_uuid=station_uuid, auth_token=token)


def default_station_info_provider() -> StationInfoProvider:
    if sys.platform.startswith("win") and winreg is not None:
        return RegistryStationInfoProvider()
    return EnvStationInfoProvider()


def _require_env(env: Mapping[str, str], name: str) -> str:
    value = env.get(name, "").strip()
    if not value:
        raise MissingCredentialsError(ERRORS.env_missing.format(name=name))
    return value
