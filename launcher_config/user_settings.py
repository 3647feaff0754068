"""User-configurable settings persisted locally."""
from __future__ import annotations

import json
import os
from dataclasses import dataclass, replace
from enum import Enum
from pathlib import Path
from typing import Any, Mapping

from dotenv import find_dotenv, load_dotenv

from launcher_config.constants import DEFAULT_ENDPOINTS
from launcher_config.paths import get_application_directory, get_image_cache_directory


SETTINGS_DIRNAME = ".drova_launcher"
SETTINGS_FILENAME = "settings.json"

_TRUTHY = {"1", "true", "yes", "on"}


class DesktopPolicy(str, Enum):
    IDENTITY = "identity"
    FLAGGED = "flagged"


class ArgsMode(str, Enum):
    SINGLE = "single"
    SHELL = "shell"


class LaunchSource(str, Enum):
    INLINE = "inline"
    DETAILS = "details"


def default_settings_path() -> Path:
    return Path.home() / SETTINGS_DIRNAME / SETTINGS_FILENAME


def is_truthy(value: str | None) -> bool:
    if value is None:
        return False
    return value.strip().lower() in _TRUTHY


def _parse_enum(enum_cls, value: Any, default):
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(str(value).strip().lower())
    except ValueError:
        return default


def _parse_bool(value: Any, default: bool) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return is_truthy(value)
    if value is None:
        return default
    return bool(value)


def _parse_float(value: Any, default: float) -> float:
    try:
        parsed = float(value)
    except (TypeError, ValueError):
        return default
    return parsed if parsed > 0 else default


@dataclass
class LauncherSettings:
    api_base_url: str = DEFAULT_ENDPOINTS.base_url
    image_cache_enabled: bool = False
    image_cache_dir: str = ""
    desktop_policy: DesktopPolicy = DesktopPolicy.IDENTITY
    args_mode: ArgsMode = ArgsMode.SINGLE
    launch_source: LaunchSource = LaunchSource.INLINE
    catalog_requires_auth: bool = False
    dry_run_launch: bool = False
    exit_after_launch: bool = False
    http_timeout: float = 20.0
    debug: bool = False

    def cache_directory(self) -> Path:
        if self.image_cache_dir.strip():
            return Path(self.image_cache_dir.strip())
        return get_image_cache_directory()

    def to_dict(self) -> dict[str, Any]:
        return {
            "api_base_url": self.api_base_url,
            "image_cache_enabled": self.image_cache_enabled,
            "image_cache_dir": self.image_cache_dir,
            "desktop_policy": self.desktop_policy.value,
            "args_mode": self.args_mode.value,
            "launch_source": self.launch_source.value,
            "catalog_requires_auth": self.catalog_requires_auth,
            "dry_run_launch": self.dry_run_launch,
            "exit_after_launch": self.exit_after_launch,
            "http_timeout": self.http_timeout,
            "debug": self.debug,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "LauncherSettings":
        defaults = cls()

        def _get_str(key: str, default: str) -> str:
            value = data.get(key, default)
            return str(value) if value is not None else default

        return cls(
            api_base_url=_get_str("api_base_url", defaults.api_base_url).strip() or defaults.api_base_url,
            image_cache_enabled=_parse_bool(data.get("image_cache_enabled"), defaults.image_cache_enabled),
            image_cache_dir=_get_str("image_cache_dir", ""),
            desktop_policy=_parse_enum(DesktopPolicy, data.get("desktop_policy"), defaults.desktop_policy),
            args_mode=_parse_enum(ArgsMode, data.get("args_mode"), defaults.args_mode),
            launch_source=_parse_enum(LaunchSource, data.get("launch_source"), defaults.launch_source),
            catalog_requires_auth=_parse_bool(data.get("catalog_requires_auth"), defaults.catalog_requires_auth),
            dry_run_launch=_parse_bool(data.get("dry_run_launch"), defaults.dry_run_launch),
            exit_after_launch=_parse_bool(data.get("exit_after_launch"), defaults.exit_after_launch),
            http_timeout=_parse_float(data.get("http_timeout"), defaults.http_timeout),
            debug=_parse_bool(data.get("debug"), defaults.debug),
        )

    def with_env_overrides(self, environ: Mapping[str, str] | None = None) -> "LauncherSettings":
        env = os.environ if environ is None else environ
        updated = self
        if "DROVA_IMAGE_CACHE" in env:
            updated = replace(updated, image_cache_enabled=is_truthy(env["DROVA_IMAGE_CACHE"]))
        if "DROVA_LAUNCH_DRY_RUN" in env:
            updated = replace(updated, dry_run_launch=is_truthy(env["DROVA_LAUNCH_DRY_RUN"]))
        if "DROVA_DEBUG" in env:
            updated = replace(updated, debug=is_truthy(env["DROVA_DEBUG"]))
        base_url = env.get("DROVA_API_BASE_URL", "").strip()
        if base_url:
            updated = replace(updated, api_base_url=base_url)
        if "DROVA_ARGS_MODE" in env:
            updated = replace(updated, args_mode=_parse_enum(ArgsMode, env["DROVA_ARGS_MODE"], ArgsMode.SINGLE))
        if "DROVA_LAUNCH_SOURCE" in env:
            updated = replace(
                updated,
                launch_source=_parse_enum(LaunchSource, env["DROVA_LAUNCH_SOURCE"], LaunchSource.INLINE),
            )
        if "DROVA_DESKTOP_POLICY" in env:
            updated = replace(
                updated,
                desktop_policy=_parse_enum(DesktopPolicy, env["DROVA_DESKTOP_POLICY"], DesktopPolicy.IDENTITY),
            )
        return updated


def load_env_file(dotenv_path: Path | None = None) -> bool:
    """Load ``.env`` next to the application, else the nearest one from the cwd."""
    if dotenv_path is None:
        candidate = get_application_directory() / ".env"
        dotenv_path = candidate if candidate.exists() else None
    return load_dotenv(dotenv_path or find_dotenv(usecwd=True))


def load_settings(store: "SettingsStore | None" = None) -> LauncherSettings:
    load_env_file()
    return (store or SettingsStore()).load().with_env_overrides()


class SettingsStore:
    def __init__(self, path: Path | None = None) -> None:
        self._path = path or default_settings_path()

    @property
    def path(self) -> Path:
        return self._path

    def exists(self) -> bool:
        return self._path.exists()

    def load(self) -> LauncherSettings:
        if not self._path.exists():
            return LauncherSettings()
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError):
            return LauncherSettings()
        if not isinstance(data, dict):
            return LauncherSettings()
        return LauncherSettings.from_dict(data)

    def save(self, settings: LauncherSettings) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        payload = json.dumps(settings.to_dict(), indent=2, sort_keys=True)
        self._path.write_text(payload, encoding="utf-8")
