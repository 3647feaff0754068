"""Error taxonomy shared by the catalog, cache and launch services.

Every error carries a short localized message; ``str(err)`` is what the
shell shows to the user. Auth tokens never appear in these messages.
"""
from __future__ import annotations

from launcher_config.constants import ERRORS


class LauncherError(RuntimeError):
    pass


class TransportError(LauncherError):
    def __init__(self, detail: str) -> None:
        super().__init__(ERRORS.transport.format(detail=detail))


class HttpStatusError(LauncherError):
    def __init__(self, code: int) -> None:
        super().__init__(ERRORS.http_status.format(code=code))
        self.code = code


class DecodeError(LauncherError):
    def __init__(self, detail: str) -> None:
        super().__init__(ERRORS.decode.format(detail=detail))


class EmptyCatalogError(LauncherError):
    def __init__(self) -> None:
        super().__init__(ERRORS.empty_catalog)


class MissingCredentialsError(LauncherError):
    pass


class CacheWriteError(LauncherError):
    pass


class FileUrlConversionError(LauncherError):
    def __init__(self) -> None:
        super().__init__(ERRORS.file_url)


class LaunchError(LauncherError):
    """Base for failures of a single launch attempt."""


class LaunchNotFoundError(LaunchError):
    def __init__(self) -> None:
        super().__init__(ERRORS.launch_not_found)


class EmptyLaunchPathError(LaunchError):
    def __init__(self) -> None:
        super().__init__(ERRORS.empty_launch_path)


class SpawnError(LaunchError):
    pass


class StateLockError(LaunchError):
    def __init__(self) -> None:
        super().__init__(ERRORS.state_locked)
