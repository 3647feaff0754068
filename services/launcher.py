"""Launch a chosen card: exit to the desktop or spawn the product's process."""
from __future__ import annotations

import logging
import shlex
import subprocess
import sys
from enum import Enum
from typing import Protocol, Sequence

from launcher_config.constants import DESKTOP_SENTINEL_ID
from launcher_config.user_settings import ArgsMode
from services.errors import EmptyLaunchPathError, LaunchNotFoundError, SpawnError
from services.models import LaunchParams
from services.state import SharedLaunchState

logger = logging.getLogger(__name__)


class LaunchOutcome(str, Enum):
    EXITED = "exited"
    SPAWNED = "spawned"
    DRY_RUN = "dry_run"


class ShellControl(Protocol):
    def hide_window(self) -> None:  # pragma: no cover - protocol
        ...

    def exit(self, code: int = 0) -> None:  # pragma: no cover - protocol
        ...


class ProcessSpawner(Protocol):
    def spawn(self, argv: Sequence[str], cwd: str | None) -> None:  # pragma: no cover - protocol
        ...


class DetachedSpawner:
    """Start the child detached from the launcher; no exit-code tracking."""

    def spawn(self, argv: Sequence[str], cwd: str | None) -> None:
        kwargs: dict[str, object] = {}
        if sys.platform.startswith("win"):
            kwargs["creationflags"] = subprocess.DETACHED_PROCESS | subprocess.CREATE_NEW_PROCESS_GROUP
        else:
            kwargs["start_new_session"] = True
        subprocess.Popen(
            list(argv),
            cwd=cwd,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            close_fds=True,
            **kwargs,
        )


def unwrap_outer_quotes(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
        return value[1:-1]
    return value


def normalize_launch_args(raw: str, mode: ArgsMode = ArgsMode.SINGLE) -> list[str]:
    """Turn the raw argument string into an argv tail.

    ``SINGLE`` passes the trimmed string, minus one pair of outer quotes,
    as one argument. ``SHELL`` splits it into words with POSIX rules.
    """
    trimmed = raw.strip()
    if not trimmed:
        return []
    if mode is ArgsMode.SHELL:
        try:
            return shlex.split(trimmed, posix=True)
        except ValueError as exc:
            raise SpawnError(f"{exc}: {trimmed}") from exc
    return [unwrap_outer_quotes(trimmed)]


def build_command(params: LaunchParams, mode: ArgsMode = ArgsMode.SINGLE) -> tuple[list[str], str | None]:
    if not params.exe_path:
        raise EmptyLaunchPathError()
    argv = [params.exe_path, *normalize_launch_args(params.args, mode)]
    cwd = params.work_dir or None
    return argv, cwd


class LaunchResolver:
    def __init__(
        self,
        state: SharedLaunchState,
        shell: ShellControl,
        *,
        spawner: ProcessSpawner | None = None,
        args_mode: ArgsMode = ArgsMode.SINGLE,
        dry_run: bool = False,
        exit_after_launch: bool = False,
    ) -> None:
        self._state = state
        self._shell = shell
        self._spawner = spawner or DetachedSpawner()
        self._args_mode = args_mode
        self._dry_run = dry_run
        self._exit_after_launch = exit_after_launch

    def launch(self, product_id: str) -> LaunchOutcome:
        if product_id == DESKTOP_SENTINEL_ID or self._state.is_desktop(product_id):
            logger.info("Desktop entry %s selected, leaving the shell", product_id)
            self._exit_shell()
            return LaunchOutcome.EXITED

        params = self._state.get_launch(product_id)
        if params is None:
            raise LaunchNotFoundError()
        argv, cwd = build_command(params, self._args_mode)

        if self._dry_run:
            logger.info(
                "Dry-run launch only: exe=%r work_dir=%r raw_args=%r argv=%r",
                params.exe_path,
                params.work_dir,
                params.args,
                argv,
            )
            return LaunchOutcome.DRY_RUN

        try:
            self._spawner.spawn(argv, cwd)
        except (OSError, ValueError) as exc:
            raise SpawnError(str(exc)) from exc
        logger.info("Launched %s: %s", product_id, params.exe_path)
        if self._exit_after_launch:
            self._exit_shell()
        return LaunchOutcome.SPAWNED

    def _exit_shell(self) -> None:
        self._shell.hide_window()
        self._shell.exit(0)
