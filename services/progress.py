"""Fire-and-forget status reporting used while the catalog loads."""
from __future__ import annotations

import logging
from typing import Protocol

from launcher_config.constants import STATUS

logger = logging.getLogger(__name__)


class ProgressReporter(Protocol):
    def report(self, text: str, current: int | None = None, total: int | None = None) -> None:  # pragma: no cover - protocol
        ...


class NullProgressReporter:
    def report(self, text: str, current: int | None = None, total: int | None = None) -> None:
        return None


class LoggingProgressReporter:
    def report(self, text: str, current: int | None = None, total: int | None = None) -> None:
        title, sub = format_progress(text, current, total)
        if sub:
            logger.info("%s (%s)", title, sub)
        else:
            logger.info("%s", title)


def format_progress(text: str, current: int | None, total: int | None) -> tuple[str, str]:
    title = text or STATUS.loading
    if current is not None and total is not None and total > 0:
        return title, STATUS.progress_sub.format(current=current, total=total)
    return title, ""


def safe_report(reporter: ProgressReporter, text: str, current: int | None = None, total: int | None = None) -> None:
    try:
        reporter.report(text, current, total)
    except Exception:  # progress delivery must never fail a load
        logger.debug("Dropped status update %r", text, exc_info=True)
