"""Utility classes for running service tasks off the UI thread."""
from __future__ import annotations

from PySide6.QtCore import QObject, QRunnable, Signal, Slot


class WorkerSignals(QObject):
    finished = Signal(object)
    error = Signal(str)
    status = Signal(str, object, object)


class SignalProgressReporter:
    """Forwards catalog status updates to the UI thread through a queued signal."""

    def __init__(self, signals: WorkerSignals) -> None:
        self._signals = signals

    def report(self, text: str, current: int | None = None, total: int | None = None) -> None:
        self._signals.status.emit(text, current, total)


class ServiceWorker(QRunnable):
    def __init__(self, fn, *args, **kwargs) -> None:
        super().__init__()
        self.fn = fn
        self.args = args
        self.kwargs = kwargs
        self.signals = WorkerSignals()

    @Slot()
    def run(self) -> None:
        try:
            result = self.fn(*self.args, **self.kwargs)
        except Exception as exc:  # pragma: no cover - surfaced via signal
            self.signals.error.emit(str(exc))
        else:
            self.signals.finished.emit(result)
