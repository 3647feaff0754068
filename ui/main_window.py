"""Kiosk window listing the station's cards."""
from __future__ import annotations

from PySide6.QtCore import QSize, Qt, QThreadPool, QUrl
from PySide6.QtGui import QIcon
from PySide6.QtWidgets import (
    QApplication,
    QHBoxLayout,
    QLabel,
    QListView,
    QListWidget,
    QListWidgetItem,
    QMainWindow,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from launcher_config.constants import STATUS
from launcher_config.user_settings import LauncherSettings
from services.aggregator import build_fallback_desktop_card
from services.context import create_context
from services.errors import LauncherError
from services.models import Card
from services.progress import format_progress
from ui.workers import ServiceWorker, SignalProgressReporter


class QtShellControl:
    def __init__(self, window: QMainWindow) -> None:
        self._window = window

    def hide_window(self) -> None:
        self._window.hide()

    def exit(self, code: int = 0) -> None:
        QApplication.exit(code)


class LauncherWindow(QMainWindow):
    def __init__(self, settings: LauncherSettings) -> None:
        super().__init__()
        self.setWindowTitle("Drova Launcher")
        self.resize(1280, 800)
        self._thread_pool = QThreadPool.globalInstance()
        self._context = create_context(settings, QtShellControl(self))
        self._workers: set[ServiceWorker] = set()
        self._busy = False
        self._build_ui()
        self._start_load()

    def _build_ui(self) -> None:
        container = QWidget()
        layout = QVBoxLayout(container)

        status_row = QHBoxLayout()
        status_column = QVBoxLayout()
        self._status_text = QLabel()
        self._status_text.setStyleSheet("font-size: 18px; font-weight: bold;")
        self._status_sub = QLabel()
        status_column.addWidget(self._status_text)
        status_column.addWidget(self._status_sub)
        status_row.addLayout(status_column)
        status_row.addStretch()
        self._btn_retry = QPushButton("Повторить")
        self._btn_retry.setVisible(False)
        self._btn_retry.clicked.connect(self._start_load)
        status_row.addWidget(self._btn_retry)
        layout.addLayout(status_row)

        self._grid = QListWidget()
        self._grid.setViewMode(QListView.IconMode)
        self._grid.setResizeMode(QListView.Adjust)
        self._grid.setMovement(QListView.Static)
        self._grid.setIconSize(QSize(220, 300))
        self._grid.setSpacing(12)
        self._grid.setWordWrap(True)
        self._grid.itemActivated.connect(self._launch_item)
        layout.addWidget(self._grid)

        self.setCentralWidget(container)

    def _track_worker(self, worker: ServiceWorker) -> None:
        self._workers.add(worker)
        worker.signals.finished.connect(lambda *_: self._workers.discard(worker))
        worker.signals.error.connect(lambda *_: self._workers.discard(worker))

    def _start_load(self) -> None:
        if self._busy:
            return
        self._busy = True
        self._set_status(STATUS.loading)
        worker = ServiceWorker(self._context.aggregator.load_cards)
        worker.args = (SignalProgressReporter(worker.signals),)
        worker.signals.status.connect(self._handle_status)
        worker.signals.finished.connect(self._handle_cards)
        worker.signals.error.connect(self._handle_load_error)
        self._track_worker(worker)
        self._thread_pool.start(worker)

    def _handle_status(self, text: str, current: object, total: object) -> None:
        title, sub = format_progress(text, current, total)  # type: ignore[arg-type]
        self._set_status(title, sub)

    def _handle_cards(self, cards: list[Card]) -> None:
        self._busy = False
        self._clear_status()
        self._render(cards)

    def _handle_load_error(self, message: str) -> None:
        self._busy = False
        self._set_status(STATUS.load_failed, message, show_retry=True)
        self._render([build_fallback_desktop_card()])

    def _render(self, cards: list[Card]) -> None:
        self._grid.clear()
        for card in cards:
            item = QListWidgetItem(self._card_caption(card))
            item.setData(Qt.UserRole, card.product_id)
            item.setToolTip(card.alt)
            icon = self._card_icon(card)
            if icon is not None:
                item.setIcon(icon)
            self._grid.addItem(item)

    def _card_caption(self, card: Card) -> str:
        badges = []
        if card.required_account:
            badges.append(card.required_account)
        if card.is_free:
            badges.append("Бесплатная")
        return card.title if not badges else f"{card.title}\n{' · '.join(badges)}"

    def _card_icon(self, card: Card) -> QIcon | None:
        if not card.image_url.startswith("file:"):
            return None
        return QIcon(QUrl(card.image_url).toLocalFile())

    def _launch_item(self, item: QListWidgetItem) -> None:
        product_id = item.data(Qt.UserRole)
        if not product_id:
            return
        try:
            self._context.launcher.launch(product_id)
        except LauncherError as exc:
            self._set_status(STATUS.launch_failed, str(exc), show_retry=True)

    def _set_status(self, text: str, sub: str = "", *, show_retry: bool = False) -> None:
        self._status_text.setText(text)
        self._status_sub.setText(sub)
        self._status_text.setVisible(True)
        self._status_sub.setVisible(bool(sub))
        self._btn_retry.setVisible(show_retry)

    def _clear_status(self) -> None:
        self._status_text.setVisible(False)
        self._status_sub.setVisible(False)
        self._btn_retry.setVisible(False)
