"""Application entrypoint for the station launcher PySide6 shell."""
from __future__ import annotations

import logging
import sys

from PySide6.QtWidgets import QApplication

from launcher_config.user_settings import load_settings
from ui.main_window import LauncherWindow


def main() -> int:
    settings = load_settings()
    logging.basicConfig(
        level=logging.DEBUG if settings.debug else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app = QApplication(sys.argv)
    window = LauncherWindow(settings)
    window.showFullScreen()
    return app.exec()


if __name__ == "__main__":
    raise SystemExit(main())
