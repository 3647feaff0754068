"""CLI entrypoint for scripted catalog loads and launches."""
from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from launcher_config.user_settings import SettingsStore, load_settings
from services.context import create_context
from services.errors import LauncherError
from services.progress import LoggingProgressReporter


class ConsoleShell:
    """Shell control for headless runs: there is no window, exit is recorded."""

    def __init__(self) -> None:
        self.exit_code: int | None = None

    def hide_window(self) -> None:
        return None

    def exit(self, code: int = 0) -> None:
        self.exit_code = code


def _print_json(payload: object) -> None:
    print(json.dumps(payload, ensure_ascii=False, indent=2))


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Station launcher automation CLI")
    parser.add_argument("command", help="Operation to run", choices=["cards", "station", "launch", "settings"])
    parser.add_argument("product_id", nargs="?", help="Product to launch (launch only)")
    parser.add_argument("--settings", type=Path, default=None, help="Path to settings.json")
    parser.add_argument("--write", action="store_true", help="Persist effective settings (settings only)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    args = parser.parse_args(argv)

    store = SettingsStore(args.settings)
    settings = load_settings(store)
    logging.basicConfig(
        level=logging.DEBUG if (args.verbose or settings.debug) else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command == "settings":
        if not store.exists():
            print(f"No settings file at {store.path}, using defaults", file=sys.stderr)
        if args.write:
            store.save(settings)
            print(f"Settings written to {store.path}", file=sys.stderr)
        _print_json(settings.to_dict())
        return 0

    if args.command == "launch" and not args.product_id:
        parser.error("launch requires a product_id")

    shell = ConsoleShell()
    context = create_context(settings, shell)
    try:
        if args.command == "cards":
            cards = context.aggregator.load_cards(LoggingProgressReporter())
            _print_json([card.to_dict() for card in cards])
        elif args.command == "station":
            _print_json(context.aggregator.load_station_details().to_dict())
        else:
            context.aggregator.load_cards(LoggingProgressReporter())
            outcome = context.launcher.launch(args.product_id)
            print(outcome.value)
    except LauncherError as exc:
        print(str(exc), file=sys.stderr)
        return 1
    return shell.exit_code or 0


if __name__ == "__main__":
    raise SystemExit(main())
