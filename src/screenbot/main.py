"""Command-line entry point.

    screenbot list
    screenbot -w "Preview" screenshot -f shot.png
    screenbot -w "~^Untitled" find -t button.png --timeout 5
    screenbot -i 4242 click -t button.png
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .bot import Bot, Id, Name, Regex
from .core.config import ConfigManager
from .core.errors import ImageNotFound, ScreenbotError
from .core.logging_setup import get_artifacts_dir, setup_logging
from .io.controls import InputController
from .io.windows import WindowList

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="screenbot", description="Find images in a window and click on them")
    ap.add_argument("--config", help="Path to config.ini (default: per-user config)")
    ap.add_argument("--log-level", help="Override DEFAULT.log_level")
    group = ap.add_mutually_exclusive_group()
    group.add_argument("-w", "--window", metavar="NAME", help="Name of the window (prefix with ~ for a regex)")
    group.add_argument("-i", "--id", type=int, metavar="ID", help="Id of the window")

    sub = ap.add_subparsers(dest="command", required=True)
    sub.add_parser("list", help="List on-screen windows")
    shot = sub.add_parser("screenshot", help="Save a grayscale capture of the window")
    shot.add_argument("-f", "--file", required=True, help="Filename of the screenshot (bare names go to the session artifacts directory)")
    for name, text in (("find", "Search a template image in the window"),
                       ("click", "Search a template image and click on its center")):
        p = sub.add_parser(name, help=text)
        p.add_argument("-t", "--template", required=True, help="Filename of the template image")
        p.add_argument("--timeout", type=float, default=0.0,
                       help="Seconds before giving up (default 0: wait until found)")
    return ap


def _bind(ap: argparse.ArgumentParser, args, bot: Bot) -> None:
    if args.window:
        selector = Regex(args.window[1:]) if args.window.startswith("~") else Name(args.window)
    elif args.id is not None:
        selector = Id(args.id)
    else:
        ap.error("window name or id required")
    try:
        window = bot.bind_window_by(selector)
    except ValueError as exc:
        ap.error(str(exc))
    if window is None:
        ap.error("window not found")


def _screenshot_path(config_manager, filename: str) -> Path:
    """Bare filenames go to the artifacts directory of the logging session."""
    path = Path(filename)
    if path.parent == Path(".") and not path.is_absolute():
        return get_artifacts_dir(config_manager) / path
    return path


def main(argv: Optional[List[str]] = None) -> int:
    ap = build_parser()
    args = ap.parse_args(argv)

    config_manager = ConfigManager(args.config)
    setup_logging(config_manager, args.log_level)

    try:
        if args.command == "list":
            print("\n" + WindowList().prettify())
            return 0

        bot = Bot.from_config(config_manager)
        _bind(ap, args, bot)
        if args.command == "screenshot":
            out = bot.screenshot(_screenshot_path(config_manager, args.file))
            print(out)
        elif args.command == "find":
            rect = bot.find_with_timeout(args.template, args.timeout)
            print(f"{rect.x} {rect.y} {rect.width} {rect.height}")
        elif args.command == "click":
            bot.set_controller(InputController())
            x, y = bot.click_on_image(args.template, args.timeout)
            print(f"{x} {y}")
    except ImageNotFound as exc:
        logger.warning("%s", exc)
        return 1
    except ScreenbotError:
        logger.exception("screenbot: %s failed", args.command)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
