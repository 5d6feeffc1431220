from __future__ import annotations

import argparse
import logging
import sys
import threading
from dataclasses import replace
from datetime import timedelta
from pathlib import Path
from signal import SIGINT, SIGTERM, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from designrelay.app import build_reconciler, get_design, poll_once, run_poller, save_design
from designrelay.config import ConfigurationError, configure_logging, get_polling_config
from designrelay.domain.errors import DesignNotFound, DuplicateKey
from designrelay.domain.model import encode_png_data_url

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from designrelay.config import PollingConfig

log = logging.getLogger(__name__)

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Relay order designs to the print inbox")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    poll = subparsers.add_parser("poll", help="Poll the order API and send design emails")
    poll.add_argument(
        "--once",
        action="store_true",
        help="Run a single cycle and exit (non-zero exit code if the fetch failed)",
    )
    poll.add_argument(
        "--lookback-minutes",
        type=float,
        help="Trailing window of order modifications to fetch (defaults to config)",
    )
    poll.add_argument(
        "--interval-seconds",
        type=float,
        help="Delay between successful cycles (defaults to config)",
    )

    save = subparsers.add_parser("save-design", help="Store a design for later orders")
    save.add_argument("--design-id", required=True, help="Identifier customers enter as Text")
    save.add_argument("--template", required=True, help="Template the design was made from")
    save.add_argument(
        "--image",
        required=True,
        help="Path to a PNG file or a data:image/png;base64 URL",
    )

    show = subparsers.add_parser("show-design", help="Show a stored design")
    show.add_argument("design_id", help="Identifier of the design")

    return parser.parse_args(list(argv))


def _polling_config(args: argparse.Namespace) -> PollingConfig:
    config = get_polling_config()
    if args.lookback_minutes is not None:
        if args.lookback_minutes <= 0:
            raise ValueError("Lookback minutes must be positive")
        config = replace(config, lookback=timedelta(minutes=args.lookback_minutes))
    if args.interval_seconds is not None:
        if args.interval_seconds <= 0:
            raise ValueError("Interval seconds must be positive")
        config = replace(config, interval=timedelta(seconds=args.interval_seconds))
    return config


def _read_image(value: str) -> str:
    if value.startswith("data:"):
        return value
    path = Path(value).expanduser()
    if not path.is_file():
        raise ValueError(f"Image is neither a data URL nor a readable file: {value}")
    content = path.read_bytes()
    if not content.startswith(PNG_SIGNATURE):
        raise ValueError(f"Image file is not a PNG: {path}")
    return encode_png_data_url(content)


def _install_stop_handlers(stop_event: threading.Event) -> None:
    def handler(signal_received: int, _frame: FrameType | None) -> None:
        log.info("Received signal %s, stopping after the current cycle", signal_received)
        stop_event.set()

    signal(SIGINT, handler)
    signal(SIGTERM, handler)


def _run_poll(args: argparse.Namespace, polling: PollingConfig) -> int:
    reconciler = build_reconciler(polling=polling)
    if args.once:
        result = poll_once(reconciler=reconciler)
        return 0 if result.success else 1
    stop_event = threading.Event()
    _install_stop_handlers(stop_event)
    run_poller(reconciler=reconciler, polling=polling, stop_event=stop_event)
    return 0


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    try:
        parsed_args = _parse_args(args_list)
        configure_logging(level=logging.DEBUG if parsed_args.debug else logging.INFO)
        polling = _polling_config(parsed_args) if parsed_args.command == "poll" else None
        image = _read_image(parsed_args.image) if parsed_args.command == "save-design" else None
    except ConfigurationError as exc:
        log.error("Configuration error: %s", exc)  # noqa: TRY400
        sys.exit(2)
    except ValueError:
        log.exception("CLI validation error")
        sys.exit(2)

    exit_code = 0
    try:
        if parsed_args.command == "poll" and polling is not None:
            exit_code = _run_poll(parsed_args, polling)
        elif parsed_args.command == "save-design" and image is not None:
            design = save_design(
                design_id=parsed_args.design_id,
                image=image,
                template=parsed_args.template,
            )
            log.info("Stored design %s (template %s)", design.design_id, design.template)
        elif parsed_args.command == "show-design":
            design = get_design(parsed_args.design_id)
            log.info(
                "Design %s: template=%s, created_at=%s, image_bytes=%s",
                design.design_id,
                design.template,
                design.created_at.isoformat(),
                len(design.decode_image()),
            )
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301
    except (DuplicateKey, DesignNotFound) as exc:
        log.error("%s", exc)  # noqa: TRY400
        sys.exit(1)
    except ConfigurationError as exc:
        log.error("Configuration error: %s", exc)  # noqa: TRY400
        sys.exit(2)
    except ValueError:
        log.exception("Invalid input")
        sys.exit(2)
    except Exception:
        log.exception("Fatal error")
        sys.exit(1)

    if exit_code:
        sys.exit(exit_code)


def run() -> None:
    """Console entry point: load `.env` then dispatch."""
    load_dotenv()
    main()


if __name__ == "__main__":
    run()
