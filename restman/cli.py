import argparse
import logging
import sys
from typing import List, Optional

from pydantic import ValidationError

from . import __version__
from .config import Settings, get_settings
from .http_client import HTTPClient
from .storage import EnvironmentStore, HistoryStore, SavedRequestStore

logger = logging.getLogger("restman.cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="restman", description="Terminal REST client")
    parser.add_argument(
        "--data-dir",
        default=None,
        help="Directory for environments, history and saved requests (default: ~/.restman)",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Log level written to the log file (default: WARNING)",
    )
    parser.add_argument("--version", action="version", version=f"restman {__version__}")
    return parser


def configure_logging(settings: Settings) -> None:
    # the terminal belongs to the UI, so logs go to a file
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    logging.basicConfig(
        filename=str(settings.resolved_log_file()),
        level=getattr(logging, settings.log_level, logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        settings = get_settings(data_dir=args.data_dir, log_level=args.log_level)
    except ValidationError as e:
        print(f"restman: invalid configuration\n{e}", file=sys.stderr)
        return 2

    configure_logging(settings)
    logger.info("Starting restman %s with data dir %s", __version__, settings.data_dir)

    from .tui import RestmanApp

    app = RestmanApp(
        settings,
        environment_store=EnvironmentStore(settings.environments_file),
        history_store=HistoryStore(settings.history_file, limit=settings.history_limit),
        saved_request_store=SavedRequestStore(settings.saved_requests_file),
        client=HTTPClient(timeout=settings.request_timeout_sec, follow_redirects=settings.follow_redirects),
    )
    app.run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
