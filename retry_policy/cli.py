"""Command line entry point for the retry policy updater.

Usage:
  python -m retry_policy
  python -m retry_policy --root path/to/workflows --retries --fixed-coefficient

Exit codes: 0 after the summary, 1 when there is nothing to process
(missing root or no workflow directories), 2 on usage errors, 130 when
interrupted.
"""
from __future__ import annotations

import argparse
import logging
import signal
import sys
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List, Optional

from . import __version__
from .config import COUNT_MODES, load_config
from .console import Terminal
from .controller import run

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_NOTHING_TO_DO = 1
EXIT_INTERRUPTED = 130


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="retry-policy-updater",
        description="Add or update blockData.retryPolicy on datasource steps of workflow YAML files.",
    )
    parser.add_argument("--root", help="Workflows directory (default: ./workflows).")
    parser.add_argument("--config", help="Settings file (default: .retry-policy.yml).")
    count = parser.add_mutually_exclusive_group()
    count.add_argument(
        "--attempts",
        dest="count_mode",
        action="store_const",
        const="attempts",
        help="Ask for the total number of attempts.",
    )
    count.add_argument(
        "--retries",
        dest="count_mode",
        action="store_const",
        const="retries",
        help="Ask for the number of retries (attempts = retries + 1).",
    )
    parser.add_argument(
        "--fixed-coefficient",
        action="store_true",
        help="Do not ask for the backoff coefficient; always write 2.",
    )
    parser.add_argument(
        "--always-prompt",
        action="store_true",
        help="Ask about every workflow, even when all its steps are up to date.",
    )
    parser.add_argument("-v", "--verbose", action="count", default=0, help="More log output (-vv for debug).")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser.parse_args(argv)


def _configure_logging(verbose: int, configured_level: str) -> None:
    if verbose >= 2:
        level = logging.DEBUG
    elif verbose == 1:
        level = logging.INFO
    else:
        level = getattr(logging, str(configured_level).upper(), logging.WARNING)
    logging.basicConfig(
        level=level,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _raise_interrupt(signum: int, frame: object) -> None:
    raise KeyboardInterrupt


@contextmanager
def interrupt_on_sigterm() -> Iterator[None]:
    """Treat SIGTERM like Ctrl+C for the duration of the block."""
    previous = signal.signal(signal.SIGTERM, _raise_interrupt)
    try:
        yield
    finally:
        signal.signal(signal.SIGTERM, previous)


def main(argv: Optional[List[str]] = None, terminal: Optional[Terminal] = None) -> int:
    args = parse_args(argv)
    settings = load_config(args.config)
    _configure_logging(args.verbose, settings["log_level"])

    root = Path(args.root or settings["workflows_root"])
    count_mode = args.count_mode or settings["count_mode"]
    if count_mode not in COUNT_MODES:
        count_mode = "attempts"
    prompt_coefficient = bool(settings["prompt_coefficient"]) and not args.fixed_coefficient
    skip_up_to_date = bool(settings["skip_up_to_date"]) and not args.always_prompt
    logger.info(
        "root=%s count_mode=%s prompt_coefficient=%s skip_up_to_date=%s",
        root,
        count_mode,
        prompt_coefficient,
        skip_up_to_date,
    )

    with terminal or Terminal() as term, interrupt_on_sigterm():
        try:
            summary = run(
                term,
                root,
                count_mode=count_mode,
                prompt_coefficient=prompt_coefficient,
                skip_up_to_date=skip_up_to_date,
            )
        except (KeyboardInterrupt, EOFError):
            term.say()
            term.say("Script interrupted by user.")
            return EXIT_INTERRUPTED
    if summary.aborted:
        return EXIT_NOTHING_TO_DO
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
