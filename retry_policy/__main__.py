"""Entry point for the retry policy updater.

Executing ``python -m retry_policy`` forwards to the CLI defined in
``retry_policy.cli``.
"""
import sys

from .cli import main


if __name__ == "__main__":
    sys.exit(main())
