"""Entry point for the buildpack-usage command."""

import logging
import os
import sys

from buildpack_usage.cli import run_cli


def _configure_logging() -> None:
    log_level = os.getenv("LOG_LEVEL", "WARNING").upper()
    logging.basicConfig(
        level=log_level,
        stream=sys.stderr,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )


def main() -> None:
    """Run the CLI and exit with its status code."""
    _configure_logging()
    logger = logging.getLogger("buildpack-usage")

    try:
        exit_code = run_cli()
    except KeyboardInterrupt:
        logger.warning("Interrupted (Ctrl+C).")
        sys.stderr.write("\nInterrupted\n")
        exit_code = 130
    except Exception:
        logger.exception("buildpack-usage stopped due to an unexpected error.")
        raise
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
