"""Command-line entry point."""

import logging
import sys

from island_erosion.config import settings
from island_erosion.runner import run_from_settings


def setup_logging() -> None:
    """Configure logging for the run."""
    level = getattr(logging, settings.log_level.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stdout,
    )


def main() -> None:
    """Generate and erode one island using environment settings."""
    setup_logging()
    logger = logging.getLogger(__name__)
    logger.info(
        "Island erosion starting (seed=%d, %dx%d, preset=%s)",
        settings.seed, settings.width, settings.height, settings.preset,
    )

    result = run_from_settings(settings)

    logger.info(
        "Done: eroded=%.4f deposited=%.4f droplets=%d",
        result.stats.eroded, result.stats.deposited, result.stats.droplets,
    )


def run() -> None:
    """Entry point for the console script."""
    main()


if __name__ == "__main__":
    run()
