"""Console entry point for davkeep.

Runs CLIRunner on the uvloop event loop. All command behavior lives in the
handlers under davkeep.cli.commands.
"""

import sys
from collections.abc import Sequence

import uvloop

from davkeep.cli import CLIRunner
from davkeep.logger import get_logger

logger = get_logger(__name__)


async def async_main(argv: Sequence[str] | None = None) -> None:
    """Build the runner and dispatch argv (defaults to sys.argv[1:])."""
    logger.debug("davkeep invoked with %s", argv or sys.argv[1:])
    await CLIRunner().run(argv)


def main(argv: Sequence[str] | None = None) -> None:
    """Run davkeep; exits with status 1 on cancellation or crashes."""
    try:
        uvloop.run(async_main(argv))
    except KeyboardInterrupt:
        logger.info("Cancelled by user")
        sys.exit(1)
    except Exception:
        logger.exception("❌ Unexpected error")
        sys.exit(1)


if __name__ == "__main__":
    main()
