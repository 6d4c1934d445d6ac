#!/usr/bin/env python3
"""
syswatch
One-shot system summary and local network diagnosis
"""

import sys

from loguru import logger

from syswatch.cli import main as cli_main


def main():
    """Main entry point."""
    try:
        return cli_main(sys.argv[1:])
    except KeyboardInterrupt:
        logger.info("Interrupted")
        return 130
    except Exception as e:
        logger.exception(f"Fatal error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
