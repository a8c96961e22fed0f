"""
Ghar Nari - Entry Point
=======================

Runs the storage engine as a long-lived process: checks the data on
startup and keeps the daily backup schedule alive.
"""

import asyncio

from dotenv import load_dotenv

load_dotenv()

from gharnari.app import BlogServices
from gharnari.core.logger import logger


async def main():
    """Main entry point."""
    services = BlogServices()

    report = await services.store.perform_integrity_check()
    if report["status"] != "healthy":
        for issue in report["issues"]:
            logger.warning("Integrity Issue", [("Issue", issue)])

    await services.initialize_backup_system()

    try:
        await asyncio.Event().wait()
    finally:
        await services.close()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("Received keyboard interrupt")
