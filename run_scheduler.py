#!/usr/bin/env python3
"""
PlanetFeed Scheduler Runner
==========================

Entry point for recurring feed runs. Runs once by default, or keeps
running every configured interval with --service.
"""

import sys
import asyncio
import argparse
from pathlib import Path

# Add the project root to Python path
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))

from planetfeed.scheduler.feed_scheduler import FeedScheduler
from planetfeed.config.settings import get_settings
from planetfeed.utils.logging import configure_application_logging, get_logger_for_component


class FeedSchedulerService:
    """
    Service wrapper for FeedScheduler that handles continuous operation.
    """

    def __init__(self, scheduler: FeedScheduler):
        self.scheduler = scheduler
        self.settings = get_settings()
        self.logger = get_logger_for_component("scheduler_service")
        self.running = True

    async def run_service(self):
        """Run feed aggregation on a fixed interval until stopped."""
        interval = self.settings.schedule.interval_minutes * 60
        self.logger.info(f"Starting feed service, running every {self.settings.schedule.interval_minutes} minutes")

        if not self.settings.schedule.run_on_startup:
            await asyncio.sleep(interval)

        while self.running:
            try:
                result = await self.scheduler.run_once()
                if result['success']:
                    self.logger.info("Feed run completed successfully")
                else:
                    self.logger.error(f"Feed run finished with {len(result['errors'])} failed feeds")
            except Exception as e:
                self.logger.error(f"Service error: {e}", exc_info=True)

            await asyncio.sleep(interval)

        self.logger.info("Feed service stopped")


async def main():
    """Main entry point for the scheduler service."""
    parser = argparse.ArgumentParser(description='PlanetFeed Scheduler')
    parser.add_argument('--service', action='store_true',
                        help='Run continuously on the configured interval (for Docker/systemd)')
    parser.add_argument('--debug', action='store_true', help='Enable debug logging')

    args = parser.parse_args()

    settings = get_settings()
    configure_application_logging(
        log_level="DEBUG" if args.debug else settings.get_effective_log_level(),
        log_file=settings.logging.file_path,
        enable_console=settings.logging.console_logging,
        structured_logging=settings.logging.structured_logging,
        max_file_size_mb=settings.logging.max_file_size_mb,
        backup_count=settings.logging.backup_count,
    )
    logger = get_logger_for_component("scheduler_runner")

    logger.info("Starting PlanetFeed Scheduler...")

    try:
        scheduler = FeedScheduler(settings)

        if args.service:
            service = FeedSchedulerService(scheduler)
            await service.run_service()
        else:
            result = await scheduler.run_once()
            print(FeedScheduler.format_run_summary(result))
            sys.exit(0 if result['success'] else 1)

    except KeyboardInterrupt:
        logger.info("Scheduler stopped by user")
    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    asyncio.run(main())
