"""
Periodic reconciliation scheduler.
Runs a full reminder reconciliation for every known user at a fixed interval,
so reminders drift back in line with the task list even without app events.
"""

import argparse
import asyncio
import signal
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Iterable, Optional

from dependency_injector.wiring import Provide, inject

from src.core.config.settings import settings
from src.core.di.container import Container
from src.core.utils import configure_logging, get_logger
from src.modules.reminders.services.reminder_sync_registry import \
    ReminderSyncRegistry

logger = get_logger(__name__)


@dataclass
class ReconciliationMetrics:
    """Metrics for the reconciliation scheduler."""

    total_cycles: int = 0
    users_reconciled: int = 0
    reminders_scheduled: int = 0
    errors: int = 0
    started_at: Optional[datetime] = None


class ReconciliationScheduler:
    """
    Loop that reconciles every user held by the registry.
    """

    @inject
    def __init__(
        self,
        interval_seconds: Optional[int] = None,
        user_ids: Optional[Iterable[str]] = None,
        registry: ReminderSyncRegistry = Provide[Container.reminder_sync_registry],
    ):
        self.interval_seconds = interval_seconds or settings.reminders.reconcile_interval_seconds
        self.registry = registry
        self.running = False
        self.metrics = ReconciliationMetrics()

        # Seed the registry so a standalone worker knows whom to reconcile
        for user_id in user_ids or []:
            self.registry.get(user_id)

    async def start(self, install_signal_handlers: bool = True):
        """Start the scheduler loop."""
        self.running = True
        self.metrics.started_at = datetime.now(timezone.utc)

        logger.info("Starting reconciliation scheduler", interval=self.interval_seconds)

        if install_signal_handlers:
            loop = asyncio.get_running_loop()
            for sig in (signal.SIGINT, signal.SIGTERM):
                try:
                    loop.add_signal_handler(sig, lambda: asyncio.create_task(self.stop()))
                except NotImplementedError:
                    # Windows doesn't support add_signal_handler
                    pass

        try:
            while self.running:
                cycle_start = datetime.now(timezone.utc)
                await self.run_cycle()

                elapsed = (datetime.now(timezone.utc) - cycle_start).total_seconds()
                sleep_time = max(0, self.interval_seconds - elapsed)

                if self.running:
                    await asyncio.sleep(sleep_time)

        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.error("Fatal reconciliation scheduler error", error=str(e), exc_info=True)
            self.metrics.errors += 1
        finally:
            logger.info("Reconciliation scheduler stopped")

    async def stop(self):
        """Graceful shutdown."""
        logger.info("Shutdown signal received")
        self.running = False

    async def run_cycle(self) -> int:
        """Reconcile every known user once. Returns the reminders scheduled."""
        self.metrics.total_cycles += 1
        logger.debug("Starting reconciliation cycle", cycle=self.metrics.total_cycles)

        scheduled = 0
        for user_id in self.registry.user_ids:
            try:
                count = await self.registry.get(user_id).reconcile_all(user_id)
                scheduled += count
                self.metrics.users_reconciled += 1
            except Exception as e:
                logger.error("Reconciliation failed", user_id=user_id, error=str(e))
                self.metrics.errors += 1

        self.metrics.reminders_scheduled += scheduled
        logger.info(
            "Reconciliation cycle finished",
            cycle=self.metrics.total_cycles,
            users=len(self.registry.user_ids),
            scheduled=scheduled,
        )
        return scheduled


async def main_async():
    """Entry point."""
    configure_logging()
    container = Container()
    container.wire(modules=[__name__])

    parser = argparse.ArgumentParser()
    parser.add_argument("--interval", type=int, default=None)
    parser.add_argument("--user", action="append", dest="users", default=[])
    args = parser.parse_args()

    backend = container.reminder_backend()
    backend.start()
    try:
        scheduler = ReconciliationScheduler(
            interval_seconds=args.interval, user_ids=args.users
        )
        await scheduler.start()
    finally:
        backend.shutdown()


def main():
    try:
        asyncio.run(main_async())
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    main()
