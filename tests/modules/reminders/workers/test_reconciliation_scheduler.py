import unittest
from unittest.mock import AsyncMock, MagicMock, patch

from src.modules.reminders.workers.reconciliation_scheduler import (
    ReconciliationMetrics, ReconciliationScheduler)


class TestReconciliationScheduler(unittest.IsolatedAsyncioTestCase):

    def setUp(self):
        self.engines = {}
        self.mock_registry = MagicMock()
        self.mock_registry.user_ids = ["user-1", "user-2"]
        self.mock_registry.get.side_effect = self._engine
        self.scheduler = ReconciliationScheduler(
            interval_seconds=1,
            registry=self.mock_registry,
        )

    def _engine(self, user_id):
        if user_id not in self.engines:
            engine = MagicMock()
            engine.reconcile_all = AsyncMock(return_value=2)
            self.engines[user_id] = engine
        return self.engines[user_id]

    async def test_initialization(self):
        self.assertEqual(self.scheduler.interval_seconds, 1)
        self.assertEqual(self.scheduler.metrics, ReconciliationMetrics())
        self.assertFalse(self.scheduler.running)

    async def test_seed_users(self):
        ReconciliationScheduler(
            interval_seconds=1, user_ids=["user-3"], registry=self.mock_registry
        )

        self.mock_registry.get.assert_called_with("user-3")

    async def test_run_cycle_reconciles_every_user(self):
        scheduled = await self.scheduler.run_cycle()

        self.assertEqual(scheduled, 4)
        self.engines["user-1"].reconcile_all.assert_awaited_once_with("user-1")
        self.engines["user-2"].reconcile_all.assert_awaited_once_with("user-2")
        self.assertEqual(self.scheduler.metrics.total_cycles, 1)
        self.assertEqual(self.scheduler.metrics.users_reconciled, 2)
        self.assertEqual(self.scheduler.metrics.reminders_scheduled, 4)

    async def test_run_cycle_counts_errors(self):
        self._engine("user-1").reconcile_all.side_effect = RuntimeError("boom")

        scheduled = await self.scheduler.run_cycle()

        self.assertEqual(scheduled, 2)
        self.assertEqual(self.scheduler.metrics.errors, 1)
        self.assertEqual(self.scheduler.metrics.users_reconciled, 1)

    async def test_start_runs_until_stopped(self):
        async def run_once():
            await self.scheduler.stop()
            return 0

        self.scheduler.run_cycle = AsyncMock(side_effect=run_once)

        await self.scheduler.start(install_signal_handlers=False)

        self.scheduler.run_cycle.assert_awaited_once()
        self.assertFalse(self.scheduler.running)
        self.assertIsNotNone(self.scheduler.metrics.started_at)

    async def test_default_interval_from_settings(self):
        with patch(
            "src.modules.reminders.workers.reconciliation_scheduler.settings"
        ) as mock_settings:
            mock_settings.reminders.reconcile_interval_seconds = 900

            scheduler = ReconciliationScheduler(registry=self.mock_registry)

        self.assertEqual(scheduler.interval_seconds, 900)
