"""Coin ledger reconciliation worker

Compares every account balance with the sum of its transactions on a fixed
interval. The job is read-only: a mismatch is reported, never repaired.

    python -m src.worker.ledger_reconciler --once
    python -m src.worker.ledger_reconciler --interval 3600
"""

import asyncio
import logging
from datetime import datetime
from typing import Optional
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession

from config import ApplicationConfig
from src.adapter.repositories import SqlAlchemyAccountRepository, SqlAlchemyCoinTransactionRepository
from src.app.use_cases.ledger import ReconcileLedger, ReconciliationResultDTO

logger = logging.getLogger(__name__)


class LedgerReconcilerWorker:
    """
    Runs ReconcileLedger in its own session, once or until stopped.

    A session_factory can be handed in to share the API's engine; otherwise
    the worker opens (and on shutdown disposes) an engine for db_uri.
    """

    def __init__(
        self,
        db_uri: Optional[str] = None,
        session_factory: Optional[sessionmaker] = None,
        enabled: Optional[bool] = None,
        interval_seconds: Optional[int] = None,
    ):
        self.enabled = ApplicationConfig.RECONCILIATION_ENABLED if enabled is None else enabled
        self.interval_seconds = interval_seconds or ApplicationConfig.RECONCILIATION_INTERVAL_SECONDS
        self.db_uri = db_uri or ApplicationConfig.DB_URI
        self.engine = None
        self._stopping = asyncio.Event()

        if session_factory is None:
            self.engine = create_async_engine(self.db_uri, echo=False, future=True)
            session_factory = sessionmaker(
                self.engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
            )
        self.async_session_factory = session_factory

    async def run_once(self) -> ReconciliationResultDTO:
        started_at = datetime.utcnow()
        if not self.enabled:
            logger.info("Coin ledger reconciliation disabled")
            return ReconciliationResultDTO(
                total_accounts_checked=0,
                discrepancies_found=0,
                reconciliation_time=started_at,
                execution_time_ms=0,
            )

        async with self.async_session_factory() as session:
            result = await ReconcileLedger(
                account_repo=SqlAlchemyAccountRepository(session),
                transaction_repo=SqlAlchemyCoinTransactionRepository(session),
            ).execute()

        if result.is_err():
            logger.error(f"Coin ledger reconciliation failed: {result.error.message}")
            raise RuntimeError(f"Reconciliation failed: {result.error.message}")

        self._report(result.value)
        return result.value

    def _report(self, report: ReconciliationResultDTO) -> None:
        if not report.discrepancies_found:
            logger.info(
                f"Coin ledger balanced: {report.total_accounts_checked} accounts "
                f"checked in {report.execution_time_ms}ms"
            )
            return

        logger.error(
            f"Coin ledger out of balance: {report.discrepancies_found} of "
            f"{report.total_accounts_checked} accounts disagree with their transactions"
        )
        for item in report.discrepancies:
            logger.error(
                f"  {item.account_id} <{item.email}> stored={item.account_balance} "
                f"summed={item.calculated_balance} diff={item.discrepancy:+d}"
            )

    async def run_forever(self) -> None:
        logger.info(f"Coin ledger reconciliation every {self.interval_seconds}s")

        while not self._stopping.is_set():
            try:
                await self.run_once()
            except Exception as e:
                # Keep the schedule alive; the next cycle retries
                logger.error(f"Reconciliation cycle failed: {e}")

            try:
                await asyncio.wait_for(self._stopping.wait(), timeout=self.interval_seconds)
            except asyncio.TimeoutError:
                pass

    def stop(self) -> None:
        self._stopping.set()

    async def shutdown(self) -> None:
        self.stop()
        if self.engine is not None:
            await self.engine.dispose()
        logger.info("Coin ledger reconciliation stopped")


async def main():
    import argparse

    logging.basicConfig(
        level=getattr(logging, str(ApplicationConfig.LOG_LEVEL).upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    parser = argparse.ArgumentParser(description="Coin ledger reconciliation")
    parser.add_argument("--once", action="store_true", help="Run a single pass and exit")
    parser.add_argument(
        "--interval",
        type=int,
        default=ApplicationConfig.RECONCILIATION_INTERVAL_SECONDS,
        help="Seconds between passes",
    )
    args = parser.parse_args()

    worker = LedgerReconcilerWorker(interval_seconds=args.interval)
    try:
        if args.once:
            report = await worker.run_once()
            raise SystemExit(1 if report.discrepancies_found else 0)
        await worker.run_forever()
    except KeyboardInterrupt:
        logger.info("Interrupted")
    finally:
        await worker.shutdown()


if __name__ == "__main__":
    asyncio.run(main())
