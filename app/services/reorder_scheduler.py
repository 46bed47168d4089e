from __future__ import annotations

import logging
import os
from datetime import datetime, timezone
from typing import Optional

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger
from sqlalchemy.orm import Session

from app.core.db import SessionLocal, engine
from app.services.reorder_scan import scan_reorder_needs


logger = logging.getLogger(__name__)


def _env_enabled(name: str, default: str = "true") -> bool:
    return os.getenv(name, default).lower() in ("1", "true", "yes", "on")


class ReorderScanScheduler:
    """Background scheduler for the periodic reorder scan.

    Runs inside the API process and is controlled from FastAPI
    startup/shutdown events. On PostgreSQL an advisory lock keeps the scan
    to a single backend instance.
    """

    def __init__(self, interval_minutes: int | None = None) -> None:
        if interval_minutes is None:
            interval_minutes = int(os.getenv("REORDER_SCAN_INTERVAL_MINUTES", "1440"))
        self._interval_minutes = interval_minutes
        self._scheduler: Optional[BackgroundScheduler] = None

        # NOTE: lock key is a fixed BIGINT shared across all backend instances.
        self._lock_key: int = 9_223_372_036_854_770_101
        self._lock_connection = None

    @property
    def running(self) -> bool:
        return self._scheduler is not None and self._scheduler.running

    def start(self) -> None:
        """Start the scheduler unless disabled or already running."""
        if not _env_enabled("REORDER_SCAN_ENABLED"):
            logger.warning("ReorderScanScheduler disabled via REORDER_SCAN_ENABLED")
            return

        if self.running:
            logger.warning("ReorderScanScheduler already running, skipping start")
            return

        if not self._acquire_advisory_lock():
            logger.warning(
                "ReorderScanScheduler disabled (PostgreSQL advisory lock not acquired)"
            )
            return

        scheduler = BackgroundScheduler(timezone="UTC")
        scheduler.add_job(
            self._run_scan_job,
            trigger=IntervalTrigger(minutes=self._interval_minutes),
            id="reorder_scan_job",
            replace_existing=True,
            max_instances=1,
            next_run_time=datetime.now(timezone.utc),
        )
        scheduler.start()
        self._scheduler = scheduler
        logger.warning(
            "ReorderScanScheduler started with interval %s minutes", self._interval_minutes
        )

    def shutdown(self) -> None:
        if self._scheduler is not None:
            try:
                self._scheduler.shutdown(wait=False)
                logger.warning("ReorderScanScheduler stopped")
            finally:
                self._scheduler = None

        self._release_advisory_lock()

    def _acquire_advisory_lock(self) -> bool:
        if engine.dialect.name != "postgresql":
            # Single-process databases (SQLite) need no cross-instance guard.
            return True

        if self._lock_connection is not None:
            return True

        conn = None
        try:
            conn = engine.raw_connection()
            cursor = conn.cursor()
            cursor.execute("SELECT pg_try_advisory_lock(%s);", (self._lock_key,))
            row = cursor.fetchone()
            acquired = bool(row[0]) if row is not None else False
            cursor.close()

            if not acquired:
                conn.rollback()
                conn.close()
                return False

            conn.commit()
            self._lock_connection = conn
            logger.warning(
                "ReorderScanScheduler advisory lock acquired (key=%s)", self._lock_key
            )
            return True
        except Exception:
            logger.exception("Failed to acquire PostgreSQL advisory lock")
            if conn is not None:
                try:
                    conn.close()
                except Exception:
                    logger.exception("Failed to close advisory lock connection")
            return False

    def _release_advisory_lock(self) -> None:
        if self._lock_connection is None:
            return

        try:
            cursor = self._lock_connection.cursor()
            cursor.execute("SELECT pg_advisory_unlock(%s);", (self._lock_key,))
            self._lock_connection.commit()
            cursor.close()
            logger.warning(
                "ReorderScanScheduler advisory lock released (key=%s)", self._lock_key
            )
        except Exception:
            # Closing the connection releases the lock anyway.
            logger.exception("Failed to release PostgreSQL advisory lock explicitly")
        finally:
            try:
                self._lock_connection.close()
            except Exception:
                logger.exception("Failed to close advisory lock connection")
            self._lock_connection = None

    @staticmethod
    def _run_scan_job() -> None:
        """Job body; failures are logged so they never stop the scheduler."""
        logger.warning("Reorder scan job started")
        db: Session = SessionLocal()
        try:
            scan_reorder_needs(db=db)
            logger.warning("Reorder scan job completed successfully")
        except Exception:
            logger.exception("Error while running reorder scan job")
        finally:
            db.close()
