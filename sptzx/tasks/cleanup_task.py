"""
Cleanup Task

Expiry of uploaded objects. Two independent triggers converge on the
same idempotent delete:

1. A deferred job per object, scheduled at publish time and firing once
   the TTL has elapsed.
2. A periodic sweep over the whole registry that deletes anything older
   than the TTL, in case a deferred job was lost.

Both run on an APScheduler background scheduler and may race each other
harmlessly.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from apscheduler.job import Job
from apscheduler.jobstores.base import JobLookupError
from apscheduler.schedulers.background import BackgroundScheduler

from sptzx.domain.file_storage.services import FileManager

# Configure logging
logger = logging.getLogger(__name__)

SWEEP_JOB_ID = "sweep-expired-objects"
EXPIRE_JOB_PREFIX = "expire-"


def expire_job_id(object_id: str) -> str:
    return f"{EXPIRE_JOB_PREFIX}{object_id}"


class ExpirySweeper:
    """
    Schedules and runs object expiry.

    The deferred job id (``expire-<object id>``) is the cancellable handle
    of an object's timer. Cancelling is an optimization only: deletion is
    idempotent, so a job firing for an already deleted object is a no-op.
    """

    def __init__(
        self,
        file_manager: FileManager,
        ttl_seconds: int,
        sweep_interval_seconds: int = 60,
        scheduler: Optional[BackgroundScheduler] = None,
    ):
        """
        Initialize ExpirySweeper.

        Args:
            file_manager: Owner of the deletion path
            ttl_seconds: Object lifetime
            sweep_interval_seconds: Period of the full registry scan
            scheduler: Scheduler to run jobs on (default: new daemon BackgroundScheduler)
        """
        self.file_manager = file_manager
        self.ttl_seconds = ttl_seconds
        self.sweep_interval_seconds = sweep_interval_seconds
        self.scheduler = scheduler or BackgroundScheduler(
            timezone=timezone.utc, daemon=True
        )

    def start(self) -> None:
        """Register the periodic sweep and start the scheduler."""
        self.scheduler.add_job(
            self.sweep_expired_objects,
            trigger="interval",
            seconds=self.sweep_interval_seconds,
            id=SWEEP_JOB_ID,
            name="Sweep expired objects",
            replace_existing=True,
            coalesce=True,
            max_instances=1,
        )
        if not self.scheduler.running:
            self.scheduler.start()
        logger.info(
            f"Expiry sweeper started (ttl={self.ttl_seconds}s, "
            f"sweep every {self.sweep_interval_seconds}s)"
        )

    def shutdown(self, wait: bool = False) -> None:
        if self.scheduler.running:
            self.scheduler.shutdown(wait=wait)

    def schedule_expiry(self, object_id: str) -> Job:
        """
        Schedule deletion of one object ``ttl_seconds`` from now.

        Returns:
            The scheduled APScheduler job
        """
        run_date = datetime.now(timezone.utc) + timedelta(seconds=self.ttl_seconds)
        return self.scheduler.add_job(
            self.expire_object,
            trigger="date",
            run_date=run_date,
            args=[object_id],
            id=expire_job_id(object_id),
            name=f"Expire {object_id}",
            replace_existing=True,
            misfire_grace_time=None,
        )

    def cancel_expiry(self, object_id: str) -> bool:
        """
        Cancel the deferred job of an object.

        Returns:
            True if a pending job was removed
        """
        try:
            self.scheduler.remove_job(expire_job_id(object_id))
        except JobLookupError:
            return False
        return True

    def expire_object(self, object_id: str) -> bool:
        """Deferred-job entry point: delete one object."""
        deleted = self.file_manager.delete_file(object_id)
        if deleted:
            logger.info(f"Expired {object_id}")
        return deleted

    def sweep_expired_objects(self, now: Optional[float] = None) -> int:
        """
        Periodic-job entry point: delete every object past its TTL.

        Returns:
            Number of objects deleted by this sweep
        """
        count = 0
        for object_id in self.file_manager.find_expired(self.ttl_seconds, now):
            if self.file_manager.delete_file(object_id):
                count += 1
            self.cancel_expiry(object_id)

        if count:
            logger.info(f"Sweep removed {count} expired objects")
        return count
