"""
Replay lifecycle: rejection, download marking and expiry.

Status writes go through ReplaysRepository.set_fields, a single UPDATE per
replay, so concurrent writers simply overwrite each other.
"""

import structlog
from exceptions import DatabaseException, FileException
from metrics import replay_status_changes_total
from models.enums import ReplayStatus
from repositories.replays_repository import ReplaysRepository

logger = structlog.get_logger()


def is_privileged(actor):
    """Default authorization check: only admins may mark downloads"""
    return bool(actor is not None and getattr(actor, "is_admin", False))


class LifecycleController:
    """Status transitions for a single replay"""

    def __init__(self, file_store, authorize=is_privileged):
        self.file_store = file_store
        self.authorize = authorize

    def reject(self, replay):
        """
        Move a replay to the terminal rejected state and drop its file.

        Safe to call twice. A failing file delete is logged and the status
        change is still persisted.
        """
        reference = replay.replay_file
        if reference:
            try:
                if not self.file_store.delete(reference):
                    logger.info("replay_file_missing", replay_id=replay.id, reference=reference)
            except FileException as e:
                logger.warning("replay_file_delete_failed", replay_id=replay.id, reference=reference, error=e.message)

        try:
            updated = ReplaysRepository.set_fields(
                replay.id, status=ReplayStatus.REJECTED, replay_file=None, replay_filename=None
            )
        except DatabaseException:
            replay_status_changes_total.labels(status="rejected", source="reject", outcome="error").inc()
            raise

        replay_status_changes_total.labels(status="rejected", source="reject", outcome="success").inc()
        logger.info("replay_rejected", replay_id=replay.id)
        return updated

    def mark_downloaded(self, replay, actor):
        """Set status to downloaded when actor is privileged. Returns True if applied."""
        if not self.authorize(actor):
            logger.debug("mark_downloaded_skipped", replay_id=replay.id)
            return False

        try:
            ReplaysRepository.set_fields(replay.id, status=ReplayStatus.DOWNLOADED)
        except DatabaseException:
            replay_status_changes_total.labels(status="downloaded", source="download", outcome="error").inc()
            raise

        replay_status_changes_total.labels(status="downloaded", source="download", outcome="success").inc()
        return True

    @staticmethod
    def expired(replay, now=None):
        """True when the replay's expiry deadline is before now"""
        return replay.expired(now)
