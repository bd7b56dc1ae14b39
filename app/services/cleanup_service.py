"""
Cleanup of old replays, run periodically by the job scheduler
"""

import structlog
from datetime import timedelta
from constants import CLEAN_REPLAYS_DAYS
from exceptions import ReplayVaultException
from metrics import replays_cleaned_total
from repositories.replays_repository import ReplaysRepository
from services.batch_service import BatchReport

logger = structlog.get_logger()


def clean_old_replays(lifecycle, now, clean_days=CLEAN_REPLAYS_DAYS):
    """Reject every non-rejected replay created more than clean_days before now"""
    cutoff = now - timedelta(days=clean_days)
    report = BatchReport()

    for replay in ReplaysRepository.get_stale(cutoff):
        replay_id = replay.id
        try:
            lifecycle.reject(replay)
        except ReplayVaultException as e:
            replays_cleaned_total.labels(outcome="error").inc()
            logger.error("replay_cleanup_failed", replay_id=replay_id, error=e.message)
            report.add(replay_id, success=False, error=e.message)
            continue
        replays_cleaned_total.labels(outcome="success").inc()
        report.add(replay_id)

    logger.info(
        "old_replays_cleaned",
        cutoff=cutoff.isoformat(),
        rejected=len(report.succeeded),
        failed=len(report.failed),
    )
    return report
