"""
Average rating bookkeeping.

Ratings themselves live with the comments; this service only stores the
mean reported by an aggregator callable (replay -> float or None).
"""

import logging
from repositories.replays_repository import ReplaysRepository

logger = logging.getLogger("main")


def refresh_average_rating(replay, aggregator):
    """Store the aggregator's mean rating on replay. No ratings yet is stored as 0."""
    average = aggregator(replay)
    value = float(average) if average is not None else 0.0
    ReplaysRepository.set_fields(replay.id, average_rating=value)
    logger.debug(f"Updated average rating for replay {replay.id}: {value}")
    return value
