"""
Repository for Replay database operations
"""

import time
import logging
from sqlalchemy.exc import SQLAlchemyError
from db import db
from exceptions import DatabaseException, NotFoundException, ValidationException
from metrics import track_db_query
from models.enums import ReplayStatus
from models.replay import Replay
from replay_filters import ReplayFilters, build_replay_query

logger = logging.getLogger("main")


class ReplaysRepository:
    """Repository for Replay database operations"""

    @staticmethod
    def get_by_id(id):
        """Get Replay by ID"""
        return db.session.get(Replay, id)

    @staticmethod
    def get_required(id):
        """Get Replay by ID, raising NotFoundException when absent"""
        item = db.session.get(Replay, id)
        if item is None:
            raise NotFoundException(f"Replay {id} does not exist")
        return item

    @staticmethod
    def get_by_ids(ids):
        """Get the replays matching ids, ordered by id. Unknown ids are skipped."""
        ids = [i for i in (ids or []) if i is not None]
        if not ids:
            return []
        return Replay.query.filter(Replay.id.in_(ids)).order_by(Replay.id).all()

    @staticmethod
    @track_db_query("replays_paged")
    def get_paged(filters=None, now=None):
        """
        Database-level pagination for the replay listing
        """
        if filters is None:
            filters = ReplayFilters()
        elif isinstance(filters, dict):
            filters = ReplayFilters.from_dict(filters)

        query = build_replay_query(filters, now=now)

        start = time.time()
        try:
            result = query.paginate(page=filters.page, per_page=filters.per_page, error_out=False)
            duration = (time.time() - start) * 1000.0
            logger.debug(
                f"ReplaysRepository.get_paged: page={filters.page} total={result.total} duration_ms={duration:.1f}"
            )
            return result
        except SQLAlchemyError as e:
            duration = (time.time() - start) * 1000.0
            logger.error(f"ReplaysRepository.get_paged failed: page={filters.page} duration_ms={duration:.1f} error={e}")
            raise DatabaseException(f"Replay listing failed: {e}")

    @staticmethod
    def get_page_ids(filters=None, now=None):
        """Ids of one listing page, newest first"""
        return [replay.id for replay in ReplaysRepository.get_paged(filters, now=now).items]

    @staticmethod
    def get_stale(cutoff):
        """Get non-rejected replays created before cutoff"""
        return (
            Replay.query.filter(Replay.status != ReplayStatus.REJECTED, Replay.created_at < cutoff)
            .order_by(Replay.id)
            .all()
        )

    @staticmethod
    def count_uploads_since(user_id, since):
        """Count replays a user created since the given instant"""
        return Replay.query.filter(Replay.user_id == user_id, Replay.created_at >= since).count()

    @staticmethod
    def save(item, validate=True):
        """Persist a Replay instance, validating its invariants first"""
        if validate:
            item.validate()
        try:
            db.session.add(item)
            db.session.commit()
            db.session.refresh(item)
            return item
        except SQLAlchemyError as e:
            db.session.rollback()
            raise DatabaseException(f"Could not save replay: {e}")

    @staticmethod
    def create(**kwargs):
        """Create new Replay record"""
        return ReplaysRepository.save(Replay(**kwargs))

    @staticmethod
    def update(id, **kwargs):
        """Update Replay record, re-validating it. Returns None when the id is unknown."""
        item = db.session.get(Replay, id)
        if not item:
            return None

        try:
            for key, value in kwargs.items():
                if hasattr(item, key):
                    setattr(item, key, value)
            item.validate()
        except ValidationException:
            db.session.rollback()
            raise

        return ReplaysRepository.save(item, validate=False)

    @staticmethod
    def set_fields(id, **values):
        """
        Overwrite columns of a single replay in one UPDATE statement.
        Last writer wins; no validation. Returns False when no row matched.
        """
        try:
            matched = Replay.query.filter(Replay.id == id).update(values, synchronize_session="evaluate")
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            raise DatabaseException(f"Could not update replay {id}: {e}")
        return matched > 0

    @staticmethod
    def count():
        """Count total Replay records"""
        return Replay.query.count()
