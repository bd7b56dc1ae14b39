"""
Replay uploads and single-replay edits
"""

import os
import structlog
from datetime import timedelta
from constants import WEEKLY_UPLOAD_LIMIT
from exceptions import DatabaseException, NotFoundException, UploadLimitException, ValidationException
from metadata_service import read_game_details
from models.enums import ReplayStatus
from models.replay import Replay
from repositories.replays_repository import ReplaysRepository
from utils import allowed_file, now_utc

logger = structlog.get_logger()

# Fields a user may set on upload or edit
EDITABLE_FIELDS = (
    "title",
    "description",
    "category_id",
    "league",
    "players",
    "expansion_pack",
    "protoss",
    "terran",
    "zerg",
)


class UploadService:
    """Creates replays from uploaded files"""

    def __init__(self, file_store, extractor=None, weekly_limit=WEEKLY_UPLOAD_LIMIT):
        self.file_store = file_store
        self.extractor = extractor
        self.weekly_limit = weekly_limit

    def uploads_this_week(self, user, now=None):
        now = now or now_utc()
        return ReplaysRepository.count_uploads_since(user.id, now - timedelta(days=7))

    def can_upload(self, user, now=None):
        """Admins are not limited; everyone else gets weekly_limit uploads per 7 days"""
        if user.is_admin:
            return True
        return self.uploads_this_week(user, now=now) < self.weekly_limit

    def upload(self, user, filename, data, now=None, **fields):
        """Store an uploaded replay file and create its record with status new"""
        if not self.can_upload(user, now=now):
            raise UploadLimitException(self.weekly_limit)

        if not filename or not allowed_file(filename):
            raise ValidationException(
                f"Unsupported replay file: {filename!r}",
                errors=[{"field": "replay_file", "error": "must be a .SC2Replay file"}],
            )
        if not data:
            raise ValidationException("Replay file is empty", errors=[{"field": "replay_file", "error": "is empty"}])

        unknown = set(fields) - set(EDITABLE_FIELDS)
        if unknown:
            raise ValidationException(f"Unknown replay fields: {', '.join(sorted(unknown))}")

        created_at = now or now_utc()
        replay = Replay(user_id=user.id, status=ReplayStatus.NEW, created_at=created_at, **fields)
        # Placeholder reference so validation covers everything but the stored file
        replay.replay_file = filename
        replay.validate()

        replay.length, replay.version = read_game_details(data, self.extractor)
        replay.replay_file = self.file_store.store(filename, data)
        replay.replay_filename = os.path.basename(replay.replay_file)

        try:
            ReplaysRepository.save(replay, validate=False)
        except DatabaseException:
            self.file_store.delete(replay.replay_file)
            raise

        logger.info("replay_uploaded", replay_id=replay.id, user_id=user.id, filename=filename)
        return replay

    def update_details(self, replay_id, **fields):
        """Edit descriptive and classification fields of one replay"""
        unknown = set(fields) - set(EDITABLE_FIELDS)
        if unknown:
            raise ValidationException(f"Unknown replay fields: {', '.join(sorted(unknown))}")

        replay = ReplaysRepository.update(replay_id, **fields)
        if replay is None:
            raise NotFoundException(f"Replay {replay_id} does not exist")
        return replay
