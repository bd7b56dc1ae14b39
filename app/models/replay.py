"""
Model: Replay
A user-submitted game replay and its lifecycle state
"""

import os
from datetime import timedelta
from sqlalchemy.orm import validates
from db import db, now_utc
from constants import EXPIRY_DAYS
from exceptions import ValidationException
from models.enums import League, PlayerFormat, ExpansionPack, ReplayStatus, coerce_enum, enum_values
from utils import ensure_utc, format_game_length


def _enum_column(enum_cls, **kwargs):
    return db.Column(
        db.Enum(enum_cls, values_callable=enum_values, native_enum=False, validate_strings=True, length=20),
        **kwargs,
    )


class Replay(db.Model):
    __tablename__ = "replays"

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text)
    category_id = db.Column(db.Integer, db.ForeignKey("categories.id"), nullable=False)
    user_id = db.Column(db.Integer, db.ForeignKey("user.id"), nullable=False)

    league = _enum_column(League, nullable=False)
    players = _enum_column(PlayerFormat, nullable=False)
    expansion_pack = _enum_column(ExpansionPack, nullable=False, default=ExpansionPack.LOTV)
    status = _enum_column(ReplayStatus, nullable=False, default=ReplayStatus.NEW)

    # Races present in the game
    protoss = db.Column(db.Boolean, nullable=False, default=False)
    terran = db.Column(db.Boolean, nullable=False, default=False)
    zerg = db.Column(db.Boolean, nullable=False, default=False)

    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=now_utc)
    updated_at = db.Column(db.DateTime(timezone=True), default=now_utc, onupdate=now_utc)
    expires_at = db.Column(db.DateTime(timezone=True), nullable=False)
    average_rating = db.Column(db.Float, nullable=False, default=0.0)

    # File store reference; only rejected replays may lack one
    replay_file = db.Column(db.String(512))
    replay_filename = db.Column(db.String(255))
    length = db.Column(db.Integer, default=0)  # Seconds of game time
    version = db.Column(db.String(50))

    category = db.relationship("Category", backref=db.backref("replays", lazy="dynamic"))
    user = db.relationship("User", backref=db.backref("replays", lazy="dynamic"))

    __table_args__ = (
        # Default listing: status filter ordered by newest first
        db.Index("idx_replays_status_created", "status", "created_at"),
        db.Index("idx_replays_expires_at", "expires_at"),
        db.Index("idx_replays_user_created", "user_id", "created_at"),
    )

    def __init__(self, **kwargs):
        kwargs.setdefault("status", ReplayStatus.NEW)
        kwargs.setdefault("expansion_pack", ExpansionPack.LOTV)
        kwargs.setdefault("protoss", False)
        kwargs.setdefault("terran", False)
        kwargs.setdefault("zerg", False)
        kwargs.setdefault("average_rating", 0.0)
        super().__init__(**kwargs)
        if self.created_at is None:
            self.created_at = now_utc()
        if self.expires_at is None:
            self.expires_at = self.created_at + timedelta(days=EXPIRY_DAYS)

    @validates("league", "players", "expansion_pack", "status")
    def _validate_enum(self, key, value):
        enum_cls = {
            "league": League,
            "players": PlayerFormat,
            "expansion_pack": ExpansionPack,
            "status": ReplayStatus,
        }[key]
        try:
            return coerce_enum(enum_cls, value)
        except ValueError:
            raise ValidationException(
                f"{value!r} is not a valid {key}",
                errors=[{"field": key, "error": f"must be one of {', '.join(enum_values(enum_cls))}"}],
            )

    def validation_errors(self):
        """Collect invariant violations as a list of {field, error} dicts"""
        errors = []
        if not self.title or not self.title.strip():
            errors.append({"field": "title", "error": "can't be blank"})
        if self.category_id is None and self.category is None:
            errors.append({"field": "category_id", "error": "can't be blank"})
        if self.user_id is None and self.user is None:
            errors.append({"field": "user_id", "error": "can't be blank"})
        if self.expires_at is None:
            errors.append({"field": "expires_at", "error": "can't be blank"})
        for field in ("league", "players", "expansion_pack", "status"):
            if getattr(self, field) is None:
                errors.append({"field": field, "error": "can't be blank"})
        if self.status is not None and self.status.requires_artifact and not self.replay_file:
            errors.append({"field": "replay_file", "error": "can't be blank"})
        if self.players == PlayerFormat.ONE_V_ONE and self.protoss and self.terran and self.zerg:
            errors.append({"field": "players", "error": "can't have all 3 races in a 1v1 game"})
        return errors

    def validate(self):
        errors = self.validation_errors()
        if errors:
            summary = "; ".join(f"{e['field']} {e['error']}" for e in errors)
            raise ValidationException(f"Invalid replay: {summary}", errors=errors)

    def expired(self, now=None):
        """True once the expiry deadline has passed"""
        return ensure_utc(self.expires_at) < ensure_utc(now or now_utc())

    @property
    def filename(self):
        if self.replay_filename:
            return self.replay_filename
        if self.replay_file:
            return os.path.basename(self.replay_file)
        return None

    @property
    def formatted_game_length(self):
        return format_game_length(self.length)

    def to_dict(self):
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "category_id": self.category_id,
            "user_id": self.user_id,
            "league": self.league.value if self.league else None,
            "players": self.players.value if self.players else None,
            "expansion_pack": self.expansion_pack.value if self.expansion_pack else None,
            "status": self.status.value if self.status else None,
            "protoss": self.protoss,
            "terran": self.terran,
            "zerg": self.zerg,
            "average_rating": self.average_rating,
            "filename": self.filename,
            "length": self.length,
            "version": self.version,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "expires_at": self.expires_at.isoformat() if self.expires_at else None,
        }
