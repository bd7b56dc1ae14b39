"""
Replay listing filters

ReplayFilters holds the recognized listing options; build_replay_query turns
them into an ordered, unpaginated SQLAlchemy query. Pagination is applied by
ReplaysRepository.get_paged.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional
from sqlalchemy import or_, false
from constants import DEFAULT_FILTERS, REPLAYS_PER_PAGE
from models.enums import League, PlayerFormat, ExpansionPack, ReplayStatus, coerce_enum
from models.replay import Replay
from utils import now_utc, parse_number

logger = logging.getLogger("main")

_TRUE_STRINGS = {"1", "true", "yes", "on"}


def _is_blank(value):
    return value is None or (isinstance(value, str) and not value.strip())


def _as_bool(value):
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_STRINGS
    return bool(value)


def _as_page(value):
    try:
        page = int(value)
    except (TypeError, ValueError):
        return 1
    return max(page, 1)


@dataclass
class ReplayFilters:
    """Listing options. Blank values mean "any"."""

    page: int = 1
    statuses: List[str] = field(default_factory=lambda: list(DEFAULT_FILTERS["statuses"]))
    query: str = ""
    league: str = ""
    players: str = ""
    category_id: str = ""
    expansion_pack: str = ""
    rating: str = ""
    include_expired: bool = False

    @classmethod
    def from_dict(cls, options=None):
        """Build filters from a plain mapping (e.g. request args), falling back to DEFAULT_FILTERS"""
        merged = dict(DEFAULT_FILTERS)
        merged.update({k: v for k, v in (options or {}).items() if k in DEFAULT_FILTERS})

        statuses = merged["statuses"]
        if isinstance(statuses, str):
            statuses = [s for s in statuses.split(",") if s.strip()]

        return cls(
            page=_as_page(merged["page"]),
            statuses=[getattr(s, "value", s) for s in (statuses or [])],
            query=merged["query"] or "",
            league=merged["league"] or "",
            players=merged["players"] or "",
            category_id=merged["category_id"] if merged["category_id"] is not None else "",
            expansion_pack=merged["expansion_pack"] or "",
            rating=merged["rating"] if merged["rating"] is not None else "",
            include_expired=_as_bool(merged["include_expired"]),
        )

    @property
    def per_page(self):
        return REPLAYS_PER_PAGE

    @property
    def offset(self):
        return (_as_page(self.page) - 1) * REPLAYS_PER_PAGE


def _enum_clause(column, enum_cls, value):
    """Exact match on an enum column; values outside the closed set match nothing"""
    if isinstance(value, str):
        value = value.strip()
    try:
        member = coerce_enum(enum_cls, value)
    except ValueError:
        logger.debug(f"Ignoring unknown {enum_cls.__name__} filter value {value!r}")
        return false()
    return column == member


def _status_clause(statuses):
    members = []
    for status in statuses:
        try:
            members.append(coerce_enum(ReplayStatus, status))
        except ValueError:
            logger.debug(f"Ignoring unknown status filter value {status!r}")
    if not members:
        return false()
    return Replay.status.in_(members)


def _category_clause(category_id):
    try:
        return Replay.category_id == int(category_id)
    except (TypeError, ValueError):
        return false()


def _rating_clause(rating):
    value = parse_number(rating)
    if value is None:
        logger.debug(f"Ignoring non-numeric rating filter {rating!r}")
        return None
    # "0" selects unrated replays; any other value is a floor
    if value == 0:
        return Replay.average_rating == 0
    return Replay.average_rating >= value


def build_replay_query(filters: Optional[ReplayFilters] = None, now=None):
    """
    Translate filters into a query over replays ordered newest first.
    Every criterion is ANDed; a blank criterion is skipped.
    """
    if filters is None:
        filters = ReplayFilters()
    if now is None:
        now = now_utc()

    query = Replay.query

    if not _is_blank(filters.query):
        text = filters.query.strip()
        query = query.filter(
            or_(
                Replay.title.icontains(text, autoescape=True),
                Replay.description.icontains(text, autoescape=True),
                Replay.replay_filename.icontains(text, autoescape=True),
            )
        )

    if filters.statuses:
        query = query.filter(_status_clause(filters.statuses))

    if not _is_blank(filters.league):
        query = query.filter(_enum_clause(Replay.league, League, filters.league))
    if not _is_blank(filters.players):
        query = query.filter(_enum_clause(Replay.players, PlayerFormat, filters.players))
    if not _is_blank(filters.category_id):
        query = query.filter(_category_clause(filters.category_id))
    if not _is_blank(filters.expansion_pack):
        query = query.filter(_enum_clause(Replay.expansion_pack, ExpansionPack, filters.expansion_pack))

    if not _is_blank(filters.rating):
        clause = _rating_clause(filters.rating)
        if clause is not None:
            query = query.filter(clause)

    if not filters.include_expired:
        query = query.filter(Replay.expires_at > now)

    return query.order_by(Replay.created_at.desc(), Replay.id.desc())
