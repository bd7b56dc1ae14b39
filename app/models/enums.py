"""
Closed enumerations used by the Replay model and its filters
"""

import enum


class League(str, enum.Enum):
    BRONZE = "bronze"
    SILVER = "silver"
    GOLD = "gold"
    PLATINUM = "platinum"
    DIAMOND = "diamond"
    MASTER = "master"
    GRAND_MASTER = "grand_master"


class PlayerFormat(str, enum.Enum):
    ONE_V_ONE = "1v1"
    TWO_V_TWO = "2v2"
    THREE_V_THREE = "3v3"
    FOUR_V_FOUR = "4v4"
    FFA = "FFA"


class ExpansionPack(str, enum.Enum):
    LOTV = "LotV"


class ReplayStatus(str, enum.Enum):
    NEW = "new"
    REJECTED = "rejected"
    SUGGESTED = "suggested"
    BROADCASTED = "broadcasted"
    DOWNLOADED = "downloaded"

    @property
    def requires_artifact(self):
        return _STATUS_TRAITS[self]["requires_artifact"]

    @property
    def is_terminal(self):
        return _STATUS_TRAITS[self]["terminal"]


_STATUS_TRAITS = {
    ReplayStatus.NEW: {"requires_artifact": True, "terminal": False},
    ReplayStatus.REJECTED: {"requires_artifact": False, "terminal": True},
    ReplayStatus.SUGGESTED: {"requires_artifact": True, "terminal": False},
    ReplayStatus.BROADCASTED: {"requires_artifact": True, "terminal": False},
    ReplayStatus.DOWNLOADED: {"requires_artifact": True, "terminal": False},
}

# Every status must declare its traits
if set(_STATUS_TRAITS) != set(ReplayStatus):
    raise RuntimeError("status traits table is incomplete")


def coerce_enum(enum_cls, value):
    """
    Return the enum member for value, or None when value is None.
    Raises ValueError for anything outside the closed set.
    """
    if value is None or isinstance(value, enum_cls):
        return value
    return enum_cls(value)


def enum_values(enum_cls):
    return [member.value for member in enum_cls]
