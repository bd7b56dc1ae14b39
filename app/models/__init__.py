"""
Models package

Each model lives in its own file:
- replay.py
- category.py
- user.py

Usage:
    from models import Replay, ReplayStatus
"""

from .enums import League, PlayerFormat, ExpansionPack, ReplayStatus
from .category import Category
from .user import User
from .replay import Replay

__all__ = [
    "League",
    "PlayerFormat",
    "ExpansionPack",
    "ReplayStatus",
    "Category",
    "User",
    "Replay",
]
