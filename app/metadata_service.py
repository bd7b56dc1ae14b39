"""
Replay metadata extraction

Parsing the binary replay format is left to a pluggable extractor. Whatever
goes wrong while reading a replay, the caller gets the "unknown" sentinel
instead of an error.
"""

import structlog
from abc import ABC, abstractmethod
from typing import Optional, Tuple
from constants import UNKNOWN_GAME_LENGTH, UNKNOWN_GAME_VERSION
from exceptions import ExtractionException

logger = structlog.get_logger()


class MetadataExtractor(ABC):
    """Interface for replay parsers"""

    @abstractmethod
    def extract(self, data: bytes) -> Tuple[int, str]:
        """Return (game length in seconds, engine version)"""


class NullExtractor(MetadataExtractor):
    """Used when no parser is configured"""

    def extract(self, data: bytes) -> Tuple[int, str]:
        raise ExtractionException("No replay parser configured")


def read_game_details(data: bytes, extractor: Optional[MetadataExtractor] = None) -> Tuple[int, str]:
    """Run the extractor, mapping any failure to (UNKNOWN_GAME_LENGTH, UNKNOWN_GAME_VERSION)"""
    extractor = extractor or NullExtractor()
    try:
        length, version = extractor.extract(data)
    except Exception as e:  # any parser error maps to the sentinel
        logger.warning("replay_metadata_unreadable", error=str(e), extractor=type(extractor).__name__)
        return UNKNOWN_GAME_LENGTH, UNKNOWN_GAME_VERSION

    if length is None or version is None:
        return UNKNOWN_GAME_LENGTH, UNKNOWN_GAME_VERSION
    return int(length), str(version)
