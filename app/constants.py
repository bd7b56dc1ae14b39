import os

APP_DIR = os.path.dirname(os.path.abspath(__file__))
DATA_DIR = os.path.join(APP_DIR, 'data')
CONFIG_DIR = os.path.join(APP_DIR, 'config')
DB_FILE = os.path.join(CONFIG_DIR, 'replayvault.db')
CONFIG_FILE = os.path.join(CONFIG_DIR, 'settings.yaml')
UPLOADS_DIR = os.path.join(DATA_DIR, 'uploads')

REPLAYVAULT_DB = 'sqlite:///' + DB_FILE

EXPIRY_DAYS = 14
CLEAN_REPLAYS_DAYS = 28
WEEKLY_UPLOAD_LIMIT = 3
REPLAYS_PER_PAGE = 25

# Sentinel stored when the metadata extractor cannot read a replay
UNKNOWN_GAME_LENGTH = 0
UNKNOWN_GAME_VERSION = 'unknown'

DEFAULT_SETTINGS = {
    "storage": {
        "path": UPLOADS_DIR,
    },
    "replays": {
        "clean_days": CLEAN_REPLAYS_DAYS,
        "weekly_upload_limit": WEEKLY_UPLOAD_LIMIT,
    },
    "scheduler": {
        "enabled": True,
        "cleanup_interval_hours": 24,
    },
}

DEFAULT_FILTERS = {
    "page": 1,
    "statuses": ["new", "suggested"],
    "query": "",
    "league": "",
    "players": "",
    "category_id": "",
    "include_expired": False,
    "rating": "",
    "expansion_pack": "",
}

ALLOWED_EXTENSIONS = [
    'sc2replay',
]
