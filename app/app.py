"""
ReplayVault - replay catalog
Application Factory and Initialization
"""
import os
import sys
import logging

from flask import Flask, current_app
import structlog

# Local imports
from constants import REPLAYVAULT_DB
from settings import load_settings, merge_settings
from db import init_db
from utils import ColoredFormatter, now_utc
from file_store import LocalFileStore
from services.lifecycle_service import LifecycleController
from services.batch_service import BatchService
from services.cleanup_service import clean_old_replays
from services.upload_service import UploadService

# Jobs
from jobs.scheduler import JobScheduler


def configure_logging(level=logging.INFO):
    """Colored stdlib logging on stdout, structlog rendered on top of it"""
    formatter = ColoredFormatter(
        '[%(asctime)s.%(msecs)03d] %(levelname)s (%(module)s) %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S',
    )
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    logging.basicConfig(
        level=level,
        handlers=[handler]
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer() if os.environ.get('LOG_FORMAT') == 'json' else structlog.dev.ConsoleRenderer()
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


configure_logging()
logger = structlog.get_logger('main')

job_scheduler = JobScheduler()


def create_app(config=None, settings=None):
    """Application factory"""
    app = Flask(__name__)
    app.config["SQLALCHEMY_DATABASE_URI"] = REPLAYVAULT_DB
    app.config['SQLALCHEMY_TRACK_MODIFICATIONS'] = False
    if config:
        app.config.update(config)

    app_settings = merge_settings(settings) if settings is not None else load_settings()
    app.config["REPLAYVAULT_SETTINGS"] = app_settings

    init_db(app)

    # Replay services
    app.file_store = LocalFileStore(app_settings["storage"]["path"])
    app.lifecycle = LifecycleController(app.file_store)
    app.batch = BatchService(app.lifecycle)
    app.uploads = UploadService(
        app.file_store,
        extractor=app.config.get("REPLAY_METADATA_EXTRACTOR"),
        weekly_limit=app_settings["replays"]["weekly_upload_limit"],
    )

    scheduler_settings = app_settings["scheduler"]
    if scheduler_settings.get("enabled") and not app.config.get("TESTING"):
        job_scheduler.init_app(app, interval_hours=scheduler_settings["cleanup_interval_hours"])

    logger.info("ReplayVault initialized")
    return app


def run_cleanup(now=None):
    """Cleanup sweep against the current app, used by the scheduler"""
    app_settings = current_app.config["REPLAYVAULT_SETTINGS"]
    return clean_old_replays(
        current_app.lifecycle,
        now or now_utc(),
        clean_days=app_settings["replays"]["clean_days"],
    )


if __name__ == '__main__':
    app = create_app()
    with app.app_context():
        report = run_cleanup()
        logger.info("Manual cleanup finished", **report.to_dict())
