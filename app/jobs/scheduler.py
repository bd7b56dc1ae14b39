"""
Background Jobs - periodic tasks
"""
from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger
import atexit
import logging

logger = logging.getLogger('main')


class JobScheduler:
    """Runs periodic jobs inside the Flask application context"""

    def __init__(self):
        self.scheduler = BackgroundScheduler(timezone="UTC")
        self._jobs_registered = False

    def init_app(self, app, interval_hours=24):
        """Register jobs for app and start the scheduler"""
        self._register_jobs(app, interval_hours)
        self.scheduler.start()
        atexit.register(self.shutdown)
        logger.info("Job scheduler initialized")

    def _register_jobs(self, app, interval_hours):
        if self._jobs_registered:
            return

        self.scheduler.add_job(
            func=self._clean_old_replays_job,
            trigger=IntervalTrigger(hours=interval_hours),
            id='clean_old_replays',
            name='Clean Old Replays',
            args=[app],
            replace_existing=True,
            coalesce=True,
            max_instances=1,
        )

        self._jobs_registered = True
        logger.info("Background jobs registered")

    def _clean_old_replays_job(self, app):
        """Scheduled cleanup sweep"""
        from app import run_cleanup
        with app.app_context():
            run_cleanup()

    def shutdown(self):
        """Stop the scheduler"""
        if self.scheduler.running:
            self.scheduler.shutdown()
            logger.info("Job scheduler shutdown")
