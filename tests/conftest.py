"""
Pytest fixtures and configuration for ReplayVault tests
"""
import os
import sys
from datetime import datetime, timedelta, timezone
import pytest

# Add app directory to path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..', 'app')))

# Fixed evaluation instant for deterministic tests
NOW = datetime(2026, 10, 1, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def app(tmp_path):
    """Flask app bound to an in-memory database and a temporary file store"""
    from app import create_app
    from db import db

    _app = create_app(
        config={
            'TESTING': True,
            'SQLALCHEMY_DATABASE_URI': 'sqlite://',
        },
        settings={
            'storage': {'path': str(tmp_path / 'uploads')},
            'scheduler': {'enabled': False},
        },
    )

    with _app.app_context():
        yield _app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def file_store(app):
    return app.file_store


@pytest.fixture
def lifecycle(app):
    return app.lifecycle


@pytest.fixture
def batch(app):
    return app.batch


@pytest.fixture
def admin(app):
    from repositories.user_repository import UserRepository
    return UserRepository.create(user='admin', admin_access=True)


@pytest.fixture
def member(app):
    from repositories.user_repository import UserRepository
    return UserRepository.create(user='member', admin_access=False)


@pytest.fixture
def category(app):
    from repositories.category_repository import CategoryRepository
    return CategoryRepository.get_or_create('Tournament')


@pytest.fixture
def make_replay(app, file_store, member, category):
    """
    Factory inserting a replay directly. Stores a small file unless
    with_file=False; created_at defaults to one hour before NOW.
    """
    from db import db
    from models import Replay

    counter = {'n': 0}

    def _make(with_file=True, created_at=None, **overrides):
        counter['n'] += 1
        n = counter['n']
        fields = {
            'title': f'Replay {n}',
            'category_id': category.id,
            'user_id': member.id,
            'league': 'gold',
            'players': '1v1',
            'created_at': created_at or NOW - timedelta(hours=1),
        }
        fields.update(overrides)
        if with_file:
            filename = fields.pop('filename', f'game{n}.SC2Replay')
            fields['replay_file'] = file_store.store(filename, f'replay-bytes-{n}'.encode())
            fields['replay_filename'] = filename
        replay = Replay(**fields)
        db.session.add(replay)
        db.session.commit()
        return replay

    return _make

