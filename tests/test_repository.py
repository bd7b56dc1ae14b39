"""
Tests for ReplaysRepository single-record operations and metrics
"""
import pytest


class TestReplaysRepository:
    """Tests for lookups and persistence"""

    def test_get_required(self, make_replay):
        from repositories.replays_repository import ReplaysRepository

        replay = make_replay()

        assert ReplaysRepository.get_required(replay.id).id == replay.id

    def test_get_required_missing(self, app):
        from exceptions import NotFoundException
        from repositories.replays_repository import ReplaysRepository

        with pytest.raises(NotFoundException) as exc:
            ReplaysRepository.get_required(123)
        assert exc.value.to_dict() == {'error': True, 'code': 'NOT_FOUND', 'message': 'Replay 123 does not exist'}

    def test_get_by_ids_skips_unknown(self, make_replay):
        from repositories.replays_repository import ReplaysRepository

        a = make_replay()
        b = make_replay()

        assert [r.id for r in ReplaysRepository.get_by_ids([b.id, 777, a.id, None])] == [a.id, b.id]
        assert ReplaysRepository.get_by_ids([]) == []

    def test_create_validates(self, app, member, category):
        from exceptions import ValidationException
        from repositories.replays_repository import ReplaysRepository

        with pytest.raises(ValidationException) as exc:
            ReplaysRepository.create(
                title='No file', user_id=member.id, category_id=category.id, league='gold', players='2v2'
            )
        assert exc.value.to_dict()['errors'] == [{'field': 'replay_file', 'error': "can't be blank"}]
        assert ReplaysRepository.count() == 0

    def test_create(self, app, member, category):
        from repositories.category_repository import CategoryRepository
        from repositories.replays_repository import ReplaysRepository
        from repositories.user_repository import UserRepository

        replay = ReplaysRepository.create(
            title='With file', user_id=member.id, category_id=category.id, league='gold', players='2v2',
            replay_file='x/with.SC2Replay',
        )

        assert ReplaysRepository.count() == 1
        assert UserRepository.get_by_id(member.id).replays.count() == 1
        assert CategoryRepository.get_by_id(category.id).replays.first().id == replay.id

    def test_set_fields_unknown_id(self, app):
        from repositories.replays_repository import ReplaysRepository

        assert ReplaysRepository.set_fields(555, status='new') is False


class TestMetrics:
    """Tests for the Prometheus export"""

    def test_replay_gauges(self, make_replay):
        from metrics import get_metrics_export

        make_replay(status='new')
        make_replay(status='new')
        make_replay(status='broadcasted')

        text = get_metrics_export().decode()

        assert 'replayvault_replays_total{status="new"} 2.0' in text
        assert 'replayvault_replays_total{status="broadcasted"} 1.0' in text
        assert 'replayvault_replays_total{status="rejected"} 0.0' in text
