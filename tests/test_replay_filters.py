"""
Tests for replay listing filters and pagination
"""
from datetime import timedelta
import pytest

from conftest import NOW


class TestReplayFiltersFromDict:
    """Tests for building filters from request-like mappings"""

    def test_defaults(self):
        from replay_filters import ReplayFilters

        filters = ReplayFilters.from_dict({})

        assert filters.page == 1
        assert filters.statuses == ['new', 'suggested']
        assert filters.query == ''
        assert filters.include_expired is False
        assert filters.per_page == 25

    def test_overrides_and_coercion(self):
        from replay_filters import ReplayFilters

        filters = ReplayFilters.from_dict({
            'page': '3',
            'statuses': 'new,broadcasted',
            'include_expired': 'true',
            'league': 'gold',
            'unrelated': 'ignored',
        })

        assert filters.page == 3
        assert filters.statuses == ['new', 'broadcasted']
        assert filters.include_expired is True
        assert filters.league == 'gold'
        assert filters.offset == 50

    def test_invalid_page_falls_back_to_first(self):
        from replay_filters import ReplayFilters

        assert ReplayFilters.from_dict({'page': 'abc'}).page == 1
        assert ReplayFilters.from_dict({'page': '-2'}).page == 1


class TestListingScenarios:
    """Listing behaviour over a populated store"""

    def test_gold_new_first_page(self, make_replay):
        from repositories.replays_repository import ReplaysRepository

        gold = [make_replay(league='gold', created_at=NOW - timedelta(minutes=i)) for i in range(1, 31)]
        for i in range(5):
            make_replay(league='silver', created_at=NOW - timedelta(seconds=i + 1))

        ids = ReplaysRepository.get_page_ids({'statuses': ['new'], 'league': 'gold', 'page': 1}, now=NOW)

        assert len(ids) == 25
        # gold was created newest first
        assert ids == [r.id for r in gold[:25]]

        page = ReplaysRepository.get_paged({'statuses': ['new'], 'league': 'gold'}, now=NOW)
        for replay in page.items:
            assert replay.league.value == 'gold'
            assert replay.status.value == 'new'

    def test_second_page_holds_the_rest(self, make_replay):
        from repositories.replays_repository import ReplaysRepository

        gold = [make_replay(created_at=NOW - timedelta(minutes=i)) for i in range(1, 31)]

        ids = ReplaysRepository.get_page_ids({'page': 2}, now=NOW)

        assert ids == [r.id for r in gold[25:]]

    def test_page_past_the_end_is_empty(self, make_replay):
        from repositories.replays_repository import ReplaysRepository

        make_replay()
        assert ReplaysRepository.get_page_ids({'page': 9}, now=NOW) == []

    def test_same_filters_give_same_results(self, make_replay):
        from repositories.replays_repository import ReplaysRepository

        # identical creation times rely on the id tie-break
        for _ in range(6):
            make_replay(created_at=NOW - timedelta(hours=2))

        first = ReplaysRepository.get_page_ids({}, now=NOW)
        second = ReplaysRepository.get_page_ids({}, now=NOW)

        assert first == second
        assert first == sorted(first, reverse=True)


class TestExpiry:
    """Tests for the expiry filter"""

    def test_expired_excluded_by_default(self, make_replay):
        from repositories.replays_repository import ReplaysRepository
        from utils import ensure_utc

        fresh = make_replay(created_at=NOW - timedelta(days=2))
        stale = make_replay(created_at=NOW - timedelta(days=20))
        boundary = make_replay(created_at=NOW - timedelta(days=14))

        page = ReplaysRepository.get_paged({}, now=NOW)

        assert [r.id for r in page.items] == [fresh.id]
        for replay in page.items:
            assert ensure_utc(replay.expires_at) > NOW
        assert stale.id not in [r.id for r in page.items]
        assert boundary.id not in [r.id for r in page.items]

    def test_include_expired(self, make_replay):
        from repositories.replays_repository import ReplaysRepository

        fresh = make_replay(created_at=NOW - timedelta(days=2))
        stale = make_replay(created_at=NOW - timedelta(days=20))

        ids = ReplaysRepository.get_page_ids({'include_expired': True}, now=NOW)

        assert ids == [fresh.id, stale.id]


class TestFilterCriteria:
    """Tests for individual filter clauses"""

    def test_default_statuses(self, make_replay):
        from repositories.replays_repository import ReplaysRepository

        new = make_replay(status='new')
        suggested = make_replay(status='suggested')
        make_replay(status='broadcasted')
        make_replay(status='downloaded')

        ids = ReplaysRepository.get_page_ids({}, now=NOW)

        assert set(ids) == {new.id, suggested.id}

    def test_empty_statuses_means_any(self, make_replay):
        from repositories.replays_repository import ReplaysRepository

        replays = [make_replay(status=s) for s in ('new', 'broadcasted', 'downloaded')]

        ids = ReplaysRepository.get_page_ids({'statuses': []}, now=NOW)

        assert set(ids) == {r.id for r in replays}

    def test_text_query_matches_title_description_or_filename(self, make_replay):
        from repositories.replays_repository import ReplaysRepository

        by_title = make_replay(title='Epic ZvP comeback')
        by_description = make_replay(description='a zvp on Lost Temple')
        by_filename = make_replay(filename='ZvP_final.SC2Replay')
        make_replay(title='TvT', filename='tvt.SC2Replay')

        ids = ReplaysRepository.get_page_ids({'query': 'zvp'}, now=NOW)

        assert set(ids) == {by_title.id, by_description.id, by_filename.id}

    def test_text_query_wildcards_are_literal(self, make_replay):
        from repositories.replays_repository import ReplaysRepository

        percent = make_replay(title='100% macro')
        make_replay(title='1000 macro')

        ids = ReplaysRepository.get_page_ids({'query': '100%'}, now=NOW)

        assert ids == [percent.id]

    def test_equality_filters_combine(self, make_replay, category):
        from repositories.category_repository import CategoryRepository
        from repositories.replays_repository import ReplaysRepository

        other = CategoryRepository.get_or_create('Casual')
        match = make_replay(league='master', players='2v2')
        make_replay(league='master', players='1v1')
        make_replay(league='diamond', players='2v2')
        make_replay(league='master', players='2v2', category_id=other.id)

        ids = ReplaysRepository.get_page_ids(
            {'league': 'master', 'players': '2v2', 'category_id': str(category.id), 'expansion_pack': 'LotV'},
            now=NOW,
        )

        assert ids == [match.id]

    def test_unknown_enum_value_matches_nothing(self, make_replay):
        from repositories.replays_repository import ReplaysRepository

        make_replay()

        assert ReplaysRepository.get_page_ids({'league': 'wood'}, now=NOW) == []
        assert ReplaysRepository.get_page_ids({'statuses': ['archived']}, now=NOW) == []
        assert ReplaysRepository.get_page_ids({'category_id': 'abc'}, now=NOW) == []

    @pytest.mark.parametrize('rating, expected', [('0', [0, 1]), ('3', [2]), ('', [0, 1, 2])])
    def test_rating_filter(self, make_replay, rating, expected):
        from repositories.replays_repository import ReplaysRepository

        replays = [
            make_replay(average_rating=0.0),
            make_replay(average_rating=0.0),
            make_replay(average_rating=3.5),
        ]

        ids = ReplaysRepository.get_page_ids({'rating': rating}, now=NOW)

        assert set(ids) == {replays[i].id for i in expected}

    def test_non_numeric_rating_is_ignored(self, make_replay):
        from repositories.replays_repository import ReplaysRepository

        replay = make_replay(average_rating=4.0)

        assert ReplaysRepository.get_page_ids({'rating': 'great'}, now=NOW) == [replay.id]

    def test_query_does_not_modify_records(self, make_replay):
        from repositories.replays_repository import ReplaysRepository
        from db import db

        replay = make_replay()
        before = replay.to_dict()

        ReplaysRepository.get_paged({'query': 'Replay', 'rating': '0'}, now=NOW)
        db.session.expire_all()

        assert ReplaysRepository.get_by_id(replay.id).to_dict() == before
