from unittest.mock import MagicMock

import os

import pytest

from resources.lib import constants
from resources.lib.cache import CatalogCache, DiskCache, MemoryCache
from resources.lib.errors import LookupInconsistency, RemoteError
from resources.lib.models import SeasonTree, SeriesIndex

from conftest import episode_record, series_record


@pytest.fixture
def client():
    client = MagicMock()
    client.fetch_my_series.return_value = [series_record(1, 'Lost'), series_record(2, 'House')]
    client.fetch_all_series.return_value = [series_record(3, 'Fringe', watching=0)]
    client.fetch_episodes.return_value = [
        episode_record(1, 1, 1, '720p'),
        episode_record(2, 1, 1, 'SD'),
        episode_record(3, 1, 2, 'SD'),
    ]
    return client


def test_series_index_keeps_first_duplicate_and_full_list():
    index = SeriesIndex.build('mine', [
        series_record(1, 'First'),
        series_record(2, 'Other'),
        series_record(1, 'Second'),
    ])
    assert index.get('1').title == 'First'
    assert index.get(1).title == 'First'
    assert [entry.title for entry in index.items] == ['First', 'Other', 'Second']
    assert len(index) == 3


def test_series_entry_parses_status_and_flags():
    index = SeriesIndex.build('mine', [
        series_record(1, 'Done', watching='1', unwatched=None, status=1, imdb_rating='8.1', year='2004'),
    ])
    entry = index.get('1')
    assert entry.is_closed
    assert entry.watching is True
    assert entry.unwatched == 0
    assert entry.rating == 8.1
    assert entry.year == 2004


def test_season_tree_groups_by_ordinal_and_quality():
    tree = SeasonTree.build('42', [
        episode_record(1, 1, 1, '720p', season_id=7),
        episode_record(2, 1, 1, 'SD', season_id=7),
        episode_record(3, 1, 2, 'SD', season_id=7),
    ])
    season = tree.season_at(0)
    assert season.season_id == '7'
    assert season.number == 1
    assert set(season.slot(0)) == {'720p', 'SD'}
    assert season.slot(1)['SD'].eid == '3'


def test_null_season_id_falls_back_to_season_number():
    record = episode_record(1, 2, 1, 'SD')
    record['season_id'] = None
    tree = SeasonTree.build('42', [record])
    assert tree.season_at(1).season_id == '2'
    assert tree.find_season('2') is tree.season_at(1)


def test_season_tree_tolerates_gaps():
    tree = SeasonTree.build('42', [
        episode_record(1, 3, 4, 'SD', season_id=30),
    ])
    assert tree.seasons[:2] == [None, None]
    season = tree.season_at(2)
    assert season.episodes[:3] == [None, None, None]
    assert season.slot(3)['SD'].eid == '1'
    assert [s.season_id for s in tree.iter_seasons()] == ['30']
    assert season.episode_count == 1


def test_season_tree_placement_ignores_record_order():
    records = [
        episode_record(1, 2, 1, 'SD', season_id=20),
        episode_record(2, 1, 2, 'SD', season_id=10),
        episode_record(3, 1, 1, 'SD', season_id=10),
    ]
    forward = SeasonTree.build('42', records)
    backward = SeasonTree.build('42', list(reversed(records)))
    for tree in (forward, backward):
        assert tree.season_at(0).slot(0)['SD'].eid == '3'
        assert tree.season_at(0).slot(1)['SD'].eid == '2'
        assert tree.season_at(1).slot(0)['SD'].eid == '1'


def test_season_tree_last_write_wins_for_same_quality():
    tree = SeasonTree.build('42', [
        episode_record(1, 1, 1, 'SD'),
        episode_record(2, 1, 1, 'SD'),
    ])
    assert tree.season_at(0).slot(0)['SD'].eid == '2'
    assert len(tree.raw) == 2


def test_series_index_is_fetched_once(client):
    cache = CatalogCache(client)
    first = cache.get_series_index(constants.SCOPE_MINE)
    second = cache.get_series_index(constants.SCOPE_MINE)
    assert first is second
    client.fetch_my_series.assert_called_once()


def test_series_index_slot_is_shared_across_scopes(client):
    cache = CatalogCache(client)
    mine = cache.get_series_index(constants.SCOPE_MINE)
    assert cache.get_series_index(constants.SCOPE_ALL) is mine
    client.fetch_all_series.assert_not_called()


def test_all_scope_fetches_all_series(client):
    cache = CatalogCache(client)
    index = cache.get_series_index(constants.SCOPE_ALL)
    assert index.get('3').title == 'Fringe'
    client.fetch_my_series.assert_not_called()


def test_failed_load_leaves_cache_empty(client):
    client.fetch_my_series.side_effect = RemoteError(status=500)
    cache = CatalogCache(client)
    with pytest.raises(RemoteError):
        cache.get_series_index()
    assert cache.peek_series('1') is None

    client.fetch_my_series.side_effect = None
    assert cache.get_series_index().get('1').title == 'Lost'


def test_season_trees_are_cached_per_series(client):
    cache = CatalogCache(client)
    cache.get_season_tree('42')
    cache.get_season_tree('42')
    cache.get_season_tree('43')
    assert [c.args for c in client.fetch_episodes.call_args_list] == [('42',), ('43',)]


def test_clear_drops_index_and_trees(client):
    cache = CatalogCache(client)
    cache.get_series_index()
    cache.get_season_tree('42')
    cache.clear()
    cache.get_series_index()
    cache.get_season_tree('42')
    assert client.fetch_my_series.call_count == 2
    assert client.fetch_episodes.call_count == 2


def test_find_variant_and_missing_ids(client):
    cache = CatalogCache(client)
    assert cache.find_variant('42', '10', '2').quality == 'SD'
    with pytest.raises(LookupInconsistency):
        cache.find_season('42', '999')
    with pytest.raises(LookupInconsistency):
        cache.find_variant('42', '10', '999')


def test_find_slot_uses_one_based_numbers(client):
    cache = CatalogCache(client)
    assert set(cache.find_slot('42', 1, 1)) == {'720p', 'SD'}
    assert set(cache.find_slot('42', '1', '2')) == {'SD'}
    with pytest.raises(LookupInconsistency):
        cache.find_slot('42', 2, 1)
    with pytest.raises(LookupInconsistency):
        cache.find_slot('42', 1, 5)


def test_memory_cache_evicts_least_recently_used():
    memory = MemoryCache(max_size=2)
    memory.set('a', 1)
    memory.set('b', 2)
    memory.get('a')
    memory.set('c', 3)
    assert 'a' in memory
    assert 'b' not in memory
    assert len(memory) == 2


def test_memory_cache_is_unbounded_by_default():
    memory = MemoryCache()
    for key in range(1000):
        memory.set(key, key)
    assert len(memory) == 1000
    assert 0 in memory


def disk_backed(client, cache_dir, token='abc'):
    return CatalogCache(client, disk=DiskCache(cache_dir), token_getter=lambda: token)


def test_disk_tier_carries_catalog_to_next_run(client, cache_dir):
    first = disk_backed(client, cache_dir)
    first.get_series_index()
    first.get_season_tree('42')

    second = disk_backed(client, cache_dir)
    assert second.peek_series('1').title == 'Lost'
    assert second.find_variant('42', '10', '2').quality == 'SD'
    client.fetch_my_series.assert_called_once()
    client.fetch_episodes.assert_called_once()


def test_disk_tier_ignores_entries_of_another_session(client, cache_dir):
    disk_backed(client, cache_dir, token='abc').get_series_index()

    other = disk_backed(client, cache_dir, token='xyz')
    assert other.peek_series('1') is None
    other.get_series_index()
    assert client.fetch_my_series.call_count == 2


def test_disk_tier_keeps_watch_state_updates(client, cache_dir):
    client.fetch_my_series.return_value = [series_record(1, 'Lost', watching=0, unwatched=2)]
    first = disk_backed(client, cache_dir)
    first.get_series_index()
    variant = first.find_variant('1', '10', '1')
    first.set_watching('1', True)
    first.mark_watched('1', variant)

    second = disk_backed(client, cache_dir)
    entry = second.peek_series('1')
    assert entry.watching is True
    assert entry.unwatched == 1
    assert second.find_variant('1', '10', '1').watched is True
    assert second.find_variant('1', '10', '2').watched is False


def test_clear_deletes_disk_entries(client, cache_dir):
    cache = disk_backed(client, cache_dir)
    cache.get_series_index()
    cache.get_season_tree('42')
    assert len(os.listdir(cache_dir)) == 2

    cache.clear()
    assert os.listdir(cache_dir) == []
    assert disk_backed(client, cache_dir).peek_series('1') is None


def test_unreadable_disk_entry_is_a_miss(client, cache_dir):
    disk_backed(client, cache_dir).get_series_index()
    for filename in os.listdir(cache_dir):
        with open(os.path.join(cache_dir, filename), 'w') as f:
            f.write('not json')

    cache = disk_backed(client, cache_dir)
    assert cache.peek_series('1') is None
    assert cache.get_series_index().get('1').title == 'Lost'
    assert client.fetch_my_series.call_count == 2
