# -*- coding: utf-8 -*-
"""
Session-scoped catalog cache for Soap4me addon.
Two tiers: Memory -> Disk. Kodi starts the plugin once per navigation,
so the disk tier carries the series index and season trees from one
navigation to the next. Entries never expire by time; they are dropped
when the session changes (login or logout).
"""
import os
import json
import hashlib
import threading
import xbmc
import xbmcvfs

from . import constants
from .errors import LookupInconsistency
from .models import SeriesIndex, SeasonTree, patch_records

SERIES_INDEX_KEY = 'series_index'
SEASON_TREE_PREFIX = 'season_tree:'


def profile_cache_dir(addon):
    """Cache directory under the addon profile."""
    profile_path = xbmcvfs.translatePath(addon.getAddonInfo('profile'))
    return os.path.join(profile_path, 'cache')


class MemoryCache:
    """
    In-memory key/value layer.
    Thread-safe; with max_size set, least recently used entries are
    evicted once max_size entries are held.
    """

    def __init__(self, max_size=None):
        """
        Initialize memory cache.

        Args:
            max_size: Maximum number of entries to keep in memory, None for no limit
        """
        self._cache = {}
        self._max_size = max_size
        self._lock = threading.RLock()
        self._access_order = []  # For LRU eviction

    def get(self, key):
        """
        Get value from memory cache.

        Returns:
            Cached data or None if not found
        """
        with self._lock:
            if key not in self._cache:
                return None

            if key in self._access_order:
                self._access_order.remove(key)
            self._access_order.append(key)

            return self._cache[key]

    def set(self, key, data):
        """Set value in memory cache."""
        with self._lock:
            # Evict oldest entries if at capacity
            while (self._max_size and key not in self._cache
                   and len(self._cache) >= self._max_size and self._access_order):
                oldest_key = self._access_order.pop(0)
                self._cache.pop(oldest_key, None)

            self._cache[key] = data

            if key in self._access_order:
                self._access_order.remove(key)
            self._access_order.append(key)

    def clear(self):
        """Clear all entries from memory cache."""
        with self._lock:
            self._cache.clear()
            self._access_order.clear()

    def __contains__(self, key):
        with self._lock:
            return key in self._cache

    def __len__(self):
        with self._lock:
            return len(self._cache)


class DiskCache:
    """
    JSON files under the addon profile, one per key.

    Every file records the owner it was written for; a read by another
    owner is a miss. Read and write failures are logged and treated as
    a miss or a skipped write.
    """

    def __init__(self, cache_dir):
        self._cache_dir = cache_dir

    def _ensure_dir(self):
        if not xbmcvfs.exists(self._cache_dir):
            xbmcvfs.mkdirs(self._cache_dir)

    def _path(self, key):
        key_hash = hashlib.md5(key.encode('utf-8')).hexdigest()
        return os.path.join(self._cache_dir, f'catalog_{key_hash}.json')

    def get(self, key, owner):
        """
        Returns:
            Stored data, or None when missing, unreadable or written for another owner
        """
        cache_file = self._path(key)
        if not xbmcvfs.exists(cache_file):
            return None

        try:
            with open(cache_file, 'r') as f:
                cache_data = json.load(f)
        except (OSError, ValueError) as e:
            xbmc.log(f'[Soap4me] Cache read error ({key}): {e}', xbmc.LOGWARNING)
            return None

        if not isinstance(cache_data, dict) or cache_data.get('owner') != owner:
            xbmc.log(f'[Soap4me] Cache STALE (disk): {key}', xbmc.LOGDEBUG)
            return None
        return cache_data.get('data')

    def set(self, key, owner, data):
        try:
            self._ensure_dir()
            cache_file = self._path(key)
            with open(cache_file, 'w') as f:
                json.dump({'owner': owner, 'key': key, 'data': data}, f)
            xbmc.log(f'[Soap4me] Cache SET (disk): {key}', xbmc.LOGDEBUG)
        except (OSError, TypeError, ValueError) as e:
            xbmc.log(f'[Soap4me] Cache write error ({key}): {e}', xbmc.LOGWARNING)

    def clear(self):
        """Delete every catalog file."""
        if not xbmcvfs.exists(self._cache_dir):
            return
        _, files = xbmcvfs.listdir(self._cache_dir)
        for filename in files:
            if filename.startswith('catalog_') and filename.endswith('.json'):
                xbmcvfs.delete(os.path.join(self._cache_dir, filename))


class CatalogCache:
    """
    Lazily loaded series index and per-series season trees.

    Lookups go memory, then disk, then the catalog client. A load
    either stores a fully built structure or raises and leaves the
    cache as it was. Disk entries are keyed to the current session
    token, so data of another account is never reused.
    """

    def __init__(self, client, memory=None, disk=None, token_getter=None):
        """
        Args:
            client: CatalogClient used on cache misses
            memory: Optional MemoryCache to store entries in
            disk: Optional DiskCache that keeps entries between plugin runs
            token_getter: Callable returning the session token the disk entries belong to
        """
        self._client = client
        self._memory = memory if memory is not None else MemoryCache()
        self._disk = disk
        self._token_getter = token_getter

    def _owner(self):
        token = self._token_getter() if self._token_getter else None
        return hashlib.md5((token or '').encode('utf-8')).hexdigest()

    def _load_from_disk(self, key):
        if self._disk is None:
            return None
        stored = self._disk.get(key, self._owner())
        return stored if isinstance(stored, dict) else None

    def _store(self, key, data, raw):
        self._memory.set(key, data)
        if self._disk is not None:
            self._disk.set(key, self._owner(), raw)

    def _cached_series_index(self):
        index = self._memory.get(SERIES_INDEX_KEY)
        if index is not None:
            return index

        stored = self._load_from_disk(SERIES_INDEX_KEY)
        if stored is None:
            return None
        index = SeriesIndex.build(stored.get('scope', constants.SCOPE_MINE), stored.get('records') or [])
        self._memory.set(SERIES_INDEX_KEY, index)
        xbmc.log(f'[Soap4me] Cache HIT (disk): series index ({index.scope})', xbmc.LOGDEBUG)
        return index

    def _store_series_index(self, index):
        self._store(SERIES_INDEX_KEY, index, {'scope': index.scope, 'records': index.raw})

    def _store_season_tree(self, tree):
        self._store(f'{SEASON_TREE_PREFIX}{tree.sid}', tree, {'records': tree.raw})

    def get_series_index(self, scope=constants.SCOPE_MINE):
        """
        Get the series index, fetching it on first use.

        One slot per session: an index loaded for one scope is reused
        when another scope is asked for.

        Raises:
            RemoteError: when the fetch fails
        """
        index = self._cached_series_index()
        if index is not None:
            xbmc.log(f'[Soap4me] Cache HIT: series index ({index.scope})', xbmc.LOGDEBUG)
            return index

        xbmc.log(f'[Soap4me] Cache MISS: series index, fetching {scope}', xbmc.LOGDEBUG)
        if scope == constants.SCOPE_ALL:
            records = self._client.fetch_all_series()
        else:
            records = self._client.fetch_my_series()

        index = SeriesIndex.build(scope, records)
        self._store_series_index(index)
        return index

    def peek_series(self, sid):
        """Get a series entry if the index is already loaded, without fetching."""
        index = self._cached_series_index()
        if index is None:
            return None
        return index.get(sid)

    def get_season_tree(self, sid):
        """
        Get the season tree of a series, fetching it on first use.

        Raises:
            RemoteError: when the fetch fails
        """
        key = f'{SEASON_TREE_PREFIX}{sid}'
        tree = self._memory.get(key)
        if tree is not None:
            xbmc.log(f'[Soap4me] Cache HIT: season tree {sid}', xbmc.LOGDEBUG)
            return tree

        stored = self._load_from_disk(key)
        if stored is not None:
            xbmc.log(f'[Soap4me] Cache HIT (disk): season tree {sid}', xbmc.LOGDEBUG)
            tree = SeasonTree.build(sid, stored.get('records') or [])
            self._memory.set(key, tree)
            return tree

        xbmc.log(f'[Soap4me] Cache MISS: season tree {sid}', xbmc.LOGDEBUG)
        records = self._client.fetch_episodes(sid)
        tree = SeasonTree.build(sid, records)
        self._store_season_tree(tree)
        return tree

    def set_watching(self, sid, watching):
        """Record the watching flag of a series, if its index is loaded."""
        index = self._cached_series_index()
        entry = index.get(sid) if index is not None else None
        if entry is None:
            return
        entry.watching = bool(watching)
        patch_records(index.raw, 'sid', entry.sid, watching=int(entry.watching))
        self._store_series_index(index)

    def mark_watched(self, sid, variant):
        """Record a played episode: one unwatched less for the series, variant watched."""
        index = self._cached_series_index()
        entry = index.get(sid) if index is not None else None
        if not variant.watched and entry is not None and entry.unwatched > 0:
            entry.unwatched -= 1
            patch_records(index.raw, 'sid', entry.sid, unwatched=entry.unwatched)
            self._store_series_index(index)

        variant.watched = True
        tree = self._memory.get(f'{SEASON_TREE_PREFIX}{sid}')
        if tree is not None:
            patch_records(tree.raw, 'eid', variant.eid, watched=1)
            self._store_season_tree(tree)

    def find_season(self, sid, season_id):
        """
        Raises:
            LookupInconsistency: when the season is not in the tree
        """
        season = self.get_season_tree(sid).find_season(season_id)
        if season is None:
            raise LookupInconsistency(f'Season {season_id} not found')
        return season

    def find_variant(self, sid, season_id, eid):
        """
        Raises:
            LookupInconsistency: when the season or the episode is missing
        """
        variant = self.find_season(sid, season_id).find_variant(eid)
        if variant is None:
            raise LookupInconsistency(f'Episode {eid} not found')
        return variant

    def find_slot(self, sid, season_number, episode_number):
        """
        Get the quality slot for 1-based season and episode numbers.

        Raises:
            LookupInconsistency: when there is no such episode
        """
        tree = self.get_season_tree(sid)
        season = tree.season_at(int(season_number) - 1)
        slot = season.slot(int(episode_number) - 1) if season is not None else None
        if not slot:
            raise LookupInconsistency(
                f'Episode S{season_number}E{episode_number} of series {sid} not found')
        return slot

    def clear(self):
        """Drop the series index and every season tree."""
        xbmc.log('[Soap4me] Cache cleared', xbmc.LOGDEBUG)
        self._memory.clear()
        if self._disk is not None:
            self._disk.clear()
