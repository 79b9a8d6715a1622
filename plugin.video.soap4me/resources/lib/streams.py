# -*- coding: utf-8 -*-
"""Stream resolution for Soap4me addon"""
import hashlib
import xbmc

from . import constants
from .errors import Soap4meError


def integrity_hash(token, eid, sid, episode_hash):
    """md5 hex digest of token + eid + sid + per-episode hash."""
    payload = f'{token}{eid}{sid}{episode_hash}'
    return hashlib.md5(payload.encode('utf-8')).hexdigest()


class PlaybackDescriptor:
    """Everything the player needs for one episode."""

    def __init__(self, url, variant):
        self.url = url
        self.variant = variant

    @property
    def title(self):
        return self.variant.title

    def __repr__(self):
        return f'PlaybackDescriptor({self.url!r})'


class StreamResolver:
    """
    Turns an episode id into a playback URL.

    Failures of the stream ticket request propagate as RemoteError or
    StreamUnavailable. Watched/watching updates after a successful
    ticket are best-effort and never change the result.
    """

    def __init__(self, client, cache, settings):
        self._client = client
        self._cache = cache
        self._settings = settings

    def resolve(self, sid, season_id, eid, token):
        """
        Raises:
            LookupInconsistency: episode not in the cached tree
            RemoteError: stream ticket request failed
            StreamUnavailable: server refused the stream ticket
        """
        variant = self._cache.find_variant(sid, season_id, eid)
        digest = integrity_hash(token, variant.eid, sid, variant.integrity_hash)

        server = self._client.request_stream_ticket(variant.eid, digest, token)
        url = constants.STREAM_URL.format(server=server, token=token, eid=variant.eid, hash=digest)
        xbmc.log(f'[Soap4me] Stream ticket granted for eid {variant.eid} on {server}', xbmc.LOGDEBUG)

        self._mark_watching(sid, token)
        if self._settings.mark_watched_on_play:
            self._mark_watched(sid, variant, token)

        return PlaybackDescriptor(url, variant)

    def _mark_watching(self, sid, token):
        entry = self._cache.peek_series(sid)
        if entry is not None and entry.watching:
            return
        try:
            if self._client.set_watching(sid, token):
                self._cache.set_watching(sid, True)
        except Soap4meError as e:
            xbmc.log(f'[Soap4me] Failed to mark series {sid} as watching: {e}', xbmc.LOGWARNING)

    def _mark_watched(self, sid, variant, token):
        try:
            if not self._client.set_watched(variant.eid, token):
                return
        except Soap4meError as e:
            xbmc.log(f'[Soap4me] Failed to mark episode {variant.eid} as watched: {e}', xbmc.LOGWARNING)
            return

        self._cache.mark_watched(sid, variant)
