# -*- coding: utf-8 -*-
"""Search result aggregation for Soap4me addon"""
import xbmc

from . import quality, routes, ui_helpers
from .errors import LookupInconsistency
from .models import SeriesEntry


class SearchItem:
    """One render-ready search hit."""

    def __init__(self, kind, path, fields):
        self.kind = kind
        self.path = path
        self.fields = fields

    def __repr__(self):
        return f'SearchItem({self.kind!r}, {self.path!r})'


class SearchAggregator:
    """
    Merges series hits and episode hits into one list.
    Series hits come first, then episode hits, each in API order.
    """

    def __init__(self, client, cache, preferred_quality):
        self._client = client
        self._cache = cache
        self._preferred_quality = preferred_quality

    def search(self, query):
        """
        Returns:
            (total, items): total is the raw hit count the server
            reported, items are the hits that could be rendered
        """
        result = self._client.search(query)
        items = []

        if result.series:
            items.extend(self._series_item(record) for record in result.series)

        if result.episodes:
            for record in result.episodes:
                item = self._episode_item(record)
                if item is not None:
                    items.append(item)

        return result.total, items

    def _series_item(self, record):
        entry = SeriesEntry.from_api(record)
        return SearchItem('directory', routes.build(routes.Route.SERIES, sid=entry.sid),
                          ui_helpers.series_fields(entry))

    def _episode_item(self, record):
        sid = record.get('sid')
        try:
            slot = self._cache.find_slot(sid, record.get('season'), record.get('episode'))
        except (LookupInconsistency, TypeError, ValueError) as e:
            xbmc.log(f'[Soap4me] Skipping search hit {record!r}: {e}', xbmc.LOGWARNING)
            return None

        variant = quality.resolve(slot, self._preferred_quality)
        path = routes.build(routes.Route.EPISODE, sid=variant.sid,
                            season_id=variant.season_id, eid=variant.eid)
        fields = ui_helpers.episode_fields(variant, series_title=record.get('soap') or record.get('title'))
        return SearchItem('video', path, fields)
