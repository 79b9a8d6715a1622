# -*- coding: utf-8 -*-
"""
Catalog data model for Soap4me addon.
Built from the JSON records the catalog API returns.
"""
from . import constants


def _to_bool(value):
    if isinstance(value, str):
        return value.strip().lower() in ('1', 'true', 'yes')
    return bool(value)


def _to_int(value, default=0):
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _to_id(value):
    return None if value is None else str(value)


def _to_status(value):
    if isinstance(value, str) and value.strip().lower() in (constants.STATUS_CLOSED, 'ended'):
        return constants.STATUS_CLOSED
    return constants.STATUS_CLOSED if _to_int(value) == 1 else constants.STATUS_ONGOING


def patch_records(records, key, value, **changes):
    """Apply changes to every raw record whose key field equals value."""
    value = _to_id(value)
    for record in records:
        if _to_id(record.get(key)) == value:
            record.update(changes)


class SeriesEntry:
    """One series of the catalog, keyed by sid."""

    def __init__(self, sid, title, description='', status=constants.STATUS_ONGOING,
                 watching=False, unwatched=0, title_ru='', year=None, rating=None):
        self.sid = sid
        self.title = title
        self.description = description
        self.status = status
        self.watching = watching
        self.unwatched = unwatched
        self.title_ru = title_ru
        self.year = year
        self.rating = rating

    @classmethod
    def from_api(cls, record):
        rating = record.get('imdb_rating')
        try:
            rating = float(rating) if rating not in (None, '') else None
        except (TypeError, ValueError):
            rating = None

        return cls(
            sid=_to_id(record.get('sid')),
            title=record.get('title') or record.get('title_ru') or '',
            description=record.get('description') or '',
            status=_to_status(record.get('status')),
            watching=_to_bool(record.get('watching')),
            unwatched=_to_int(record.get('unwatched')),
            title_ru=record.get('title_ru') or '',
            year=_to_int(record.get('year'), None),
            rating=rating,
        )

    @property
    def is_closed(self):
        return self.status == constants.STATUS_CLOSED

    def __repr__(self):
        return f'SeriesEntry(sid={self.sid!r}, title={self.title!r})'


class SeriesIndex:
    """Series looked up by sid, plus the list in the order the API sent it."""

    def __init__(self, scope, items, by_sid, raw=None):
        self.scope = scope
        self.items = items
        self.by_sid = by_sid
        self.raw = raw if raw is not None else []

    @classmethod
    def build(cls, scope, records):
        """First entry wins when the same sid appears more than once."""
        items = [SeriesEntry.from_api(record) for record in records]
        by_sid = {}
        for entry in items:
            by_sid.setdefault(entry.sid, entry)
        return cls(scope, items, by_sid, list(records))

    def get(self, sid):
        return self.by_sid.get(_to_id(sid))

    def __len__(self):
        return len(self.items)


class EpisodeVariant:
    """One quality rendition of one episode."""

    def __init__(self, eid, sid, season_id, season, episode, quality, integrity_hash,
                 title_en='', title_ru='', translate='', watched=False, spoiler=''):
        self.eid = eid
        self.sid = sid
        self.season_id = season_id
        self.season = season
        self.episode = episode
        self.quality = quality
        self.integrity_hash = integrity_hash
        self.title_en = title_en
        self.title_ru = title_ru
        self.translate = translate
        self.watched = watched
        self.spoiler = spoiler

    @classmethod
    def from_api(cls, record, sid=None):
        season = _to_int(record.get('season'))
        return cls(
            eid=_to_id(record.get('eid')),
            sid=_to_id(record.get('sid', sid)),
            season_id=_to_id(record.get('season_id') or season),
            season=season,
            episode=_to_int(record.get('episode')),
            quality=record.get('quality') or '',
            integrity_hash=record.get('hash') or '',
            title_en=record.get('title_en') or '',
            title_ru=record.get('title_ru') or '',
            translate=record.get('translate') or '',
            watched=_to_bool(record.get('watched')),
            spoiler=record.get('spoiler') or '',
        )

    @property
    def title(self):
        return self.title_en or self.title_ru

    def __repr__(self):
        return f'EpisodeVariant(eid={self.eid!r}, s={self.season}, e={self.episode}, q={self.quality!r})'


class SeasonEntry:
    """
    One season. ``episodes`` is indexed by episode ordinal (number - 1);
    missing episodes leave None in their place. Each present cell is a
    quality slot: dict of quality -> EpisodeVariant.
    """

    def __init__(self, season_id, number):
        self.season_id = season_id
        self.number = number
        self.episodes = []

    def put(self, variant):
        ordinal = variant.episode - 1
        while len(self.episodes) <= ordinal:
            self.episodes.append(None)
        slot = self.episodes[ordinal]
        if slot is None:
            slot = self.episodes[ordinal] = {}
        slot[variant.quality] = variant

    def slot(self, ordinal):
        if 0 <= ordinal < len(self.episodes):
            return self.episodes[ordinal]
        return None

    def slots(self):
        """Yield (ordinal, slot) for every present episode cell."""
        for ordinal, slot in enumerate(self.episodes):
            if slot:
                yield ordinal, slot

    def find_variant(self, eid):
        eid = _to_id(eid)
        for _, slot in self.slots():
            for variant in slot.values():
                if variant.eid == eid:
                    return variant
        return None

    @property
    def episode_count(self):
        return sum(1 for _ in self.slots())

    def __repr__(self):
        return f'SeasonEntry(season_id={self.season_id!r}, number={self.number})'


class SeasonTree:
    """
    Seasons of one series. ``seasons`` is indexed by season ordinal
    (number - 1) with None for gaps; ``raw`` keeps the flat API list.
    """

    def __init__(self, sid, seasons, raw):
        self.sid = sid
        self.seasons = seasons
        self.raw = raw

    @classmethod
    def build(cls, sid, records):
        seasons = []
        for record in records:
            variant = EpisodeVariant.from_api(record, sid=sid)
            if variant.season < 1 or variant.episode < 1:
                continue

            ordinal = variant.season - 1
            while len(seasons) <= ordinal:
                seasons.append(None)
            if seasons[ordinal] is None:
                seasons[ordinal] = SeasonEntry(variant.season_id, variant.season)
            seasons[ordinal].put(variant)

        return cls(_to_id(sid), seasons, list(records))

    def season_at(self, ordinal):
        if 0 <= ordinal < len(self.seasons):
            return self.seasons[ordinal]
        return None

    def iter_seasons(self):
        return (season for season in self.seasons if season is not None)

    def find_season(self, season_id):
        """Linear scan; season ids are opaque and not sorted."""
        season_id = _to_id(season_id)
        for season in self.iter_seasons():
            if season.season_id == season_id:
                return season
        return None
