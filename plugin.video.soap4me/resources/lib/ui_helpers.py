# -*- coding: utf-8 -*-
"""UI helper functions for Soap4me addon"""
from . import constants


def get_watched_color(is_watched, is_new=False):
    """Get color code based on watched status."""
    if is_watched:
        return constants.COLOR_WATCHED
    elif is_new:
        return constants.COLOR_NEW
    else:
        return constants.COLOR_UNWATCHED


def format_series_title(entry):
    """
    Format series title with unwatched count.
    Example: Show Title [COLOR gold](3)[/COLOR]
    """
    if entry.unwatched > 0:
        return f"{entry.title} [COLOR {constants.COLOR_NEW}]({entry.unwatched})[/COLOR]"
    return entry.title


def format_season_title(season):
    """Example: Season 2 (10 episodes)"""
    return f"Season {season.number} ({season.episode_count} episodes)"


def format_episode_title(variant, series_title=None):
    """
    Format episode title with color coding.
    Example: [COLOR white]S01E05 Episode Title[/COLOR] [720p]
    """
    color = get_watched_color(variant.watched)
    prefix = f"S{variant.season:02d}E{variant.episode:02d}"
    title = variant.title or f"Episode {variant.episode}"
    if series_title:
        title = f"{series_title}: {title}"

    formatted = f"[COLOR {color}]{prefix} {title}[/COLOR]"
    if variant.quality:
        formatted += f" [{variant.quality}]"
    return formatted


def cover_url(sid):
    return constants.COVER_URL.format(sid=sid)


def series_fields(entry):
    """Display fields for a series directory item."""
    fields = {
        'title': format_series_title(entry),
        'description': entry.description,
        'icon': cover_url(entry.sid),
    }
    if entry.year:
        fields['year'] = entry.year
    if entry.rating is not None:
        fields['rating'] = entry.rating
    return fields


def season_fields(sid, season):
    return {
        'title': format_season_title(season),
        'icon': cover_url(sid),
        'season': season.number,
    }


def episode_fields(variant, series_title=None):
    """Display fields for a playable episode item."""
    return {
        'title': format_episode_title(variant, series_title),
        'description': variant.spoiler,
        'icon': cover_url(variant.sid),
        'season': variant.season,
        'episode': variant.episode,
        'watched': variant.watched,
    }
