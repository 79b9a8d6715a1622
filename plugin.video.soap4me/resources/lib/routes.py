# -*- coding: utf-8 -*-
"""
Route table for Soap4me addon.
Maps plugin paths to routes with their captured parameters and back.
"""
import re
from enum import Enum
from urllib.parse import quote, unquote


class Route(Enum):
    START = 'start'
    SEARCH_PROMPT = 'search_prompt'
    SEARCH = 'search'
    SERIES = 'series'
    UNWATCH = 'unwatch'
    SEASON = 'season'
    EPISODE = 'episode'
    LOGIN = 'login'
    LOGOUT = 'logout'


# Path templates; {name} placeholders are captured parameters
TEMPLATES = {
    Route.START: '/',
    Route.SEARCH_PROMPT: '/search',
    Route.SEARCH: '/search/{query}',
    Route.SERIES: '/series/{sid}',
    Route.UNWATCH: '/series/{sid}/unwatch',
    Route.SEASON: '/series/{sid}/season/{season_id}',
    Route.EPISODE: '/series/{sid}/season/{season_id}/episode/{eid}',
    Route.LOGIN: '/login',
    Route.LOGOUT: '/logout',
}

_CAPTURES = {
    'query': r'(?P<query>[^/]+)',
}
_NUMERIC = r'(?P<{name}>\d+)'


def _compile(template):
    pattern = re.escape(template)
    for name in re.findall(r'\{(\w+)\}', template):
        capture = _CAPTURES.get(name, _NUMERIC.format(name=name))
        pattern = pattern.replace(re.escape(f'{{{name}}}'), capture)
    return re.compile(f'^{pattern}$')


PATTERNS = [(route, _compile(template)) for route, template in TEMPLATES.items()]


def normalize(path):
    """Strip query, fragment and trailing slashes; the root stays '/'."""
    path = (path or '/').split('?', 1)[0].split('#', 1)[0]
    if not path.startswith('/'):
        path = f'/{path}'
    return path.rstrip('/') or '/'


def match(path):
    """
    Match a path against the route table.

    Returns:
        (Route, params dict), or (None, {}) when nothing matches
    """
    path = normalize(path)
    for route, pattern in PATTERNS:
        found = pattern.match(path)
        if found:
            params = found.groupdict()
            if 'query' in params:
                params['query'] = unquote(params['query'])
            return route, params
    return None, {}


def build(route, **params):
    """Build the path for a route, e.g. build(Route.SERIES, sid=42) -> '/series/42'."""
    values = {
        name: quote(str(value), safe='') if name == 'query' else str(value)
        for name, value in params.items()
    }
    return TEMPLATES[route].format(**values)
