# -*- coding: utf-8 -*-
"""
Route handlers for Soap4me addon.

Each handler receives the plugin context and the captured route
parameters. Handlers are the only place catalog data is read.
"""
import functools
import xbmc

from . import constants, quality, ui_helpers
from .errors import LoginRejected, RemoteError
from .router import get_router, route
from .routes import Route, build
from .search import SearchAggregator
from .streams import StreamResolver


def requires_session(func):
    """Redirect to login when there is no valid session; pass it on otherwise."""
    @functools.wraps(func)
    def wrapper(ctx, **params):
        session = ctx.session.get()
        if session is None:
            xbmc.log(f'[Soap4me] No session for {func.__name__}, redirecting to login', xbmc.LOGDEBUG)
            return ctx.sink.redirect(build(Route.LOGIN))
        return func(ctx, session, **params)
    return wrapper


def _partition(index, show_not_watching):
    """Split the index into the titled groups of the start page."""
    groups = [
        ('New episodes', []),
        ('Watching', []),
        ('Closed', []),
    ]
    not_watching = []

    for entry in index.items:
        if entry.sid not in index.by_sid or index.by_sid[entry.sid] is not entry:
            continue
        if not entry.watching:
            not_watching.append(entry)
        elif entry.unwatched > 0:
            groups[0][1].append(entry)
        elif entry.is_closed:
            groups[2][1].append(entry)
        else:
            groups[1][1].append(entry)

    if show_not_watching:
        groups.append(('All series', not_watching))
    return groups


@route(Route.START)
@requires_session
def start(ctx, session):
    """Main menu: the account's series grouped by watch state."""
    ctx.sink.set_metadata(ctx.addon_name, ctx.icon)
    ctx.sink.set_content('directory')

    show_all = ctx.settings.show_all_series
    scope = constants.SCOPE_ALL if show_all else constants.SCOPE_MINE
    with ctx.sink.loading():
        index = ctx.cache.get_series_index(scope)

    ctx.sink.add_item(build(Route.SEARCH_PROMPT), 'directory', title='Search')

    for title, entries in _partition(index, show_all):
        if not entries:
            continue
        ctx.sink.add_separator(title)
        for entry in entries:
            fields = ui_helpers.series_fields(entry)
            if entry.watching:
                fields['context_menu'] = [('Stop watching', build(Route.UNWATCH, sid=entry.sid))]
            ctx.sink.add_item(build(Route.SERIES, sid=entry.sid), 'directory', **fields)

    ctx.sink.add_item(build(Route.LOGOUT), 'directory', title='Logout')
    ctx.sink.finish()


@route(Route.SEARCH_PROMPT)
@requires_session
def search_prompt(ctx, session):
    query = ctx.dialogs.input_query('Search')
    if not query:
        return ctx.sink.redirect(build(Route.START))
    return ctx.sink.redirect(build(Route.SEARCH, query=query))


@route(Route.SEARCH)
@requires_session
def search(ctx, session, query):
    ctx.sink.set_metadata(f'Search: {query}', ctx.icon)
    ctx.sink.set_content('items')

    aggregator = SearchAggregator(ctx.client, ctx.cache, ctx.settings.preferred_quality)
    with ctx.sink.loading():
        total, items = aggregator.search(query)

    ctx.sink.set_total(total)
    for item in items:
        ctx.sink.add_item(item.path, item.kind, **item.fields)
    ctx.sink.finish()


@route(Route.SERIES)
@requires_session
def series(ctx, session, sid):
    """One entry per season of the series."""
    entry = ctx.cache.peek_series(sid)
    ctx.sink.set_metadata(entry.title if entry else ctx.addon_name, ui_helpers.cover_url(sid))
    ctx.sink.set_content('directory')

    with ctx.sink.loading():
        tree = ctx.cache.get_season_tree(sid)

    for season in tree.iter_seasons():
        ctx.sink.add_item(build(Route.SEASON, sid=sid, season_id=season.season_id), 'directory',
                          **ui_helpers.season_fields(sid, season))
    ctx.sink.finish()


@route(Route.UNWATCH)
@requires_session
def unwatch(ctx, session, sid):
    """Stop watching a series, then show the start page again."""
    with ctx.sink.loading():
        ok = ctx.client.set_watching(sid, session.token, watching=False)

    if ok:
        ctx.cache.set_watching(sid, False)
    else:
        ctx.dialogs.notify('Could not update series')
    return ctx.sink.redirect(build(Route.START))


@route(Route.SEASON)
@requires_session
def season(ctx, session, sid, season_id):
    """One playable entry per episode, in the preferred quality when available."""
    with ctx.sink.loading():
        season_entry = ctx.cache.find_season(sid, season_id)

    ctx.sink.set_metadata(ui_helpers.format_season_title(season_entry), ui_helpers.cover_url(sid))
    ctx.sink.set_content('video')

    preferred = ctx.settings.preferred_quality
    for _, slot in season_entry.slots():
        variant = quality.resolve(slot, preferred)
        path = build(Route.EPISODE, sid=sid, season_id=season_id, eid=variant.eid)
        ctx.sink.add_item(path, 'video', **ui_helpers.episode_fields(variant))
    ctx.sink.finish()


@route(Route.EPISODE)
@requires_session
def episode(ctx, session, sid, season_id, eid):
    """Resolve the stream and hand it to the player."""
    resolver = StreamResolver(ctx.client, ctx.cache, ctx.settings)
    with ctx.sink.loading():
        descriptor = resolver.resolve(sid, season_id, eid, session.token)
    ctx.sink.play(descriptor)


@route(Route.LOGIN)
def login(ctx):
    credentials = ctx.dialogs.get_credentials(ctx.addon_name, 'Login required')
    if credentials.rejected:
        return ctx.sink.redirect(build(Route.LOGIN))

    try:
        with ctx.sink.loading():
            result = ctx.client.login(credentials.username, credentials.password)
    except LoginRejected as e:
        ctx.dialogs.notify(e.message)
        return ctx.sink.redirect(build(Route.LOGIN))
    except RemoteError as e:
        xbmc.log(f'[Soap4me] Login failed: {e}', xbmc.LOGERROR)
        ctx.dialogs.notify('Login error, please try again later')
        return ctx.sink.redirect(build(Route.LOGIN))

    ctx.login(result)
    xbmc.log('[Soap4me] Logged in', xbmc.LOGINFO)
    return ctx.sink.redirect(build(Route.START))


@route(Route.LOGOUT)
def logout(ctx):
    ctx.logout()
    if ctx.settings.notify_on_logout:
        ctx.dialogs.notify('Logged out')
    return ctx.sink.redirect(build(Route.START))


# Unknown paths render the start page
get_router().register_default(Route.START)
