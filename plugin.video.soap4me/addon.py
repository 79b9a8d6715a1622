# -*- coding: utf-8 -*-
"""Soap4me plugin entry point. Kodi runs this once per navigation."""
import sys

from resources.lib import handlers  # noqa: F401  registers route handlers
from resources.lib.context import PluginContext
from resources.lib.directory import KodiDialogs, KodiDirectory
from resources.lib.globals import g
from resources.lib.router import dispatch
from resources.lib.routes import Route, match


def main(argv=None):
    g.init(argv or sys.argv)

    route, _ = match(g.PATH)
    sink = KodiDirectory(g.HANDLE, g.get_url, addon_name=g.ADDON_NAME,
                         playable=route is Route.EPISODE)
    dialogs = KodiDialogs(addon_name=g.ADDON_NAME, icon=g.ADDON_ICON)
    ctx = PluginContext.create(g.ADDON, dialogs, sink=sink,
                               addon_name=g.ADDON_NAME, icon=g.ADDON_ICON)

    g.log_debug(f'Invoked with path {g.PATH}')
    try:
        dispatch(ctx, g.PATH)
    finally:
        ctx.close()


if __name__ == '__main__':
    main()
