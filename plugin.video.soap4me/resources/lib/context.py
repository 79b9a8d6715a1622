# -*- coding: utf-8 -*-
"""Plugin context: the long-lived state handlers work with."""
import xbmc

from .api import CatalogClient
from .cache import CatalogCache, DiskCache, profile_cache_dir
from .network import RequestSession
from .session import AddonStorage, SessionStore
from .settings_helpers import PluginSettings


class PluginContext:
    """
    Session store, catalog client and cache shared by all handlers,
    plus the sink and dialogs of the navigation being rendered.
    """

    def __init__(self, session, client, cache, settings, dialogs, sink=None,
                 addon_name='Soap4me', icon=None):
        self.session = session
        self.client = client
        self.cache = cache
        self.settings = settings
        self.dialogs = dialogs
        self.sink = sink
        self.addon_name = addon_name
        self.icon = icon

    @classmethod
    def create(cls, addon, dialogs, sink=None, addon_name='Soap4me', icon=None, http=None,
               cache_dir=None):
        """
        Build a context backed by addon settings and a fresh HTTP session.
        The catalog cache is kept on disk under cache_dir, the addon
        profile by default, so it outlives this plugin run.
        """
        settings = PluginSettings(addon)
        session = SessionStore(AddonStorage(addon))
        client = CatalogClient(
            token_getter=session.token,
            http=http or RequestSession(timeout=settings.timeout),
        )
        cache = CatalogCache(
            client,
            disk=DiskCache(cache_dir or profile_cache_dir(addon)),
            token_getter=session.token,
        )
        return cls(session, client, cache, settings, dialogs, sink=sink,
                   addon_name=addon_name, icon=icon)

    def login(self, result):
        """Persist a new session; cached data belongs to the previous account."""
        self.cache.clear()
        return self.session.set(result.token, result.expires_at_seconds)

    def logout(self):
        self.session.clear()
        self.cache.clear()
        xbmc.log('[Soap4me] Logged out', xbmc.LOGINFO)

    def close(self):
        self.client.close()
