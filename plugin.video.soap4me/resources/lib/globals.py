# -*- coding: utf-8 -*-
"""
Global state manager for Soap4me addon.
Provides centralized access to addon info, the invoked plugin path and logging.
"""
import sys
import xbmc
import xbmcaddon
from urllib.parse import urlparse


class Globals:
    """
    Singleton global state manager.
    Holds what Kodi passes on each plugin invocation.
    """
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def init(self, argv=None, addon=None):
        """
        Initialize global state from command-line arguments.

        Args:
            argv: sys.argv from Kodi plugin call
            addon: Optional xbmcaddon.Addon instance
        """
        if argv is None:
            argv = sys.argv

        self._addon = addon or xbmcaddon.Addon()
        self._addon_id = self._addon.getAddonInfo('id') or 'plugin.video.soap4me'
        self._addon_name = self._addon.getAddonInfo('name') or 'Soap4me'
        self._addon_icon = self._addon.getAddonInfo('icon')

        # Handle will be -1 when not called as a plugin source
        try:
            self._handle = int(argv[1]) if len(argv) > 1 else -1
        except (ValueError, IndexError):
            self._handle = -1

        base = argv[0] if argv else ''
        self._path = urlparse(base).path or '/'

    @property
    def ADDON(self):
        """Get addon instance."""
        return self._addon

    @property
    def ADDON_ID(self):
        return self._addon_id

    @property
    def ADDON_NAME(self):
        return self._addon_name

    @property
    def ADDON_ICON(self):
        return self._addon_icon

    @property
    def HANDLE(self):
        """Get plugin handle for directory operations."""
        return self._handle

    @property
    def PATH(self):
        """Get the navigation path Kodi invoked the plugin with."""
        return self._path

    def get_url(self, path):
        """
        Create a URL for calling the plugin recursively.

        Args:
            path: Route path such as '/series/42'

        Returns:
            Plugin URL string
        """
        if not path.startswith('/'):
            path = f'/{path}'
        return f'plugin://{self._addon_id}{path}'

    def log(self, message, level=xbmc.LOGDEBUG):
        """
        Log message with addon prefix.

        Args:
            message: Message to log
            level: Log level (xbmc.LOGDEBUG, xbmc.LOGINFO, etc.)
        """
        xbmc.log(f'[Soap4me] {message}', level)

    def log_debug(self, message):
        self.log(message, xbmc.LOGDEBUG)


# Global singleton instance
g = Globals()
