# -*- coding: utf-8 -*-
"""Settings helper functions for Soap4me addon"""
import xbmcaddon
from . import constants


class PluginSettings:
    """Typed view over the addon settings the catalog core reads."""

    def __init__(self, addon=None):
        self._addon = addon or xbmcaddon.Addon()

    def get_setting(self, setting_id, default=None):
        """Get addon setting with default fallback."""
        value = self._addon.getSetting(setting_id)
        return value if value else default

    def get_bool_setting(self, setting_id, default=False):
        """Get boolean setting."""
        value = self._addon.getSetting(setting_id)
        if not value:
            return default
        return value.lower() == 'true'

    def get_int_setting(self, setting_id, default=0):
        """Get integer setting."""
        try:
            return int(self._addon.getSetting(setting_id))
        except (ValueError, TypeError):
            return default

    # Playback settings
    @property
    def preferred_quality(self):
        return self.get_setting('preferred_quality', constants.DEFAULT_PREFERRED_QUALITY)

    @property
    def mark_watched_on_play(self):
        return self.get_bool_setting('mark_watched_on_play', constants.DEFAULT_MARK_WATCHED_ON_PLAY)

    # Browsing settings
    @property
    def show_all_series(self):
        return self.get_bool_setting('show_all_series', constants.DEFAULT_SHOW_ALL_SERIES)

    @property
    def notify_on_logout(self):
        return self.get_bool_setting('notify_on_logout', constants.DEFAULT_NOTIFY_ON_LOGOUT)

    # Advanced settings
    @property
    def timeout(self):
        """Request timeout in seconds."""
        return self.get_int_setting('timeout', constants.DEFAULT_TIMEOUT) or constants.DEFAULT_TIMEOUT
