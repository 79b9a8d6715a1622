# -*- coding: utf-8 -*-
"""
Session token lifecycle for Soap4me addon.

The token and its expiry live in two hidden addon settings. Expiry is
checked lazily on every read; an expired pair is deleted before the
read reports no session.
"""
import time
import xbmc
import xbmcaddon

from . import constants


class AddonStorage:
    """
    Key-value store backed by addon settings.
    Writes are best-effort: a failed write is logged and dropped.
    """

    def __init__(self, addon=None):
        self._addon = addon or xbmcaddon.Addon()

    def get(self, name):
        value = self._addon.getSetting(name)
        xbmc.log(f'[Soap4me] Storage: retrieved {_mask(name, value)} for "{name}"', xbmc.LOGDEBUG)
        return value if value else None

    def set(self, name, value):
        xbmc.log(f'[Soap4me] Storage: setting {_mask(name, value)} to "{name}"', xbmc.LOGDEBUG)
        try:
            self._addon.setSetting(name, '' if value is None else str(value))
        except Exception as e:
            xbmc.log(f'[Soap4me] Storage: failed to write "{name}": {e}', xbmc.LOGWARNING)

    def remove(self, name):
        self.set(name, None)


def _mask(name, value):
    if name == constants.TOKEN_KEY and value:
        return f'"{value[:4]}..."'
    return f'"{value}"'


class Session:
    """Authentication token with its expiry in epoch milliseconds."""

    def __init__(self, token, expires_at_millis):
        self.token = token
        self.expires_at_millis = expires_at_millis

    def __repr__(self):
        return f'Session(expires_at_millis={self.expires_at_millis})'


class SessionStore:
    """Persists, expires and clears the authentication token."""

    def __init__(self, storage, clock=time.time):
        """
        Args:
            storage: Object with get/set/remove (see AddonStorage)
            clock: Callable returning the current epoch time in seconds
        """
        self._storage = storage
        self._clock = clock

    def _now_millis(self):
        return int(self._clock() * 1000)

    def get(self):
        """
        Get the current session.

        Returns:
            Session, or None when absent or expired. An expired session
            is removed from storage before returning.
        """
        token = self._storage.get(constants.TOKEN_KEY)
        expires = self._storage.get(constants.TOKEN_EXPIRES_KEY)

        try:
            expires_at = int(expires) if expires is not None else 0
        except ValueError:
            expires_at = 0

        if token and self._now_millis() < expires_at:
            return Session(token, expires_at)

        if token is not None or expires is not None:
            xbmc.log('[Soap4me] Session expired, clearing stored token', xbmc.LOGINFO)
            self.clear()
        return None

    def token(self):
        """Get the current token string, or None."""
        session = self.get()
        return session.token if session else None

    def set(self, token, expires_at_seconds):
        """
        Persist a token.

        Args:
            token: Token string from the login response
            expires_at_seconds: Expiry as epoch seconds
        """
        expires_at_millis = int(expires_at_seconds) * 1000
        self._storage.set(constants.TOKEN_KEY, token)
        self._storage.set(constants.TOKEN_EXPIRES_KEY, str(expires_at_millis))
        return Session(token, expires_at_millis)

    def clear(self):
        """Delete the stored token and expiry. Idempotent."""
        self._storage.remove(constants.TOKEN_KEY)
        self._storage.remove(constants.TOKEN_EXPIRES_KEY)
