# -*- coding: utf-8 -*-
"""
Soap4me catalog API client.
Handles all communication with the soap4.me backend.
"""
import xbmc

from . import constants
from .errors import LoginRejected, RemoteError, RemoteRejection, StreamUnavailable
from .network import RequestSession


def _is_ok(data):
    if not isinstance(data, dict):
        return False
    ok = data.get('ok')
    if isinstance(ok, str):
        return ok.strip().lower() in ('1', 'true')
    return bool(ok)


class LoginResult:
    """Successful login: token and its expiry in epoch seconds."""

    def __init__(self, token, expires_at_seconds):
        self.token = token
        self.expires_at_seconds = expires_at_seconds


class SearchResult:
    def __init__(self, series, episodes):
        self.series = series
        self.episodes = episodes

    @property
    def total(self):
        return len(self.series) + len(self.episodes)


class CatalogClient:
    """
    Thin wrapper over the remote operations.

    Every call sends the current session token when there is one.
    Transport failures raise RemoteError; a false ``ok`` raises a
    RemoteRejection subclass.
    """

    def __init__(self, token_getter=None, http=None, timeout=constants.DEFAULT_TIMEOUT):
        """
        Args:
            token_getter: Callable returning the current token or None
            http: Optional RequestSession
            timeout: Request timeout in seconds
        """
        self._token_getter = token_getter or (lambda: None)
        self._http = http or RequestSession(timeout=timeout)

    def _token(self, token=None):
        return token if token is not None else self._token_getter()

    def _get_list(self, url, **kwargs):
        data = self._http.get(url, token=self._token(), **kwargs)
        if isinstance(data, dict) and 'ok' in data and not _is_ok(data):
            raise RemoteRejection(payload=data)
        if not isinstance(data, list):
            self.log(f'Unexpected payload from {url}: {type(data).__name__}', xbmc.LOGERROR)
            raise RemoteError('Invalid response from server')
        return data

    def fetch_all_series(self):
        return self._get_list(constants.ALL_SERIES_URL)

    def fetch_my_series(self):
        return self._get_list(constants.MY_SERIES_URL)

    def fetch_episodes(self, sid):
        return self._get_list(constants.EPISODES_URL.format(sid=sid))

    def search(self, query):
        data = self._http.get(constants.SEARCH_URL, token=self._token(), params={'q': query})
        if not isinstance(data, dict):
            raise RemoteError('Invalid response from server')
        if 'ok' in data and not _is_ok(data):
            raise RemoteRejection(payload=data)
        return SearchResult(data.get('series') or [], data.get('episodes') or [])

    def login(self, username, password):
        """
        Raises:
            RemoteError: non-200 status or transport failure
            LoginRejected: credentials refused
        """
        data = self._http.post(constants.LOGIN_URL, data={'login': username, 'password': password})
        if not _is_ok(data):
            raise LoginRejected(payload=data if isinstance(data, dict) else None)
        try:
            till = int(float(data.get('till') or 0))
        except (TypeError, ValueError, OverflowError):
            raise RemoteError(f'Unexpected token expiry: {data.get("till")!r}')
        self.log('Login accepted', xbmc.LOGINFO)
        return LoginResult(data.get('token'), till)

    def request_stream_ticket(self, eid, integrity_hash, token):
        """
        Ask the server which host serves the episode.

        Returns:
            Server host label used to build the playback URL

        Raises:
            RemoteError: non-200 status or transport failure
            StreamUnavailable: the server refused the ticket
        """
        data = self._http.post(constants.CALLBACK_URL, token=token, data={
            'what': 'player',
            'do': 'load',
            'token': token,
            'eid': eid,
            'hash': integrity_hash,
        })
        if not _is_ok(data) or not data.get('server'):
            raise StreamUnavailable(payload=data if isinstance(data, dict) else None)
        return data['server']

    def set_watched(self, eid, token):
        data = self._http.post(constants.CALLBACK_URL, token=token, data={
            'what': 'mark_watched',
            'eid': eid,
            'token': token,
        })
        return _is_ok(data)

    def set_watching(self, sid, token, watching=True):
        url = constants.WATCHING_URL if watching else constants.UNWATCHING_URL
        data = self._http.post(url.format(sid=sid), token=token)
        return _is_ok(data)

    def close(self):
        self._http.close()

    def log(self, message, level=xbmc.LOGDEBUG):
        xbmc.log(f'[Soap4me][api] {message}', level)
