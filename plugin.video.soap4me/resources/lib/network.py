# -*- coding: utf-8 -*-
"""
Network utilities for Soap4me addon.
Wraps requests.Session and maps every transport problem to RemoteError.
Requests are never retried here.
"""
import requests
import xbmc

from . import constants
from .errors import RemoteError


class RequestSession:
    """
    Wrapper around requests.Session with the addon's fixed headers.
    One instance lives as long as the plugin context.
    """

    def __init__(self, timeout=constants.DEFAULT_TIMEOUT, session=None):
        """
        Initialize request session.

        Args:
            timeout: Default request timeout in seconds
            session: Optional requests.Session to use
        """
        self._session = session or requests.Session()
        self._session.headers.update({
            'User-Agent': constants.USER_AGENT,
            'Accept-Encoding': 'gzip, deflate',
        })
        self._timeout = timeout

    def get(self, url, **kwargs):
        """Make GET request and decode JSON."""
        return self.request('GET', url, **kwargs)

    def post(self, url, **kwargs):
        """Make POST request and decode JSON."""
        return self.request('POST', url, **kwargs)

    def request(self, method, url, token=None, headers=None, **kwargs):
        """
        Make a request and return the decoded JSON body.

        Args:
            method: HTTP method
            url: URL to request
            token: Optional session token sent in the token header
            headers: Optional extra headers

        Returns:
            Decoded JSON body

        Raises:
            RemoteError: on transport failure, non-200 status or invalid JSON
        """
        kwargs.setdefault('timeout', self._timeout)
        kwargs.setdefault('allow_redirects', False)

        request_headers = dict(headers or {})
        if token:
            request_headers[constants.TOKEN_HEADER] = token

        try:
            response = self._session.request(method, url, headers=request_headers, **kwargs)
        except requests.Timeout as e:
            xbmc.log(f'[Soap4me] Request timeout: {method} {url}', xbmc.LOGERROR)
            raise RemoteError('Request timed out') from e
        except requests.RequestException as e:
            xbmc.log(f'[Soap4me] Request error: {method} {url}: {e}', xbmc.LOGERROR)
            raise RemoteError() from e

        if response.status_code != 200:
            xbmc.log(f'[Soap4me] HTTP {response.status_code}: {method} {url}', xbmc.LOGERROR)
            raise RemoteError(status=response.status_code)

        try:
            return response.json()
        except ValueError as e:
            xbmc.log(f'[Soap4me] Invalid JSON from: {url}', xbmc.LOGERROR)
            raise RemoteError('Invalid response from server', status=response.status_code) from e

    def close(self):
        """Close the session."""
        self._session.close()

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()
