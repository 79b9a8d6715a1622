# -*- coding: utf-8 -*-
"""
Error types for Soap4me addon.

Every failure the catalog core reports is a Soap4meError carrying a
user-facing message. Missing session is not an error; handlers redirect
to the login route instead.
"""


class Soap4meError(Exception):
    """Base class for reported failures."""

    message = 'Unknown error'

    def __init__(self, message=None):
        super().__init__(message or self.message)
        if message:
            self.message = message


class RemoteError(Soap4meError):
    """Transport failure, unexpected status or undecodable body."""

    message = 'Unknown error, please try again later'

    def __init__(self, message=None, status=None):
        super().__init__(message)
        self.status = status


class RemoteRejection(Soap4meError):
    """Well-formed response whose ``ok`` field is false."""

    message = 'Request rejected by server'

    def __init__(self, message=None, payload=None):
        super().__init__(message)
        self.payload = payload or {}


class LoginRejected(RemoteRejection):
    message = 'Incorrect login or password'


class StreamUnavailable(RemoteRejection):
    message = 'Stream link is unavailable'


class LookupInconsistency(Soap4meError):
    """Requested season, episode or variant id is not in the cached tree."""

    message = 'Requested item was not found'


class NavigationInFlight(RuntimeError):
    """Raised when a navigation is dispatched while another one runs."""
