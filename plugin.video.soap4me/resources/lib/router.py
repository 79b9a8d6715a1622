# -*- coding: utf-8 -*-
"""
Route dispatcher for Soap4me addon.
Uses a registry keyed by Route instead of if/elif chains.
"""
import threading
import xbmc

from . import routes
from .errors import NavigationInFlight, Soap4meError


class RouteRegistry:
    """
    Registry of route handlers.

    Dispatch matches the path, then calls the bound handler with the
    plugin context and the captured parameters. Only one navigation
    runs at a time.
    """

    def __init__(self):
        """Initialize route registry."""
        self._handlers = {}
        self._default_route = None
        self._in_flight = threading.Lock()

    def register(self, route, handler, description=None):
        """
        Register a route handler.

        Args:
            route: routes.Route member
            handler: Function called as handler(ctx, **params)
            description: Optional description for debugging
        """
        self._handlers[route] = {
            'handler': handler,
            'description': description or route.value
        }

    def register_default(self, route):
        """Route used when a path matches nothing."""
        self._default_route = route

    def route(self, route, description=None):
        """
        Decorator for registering route handlers.

        Usage:
            @registry.route(Route.SERIES)
            def series(ctx, sid):
                ...
        """
        def decorator(func):
            self.register(route, func, description)
            return func
        return decorator

    def dispatch(self, ctx, path):
        """
        Dispatch a navigation path.

        Args:
            ctx: PluginContext with the sink for this navigation
            path: Plugin path, e.g. '/series/42/season/7'

        Returns:
            Result from the handler

        Raises:
            NavigationInFlight: when another navigation is still running
        """
        if not self._in_flight.acquire(blocking=False):
            raise NavigationInFlight(f'Navigation in progress, rejected {path}')

        try:
            route, params = routes.match(path)
            if route is None or route not in self._handlers:
                xbmc.log(f'[Soap4me] Unknown path: {path}', xbmc.LOGWARNING)
                if self._default_route is None:
                    return None
                route, params = self._default_route, {}

            handler_info = self._handlers[route]
            xbmc.log(f'[Soap4me] Dispatching {route.value} {params}', xbmc.LOGDEBUG)
            try:
                return handler_info['handler'](ctx, **params)
            except Soap4meError as e:
                xbmc.log(f'[Soap4me] Route error ({route.value}): {e}', xbmc.LOGERROR)
                ctx.sink.show_error(e)
                return None
            except Exception as e:
                xbmc.log(f'[Soap4me] Route crashed ({route.value}): {e}', xbmc.LOGERROR)
                raise
        finally:
            self._in_flight.release()


# Global registry instance
_registry = None


def get_router():
    """Get global RouteRegistry instance."""
    global _registry
    if _registry is None:
        _registry = RouteRegistry()
    return _registry


def route(route_id, description=None):
    """Decorator for registering handlers with the global registry."""
    return get_router().route(route_id, description)


def dispatch(ctx, path):
    """Dispatch a path using the global registry."""
    return get_router().dispatch(ctx, path)
