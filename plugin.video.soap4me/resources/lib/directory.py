# -*- coding: utf-8 -*-
"""
Render sink and dialogs for Soap4me addon.

Handlers only talk to RenderSink; KodiDirectory turns those calls into
xbmcplugin directory listings, redirects and resolved playback.
"""
from contextlib import contextmanager

import xbmc
import xbmcgui
import xbmcplugin

from . import constants

CONTENT_TYPES = {
    'directory': 'videos',
    'items': 'tvshows',
    'grid': 'tvshows',
    'video': 'episodes',
}


class RenderSink:
    """
    Base render sink.

    Once redirect(), show_error() or play() has been called the sink is
    finished and further rendering calls are ignored.
    """

    def __init__(self):
        self.finished = False
        self.loading_flag = False

    def set_metadata(self, title, icon=None):
        raise NotImplementedError

    def set_content(self, content_type):
        raise NotImplementedError

    def set_total(self, count):
        raise NotImplementedError

    def add_separator(self, title):
        raise NotImplementedError

    def add_item(self, path, kind, **fields):
        raise NotImplementedError

    def _on_loading(self, flag):
        pass

    def set_loading(self, flag):
        self.loading_flag = bool(flag)
        self._on_loading(self.loading_flag)

    @contextmanager
    def loading(self):
        """Set the loading flag around a blocking call."""
        self.set_loading(True)
        try:
            yield
        finally:
            self.set_loading(False)

    def redirect(self, path):
        raise NotImplementedError

    def show_error(self, error):
        raise NotImplementedError

    def play(self, descriptor):
        raise NotImplementedError

    def finish(self):
        self.finished = True


class KodiDirectory(RenderSink):
    """Render sink backed by a Kodi plugin handle."""

    def __init__(self, handle, get_url, addon_name='Soap4me', playable=False):
        """
        Args:
            handle: Plugin handle from sys.argv[1]
            get_url: Callable turning a route path into a plugin URL
            addon_name: Heading for notifications
            playable: True when the invoked path is a playable item
        """
        super().__init__()
        self._handle = handle
        self._get_url = get_url
        self._addon_name = addon_name
        self._playable = playable
        self._total = 0
        self._icon = None

    def set_metadata(self, title, icon=None):
        if self.finished:
            return
        self._icon = icon
        xbmcplugin.setPluginCategory(self._handle, title)

    def set_content(self, content_type):
        if self.finished:
            return
        xbmcplugin.setContent(self._handle, CONTENT_TYPES.get(content_type, 'videos'))

    def set_total(self, count):
        self._total = count

    def add_separator(self, title):
        if self.finished:
            return
        list_item = xbmcgui.ListItem(label=f'[B]{title}[/B]')
        list_item.setProperty('IsPlayable', 'false')
        xbmcplugin.addDirectoryItem(self._handle, '', list_item, False, self._total)

    def add_item(self, path, kind, **fields):
        if self.finished:
            return
        title = fields.get('title', '')
        list_item = xbmcgui.ListItem(label=title)
        info_tag = list_item.getVideoInfoTag()
        info_tag.setTitle(title)
        if fields.get('description'):
            info_tag.setPlot(fields['description'])
        if fields.get('year'):
            info_tag.setYear(int(fields['year']))
        if fields.get('rating') is not None:
            info_tag.setRating(float(fields['rating']))
        if fields.get('season') is not None:
            info_tag.setSeason(int(fields['season']))
        if fields.get('episode') is not None:
            info_tag.setEpisode(int(fields['episode']))
            info_tag.setMediaType('episode')
        if fields.get('watched'):
            info_tag.setPlaycount(1)

        icon = fields.get('icon') or self._icon
        if icon:
            list_item.setArt({'icon': icon, 'thumb': icon, 'poster': icon})

        context_menu = fields.get('context_menu') or []
        if context_menu:
            list_item.addContextMenuItems([
                (label, f'RunPlugin({self._get_url(target)})') for label, target in context_menu
            ])

        is_folder = kind != 'video'
        if not is_folder:
            list_item.setProperty('IsPlayable', 'true')

        xbmcplugin.addDirectoryItem(self._handle, self._get_url(path), list_item, is_folder, self._total)

    def _on_loading(self, flag):
        if flag:
            xbmc.executebuiltin('ActivateWindow(busydialognocancel)')
        else:
            xbmc.executebuiltin('Dialog.Close(busydialognocancel)')

    def redirect(self, path):
        if self.finished:
            return
        xbmc.log(f'[Soap4me] Redirecting to {path}', xbmc.LOGDEBUG)
        self._end(succeeded=False)
        xbmc.executebuiltin(f'Container.Update({self._get_url(path)},replace)')

    def show_error(self, error):
        if self.finished:
            return
        message = getattr(error, 'message', None) or str(error)
        xbmcgui.Dialog().notification(self._addon_name, message, xbmcgui.NOTIFICATION_ERROR)
        self._end(succeeded=False)

    def play(self, descriptor):
        if self.finished:
            return
        list_item = xbmcgui.ListItem(label=descriptor.title, path=descriptor.url)
        list_item.getVideoInfoTag().setTitle(descriptor.title)
        xbmcplugin.setResolvedUrl(self._handle, True, list_item)
        self.finished = True

    def _end(self, succeeded):
        # RunPlugin invocations (context menu, settings actions) have no handle
        if self._handle >= 0:
            if self._playable:
                xbmcplugin.setResolvedUrl(self._handle, False, xbmcgui.ListItem())
            else:
                xbmcplugin.endOfDirectory(self._handle, succeeded=succeeded)
        self.finished = True

    def finish(self):
        if self.finished:
            return
        self._end(succeeded=True)


class Credentials:
    def __init__(self, username='', password='', rejected=False):
        self.username = username
        self.password = password
        self.rejected = rejected


class KodiDialogs:
    """Credential prompt, search keyboard and notifications."""

    def __init__(self, addon_name='Soap4me', icon=None):
        self._addon_name = addon_name
        self._icon = icon or xbmcgui.NOTIFICATION_INFO

    def get_credentials(self, title, message=None):
        """
        Ask for login and password.

        Returns:
            Credentials; rejected is True when either input was cancelled
        """
        dialog = xbmcgui.Dialog()
        if message:
            dialog.ok(title, message)

        username = dialog.input(f'{title}: login', type=xbmcgui.INPUT_ALPHANUM)
        if not username:
            return Credentials(rejected=True)

        password = dialog.input(f'{title}: password', type=xbmcgui.INPUT_ALPHANUM,
                                option=xbmcgui.ALPHANUM_HIDE_INPUT)
        if not password:
            return Credentials(username=username, rejected=True)

        return Credentials(username, password)

    def input_query(self, title='Search'):
        """Return the entered search text, or None when cancelled."""
        query = xbmcgui.Dialog().input(title, type=xbmcgui.INPUT_ALPHANUM)
        return query.strip() if query and query.strip() else None

    def notify(self, message, timeout=constants.DEFAULT_NOTIFICATION_TIMEOUT):
        xbmcgui.Dialog().notification(self._addon_name, message, self._icon, timeout * 1000)
