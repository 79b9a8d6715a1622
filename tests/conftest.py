import json
import os
from unittest.mock import MagicMock, patch
from urllib.parse import urlparse

import pytest

from resources.lib import constants, handlers  # noqa: F401
from resources.lib.context import PluginContext
from resources.lib.directory import Credentials, RenderSink
from resources.lib.network import RequestSession
from resources.lib.router import dispatch

FAR_FUTURE_MILLIS = '4102444800000'  # 2100-01-01


class FakeAddon:
    """Addon settings kept in a dict."""

    def __init__(self, settings=None):
        self.settings = dict(settings or {})

    def getSetting(self, setting_id):
        return self.settings.get(setting_id, '')

    def setSetting(self, setting_id, value):
        self.settings[setting_id] = value

    def getAddonInfo(self, key):
        return {'id': 'plugin.video.soap4me', 'name': 'Soap4me', 'icon': 'icon.png'}.get(key, '')


class RecordingSink(RenderSink):
    """Render sink that records every call."""

    def __init__(self):
        super().__init__()
        self.metadata = None
        self.content = None
        self.total = None
        self.entries = []
        self.redirects = []
        self.errors = []
        self.played = []
        self.loading_history = []

    @property
    def items(self):
        return [entry for entry in self.entries if entry['kind'] != 'separator']

    @property
    def separators(self):
        return [entry['title'] for entry in self.entries if entry['kind'] == 'separator']

    def set_metadata(self, title, icon=None):
        self.metadata = {'title': title, 'icon': icon}

    def set_content(self, content_type):
        self.content = content_type

    def set_total(self, count):
        self.total = count

    def add_separator(self, title):
        if not self.finished:
            self.entries.append({'kind': 'separator', 'title': title})

    def add_item(self, path, kind, **fields):
        if not self.finished:
            self.entries.append(dict(fields, path=path, kind=kind))

    def _on_loading(self, flag):
        self.loading_history.append(flag)

    def redirect(self, path):
        if not self.finished:
            self.redirects.append(path)
            self.finished = True

    def show_error(self, error):
        if not self.finished:
            self.errors.append(error)
            self.finished = True

    def play(self, descriptor):
        if not self.finished:
            self.played.append(descriptor)
            self.finished = True


class FakeDialogs:
    def __init__(self, credentials=None, query=None):
        self.credentials = credentials or Credentials(rejected=True)
        self.query = query
        self.notifications = []

    def get_credentials(self, title, message=None):
        return self.credentials

    def input_query(self, title='Search'):
        return self.query

    def notify(self, message, timeout=constants.DEFAULT_NOTIFICATION_TIMEOUT):
        self.notifications.append(message)


def make_response(status=200, payload=None, text=None):
    response = MagicMock()
    response.status_code = status
    if text is not None:
        response.json.side_effect = json.JSONDecodeError('Expecting value', text, 0)
    else:
        response.json.return_value = payload
    return response


class FakeApi:
    """
    Stands in for the soap4.me server behind a mocked requests.Session.
    Routes are keyed by (method, url path) and hold responses.
    """

    def __init__(self):
        self.routes = {}
        self.calls = []
        self.session = MagicMock()
        self.session.request.side_effect = self.handle

    def on(self, method, url, payload=None, status=200):
        self.routes[(method, urlparse(url).path)] = make_response(status, payload)

    def handle(self, method, url, headers=None, **kwargs):
        self.calls.append({'method': method, 'url': url, 'headers': headers or {}, **kwargs})
        key = (method, urlparse(url).path)
        if key not in self.routes:
            return make_response(404, {'ok': 0})
        return self.routes[key]

    def called(self, method, url):
        path = urlparse(url).path
        return [call for call in self.calls
                if call['method'] == method and urlparse(call['url']).path == path]


def series_record(sid, title, watching=1, unwatched=0, status=0, **extra):
    record = {'sid': str(sid), 'title': title, 'description': f'{title} plot',
              'watching': watching, 'unwatched': unwatched, 'status': str(status)}
    record.update(extra)
    return record


def episode_record(eid, season, episode, quality, season_id=None, sid='42', **extra):
    record = {'eid': str(eid), 'sid': sid, 'season': str(season), 'episode': str(episode),
              'season_id': str(season_id if season_id is not None else season * 10),
              'quality': quality, 'hash': f'h{eid}', 'title_en': f'Episode {episode}',
              'watched': 0}
    record.update(extra)
    return record


@pytest.fixture
def addon():
    return FakeAddon({
        constants.TOKEN_KEY: 'abc',
        constants.TOKEN_EXPIRES_KEY: FAR_FUTURE_MILLIS,
        'preferred_quality': '720p',
        'mark_watched_on_play': 'true',
    })


@pytest.fixture
def api():
    return FakeApi()


@pytest.fixture
def sink():
    return RecordingSink()


@pytest.fixture
def dialogs():
    return FakeDialogs()


@pytest.fixture(autouse=True)
def vfs():
    """Kodi file functions backed by the real filesystem."""
    fake = MagicMock()
    fake.exists.side_effect = os.path.exists
    fake.mkdirs.side_effect = lambda path: os.makedirs(path, exist_ok=True) or True
    fake.listdir.side_effect = lambda path: ([], sorted(os.listdir(path)))
    fake.delete.side_effect = lambda path: os.remove(path) or True
    fake.translatePath.side_effect = lambda path: path
    with patch('resources.lib.cache.xbmcvfs', fake):
        yield fake


@pytest.fixture
def cache_dir(tmp_path):
    return str(tmp_path / 'cache')


@pytest.fixture
def ctx(addon, api, sink, dialogs, cache_dir):
    context = PluginContext.create(addon, dialogs, sink=sink,
                                   http=RequestSession(session=api.session), cache_dir=cache_dir)
    yield context
    context.close()


@pytest.fixture
def navigate(addon, api, dialogs, cache_dir):
    """
    Run one navigation the way Kodi does: a fresh context per path,
    closed afterwards. Returns the sink it rendered into.
    """
    def run(path):
        sink = RecordingSink()
        context = PluginContext.create(addon, dialogs, sink=sink,
                                       http=RequestSession(session=api.session), cache_dir=cache_dir)
        try:
            dispatch(context, path)
        finally:
            context.close()
        return sink
    return run
