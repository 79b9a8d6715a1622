from resources.lib.globals import g

from conftest import FakeAddon


def test_init_reads_path_and_handle():
    g.init(['plugin://plugin.video.soap4me/series/42/', '7', '?q=lost'], addon=FakeAddon())

    assert g.PATH == '/series/42/'
    assert g.HANDLE == 7
    assert g.ADDON_NAME == 'Soap4me'


def test_init_without_handle_uses_root_path():
    g.init(['plugin://plugin.video.soap4me'], addon=FakeAddon())

    assert g.PATH == '/'
    assert g.HANDLE == -1


def test_get_url_prefixes_addon_id():
    g.init(['plugin://plugin.video.soap4me/', '1', ''], addon=FakeAddon())

    assert g.get_url('/login') == 'plugin://plugin.video.soap4me/login'
    assert g.get_url('search') == 'plugin://plugin.video.soap4me/search'
