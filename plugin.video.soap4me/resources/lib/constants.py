# -*- coding: utf-8 -*-
"""Constants for Soap4me addon"""

# Remote catalog API
SITE_URL = 'https://soap4.me'
API_URL = f'{SITE_URL}/api'
LOGIN_URL = f'{SITE_URL}/login/'
CALLBACK_URL = f'{SITE_URL}/callback/'
ALL_SERIES_URL = f'{API_URL}/soap/'
MY_SERIES_URL = f'{API_URL}/soap/my/'
EPISODES_URL = f'{API_URL}/episodes/{{sid}}/'
SEARCH_URL = f'{API_URL}/search/'
WATCHING_URL = f'{API_URL}/soap/watch/{{sid}}/'
UNWATCHING_URL = f'{API_URL}/soap/unwatch/{{sid}}/'
STREAM_URL = 'https://{server}.soap4.me/{token}/{eid}/{hash}/'
COVER_URL = 'https://covers.soap4.me/soap/big/{sid}.jpg'

# Request headers
USER_AGENT = 'xbmc for soap'
TOKEN_HEADER = 'X-Api-Token'

# Series index scopes
SCOPE_ALL = 'all'
SCOPE_MINE = 'mine'

# Series status values as sent by the API
STATUS_ONGOING = 'ongoing'
STATUS_CLOSED = 'closed'

# Quality rankings (higher is better), used only for fallback ordering
QUALITY_RANKS = {
    '4k': 400,
    '2160p': 400,
    'uhd': 400,
    '1080p': 300,
    'fullhd': 300,
    'fhd': 300,
    '720p': 200,
    'hd': 200,
    '480p': 100,
    'sd': 50,
    '360p': 30,
    '240p': 10
}

# Color codes for Kodi
COLOR_WATCHED = 'dodgerblue'
COLOR_UNWATCHED = 'white'
COLOR_NEW = 'gold'

# Session storage keys (hidden addon settings)
TOKEN_KEY = 'token'
TOKEN_EXPIRES_KEY = 'token_expires'

# Settings defaults
DEFAULT_PREFERRED_QUALITY = '720p'
DEFAULT_MARK_WATCHED_ON_PLAY = True
DEFAULT_SHOW_ALL_SERIES = False
DEFAULT_NOTIFY_ON_LOGOUT = True
DEFAULT_TIMEOUT = 15
DEFAULT_NOTIFICATION_TIMEOUT = 5
