"""
Application configuration.

Loads settings from environment variables with sensible defaults.
"""

import os


def _get_int(key: str, default: int) -> int:
    """Get integer from environment variable."""
    value = os.environ.get(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _get_bool(key: str, default: bool) -> bool:
    """Get boolean from environment variable."""
    value = os.environ.get(key)
    if value is None:
        return default
    return value.lower() in ('true', '1', 'yes')


def _get_str(key: str, default: str) -> str:
    """Get string from environment variable."""
    return os.environ.get(key, default)


# =============================================================================
# PROVIDER SETTINGS
# =============================================================================
ESPN_BASE_URL = _get_str('ESPN_BASE_URL', 'https://site.api.espn.com/apis/site/v2/sports')

# Sport path segment, e.g. "soccer"
SPORT = _get_str('SPORT', 'soccer')

# League path segment for scoreboard queries ("all" aggregates every league)
SCOREBOARD_LEAGUE = _get_str('SCOREBOARD_LEAGUE', 'all')

# League path segment for the team directory
TEAM_LEAGUE = _get_str('TEAM_LEAGUE', 'eng.1')

# =============================================================================
# HTTP SETTINGS
# =============================================================================
REQUEST_TIMEOUT_SECONDS = _get_int('REQUEST_TIMEOUT_SECONDS', 30)

USER_AGENT = _get_str(
    'USER_AGENT',
    'Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 '
    '(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36'
)

# Maximum scoreboard pages in flight when crawling a date range
CRAWL_MAX_CONCURRENCY = _get_int('CRAWL_MAX_CONCURRENCY', 4)

# =============================================================================
# DEBUGGING
# =============================================================================
# When enabled, raw provider responses are also written to DEBUG_DUMP_FILE
DEBUG = _get_bool('SHARINGAN_DEBUG', False)
DEBUG_DUMP_FILE = _get_str('DEBUG_DUMP_FILE', 'debug_response.json')

# =============================================================================
# LOGGING
# =============================================================================
LOG_LEVEL = _get_str('LOG_LEVEL', 'WARNING')
