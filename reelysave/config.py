import os

from .instagram import DEFAULT_USER_AGENT


def env_flag(name, default=False):
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


class Config:
    """Settings read from the environment, loaded with ``app.config.from_object``"""

    HOST = os.environ.get('HOST', '0.0.0.0')
    PORT = int(os.environ.get('PORT', 5000))
    DEBUG = env_flag('DEBUG')
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO').upper()

    # Seconds allowed for each upstream request
    STRATEGY_TIMEOUT = float(os.environ.get('STRATEGY_TIMEOUT', 5))
    USER_AGENT = os.environ.get('USER_AGENT', DEFAULT_USER_AGENT)

    CORS_ALLOW_HEADERS = ['authorization', 'x-client-info', 'apikey', 'content-type']
