# Configuration for storefront flows
#
# Read from the environment (a .env file is honoured by the CLI and by the
# LLM client).  get_settings() re-reads on every call so tests can
# monkeypatch the environment.

import os
from dataclasses import dataclass

# Logging
LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
LOG_DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

# Response cache (off unless FLOW_RESPONSE_CACHE is truthy)
DEFAULT_CACHE_SIZE = 256

_TRUE_VALUES = {'1', 'true', 'yes', 'on'}


@dataclass(frozen=True)
class Settings:
    log_level: str = LOG_LEVEL
    response_cache: bool = False
    cache_size: int = DEFAULT_CACHE_SIZE
    default_model: str = ''


def _env_flag(name: str) -> bool:
    return os.getenv(name, '').strip().lower() in _TRUE_VALUES


def get_settings() -> Settings:
    try:
        cache_size = int(os.getenv('FLOW_RESPONSE_CACHE_SIZE', str(DEFAULT_CACHE_SIZE)))
    except ValueError:
        raise ValueError("FLOW_RESPONSE_CACHE_SIZE must be an integer") from None
    return Settings(
        log_level=os.getenv('LOG_LEVEL', 'INFO').upper(),
        response_cache=_env_flag('FLOW_RESPONSE_CACHE'),
        cache_size=cache_size,
        default_model=os.getenv('INFERENCE_DEFAULT_MODEL', ''),
    )
