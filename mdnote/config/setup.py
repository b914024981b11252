import os

from cachetools import cached
from dotenv import find_dotenv, load_dotenv

from mdnote.config.logger import get_logger, logging_setup
from mdnote.config.settings import (
    ENV_DEFAULT_DIRECTION,
    ENV_LOG_LEVEL,
    global_settings,
    LogLevel,
    update_global_settings,
)
from mdnote.errors import InvalidParam
from mdnote.model.note_model import Direction

log = get_logger(__name__)


@cached(cache={})
def setup():
    """
    One-time setup of environment overrides and logging. Idempotent.
    """
    dotenv_path = env_setup()

    logging_setup()

    if dotenv_path:
        log.info("Loaded environment from: %s", dotenv_path)


def env_setup() -> str | None:
    """
    Load a `.env` file, if any, and apply environment overrides to global settings.
    """
    dotenv_path = find_dotenv(usecwd=True)
    if dotenv_path:
        load_dotenv(dotenv_path)

    direction_str = os.environ.get(ENV_DEFAULT_DIRECTION)
    level_str = os.environ.get(ENV_LOG_LEVEL)

    with update_global_settings() as settings:
        if direction_str:
            try:
                settings.default_direction = Direction(direction_str.strip().lower())
            except ValueError:
                raise InvalidParam(ENV_DEFAULT_DIRECTION, direction_str)
        if level_str:
            try:
                settings.console_log_level = LogLevel.parse(level_str)
            except ValueError:
                raise InvalidParam(ENV_LOG_LEVEL, level_str)

    return dotenv_path or None


## Tests


def test_env_setup(monkeypatch):
    monkeypatch.delenv(ENV_LOG_LEVEL, raising=False)
    original = global_settings().default_direction
    try:
        monkeypatch.setenv(ENV_DEFAULT_DIRECTION, " LTR ")
        env_setup()
        assert global_settings().default_direction == Direction.ltr

        monkeypatch.setenv(ENV_DEFAULT_DIRECTION, "sideways")
        try:
            env_setup()
            assert False
        except InvalidParam as e:
            assert ENV_DEFAULT_DIRECTION in str(e)
    finally:
        with update_global_settings() as settings:
            settings.default_direction = original
