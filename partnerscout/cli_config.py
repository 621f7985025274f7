"""Locate, bootstrap and load the .env file that supplies crawl defaults."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, List, Optional

from .config import ENV_CONCURRENCY, ENV_MAX_DEPTH, ENV_MAX_PAGES, ENV_TIMEOUT

LOGGER = logging.getLogger(__name__)

ENV_FILE_NAME = ".env"

# Shipped inside the package (see package-data in pyproject.toml)
EXAMPLE_ENV_FILE = Path(__file__).with_name(".env.example")

CREATED_MESSAGE = (
    "Created config file at %s from %s. Edit it to change the crawl defaults ("
    + ", ".join((ENV_MAX_DEPTH, ENV_MAX_PAGES, ENV_CONCURRENCY, ENV_TIMEOUT))
    + ")."
)


def env_candidates(cwd: Path, config_env_file: Path) -> List[Path]:
    """Files checked in order; the first existing one wins."""
    return [cwd / ENV_FILE_NAME, config_env_file]


def bootstrap_env_file(
    config_env_file: Path,
    *,
    example_file: Path,
    copy_file: Callable[[Path, Path], str],
    message: str = CREATED_MESSAGE,
) -> bool:
    """Copy ``example_file`` to ``config_env_file``. Returns True on success."""
    if not example_file.is_file():
        LOGGER.warning("Packaged example config is missing: %s", example_file)
        return False
    try:
        config_env_file.parent.mkdir(parents=True, exist_ok=True)
        copy_file(example_file, config_env_file)
    except OSError as exc:
        LOGGER.warning("Could not create %s: %s", config_env_file, exc)
        return False
    LOGGER.info(message, config_env_file, example_file.name)
    return True


def load_config(
    *,
    config_env_file: Path,
    cwd: Path,
    load_env: Callable[[Path], bool],
    copy_file: Callable[[Path, Path], str],
    example_file: Path = EXAMPLE_ENV_FILE,
    message: str = CREATED_MESSAGE,
) -> Optional[Path]:
    """Load crawl defaults from the first .env found.

    Search order is the working directory, then ``config_env_file``
    (``~/.config/partnerscout/.env`` for the CLI). When neither exists the
    user file is created from ``example_file`` and loaded.

    Returns:
        The path that was loaded, or None when no file could be found or created.
    """
    for candidate in env_candidates(cwd, config_env_file):
        if candidate.is_file():
            load_env(candidate)
            LOGGER.debug("Loaded settings from %s", candidate)
            return candidate

    if bootstrap_env_file(
        config_env_file,
        example_file=example_file,
        copy_file=copy_file,
        message=message,
    ):
        load_env(config_env_file)
        return config_env_file
    return None
