from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path

from dotenv import find_dotenv, load_dotenv

logger = logging.getLogger(__name__)


def _project_root() -> Path | None:
    here = Path(__file__).resolve()
    for parent in here.parents:
        if (parent / "pyproject.toml").exists():
            return parent
    return None


@lru_cache(maxsize=1)
def init_env() -> None:
    """
    Load BTCE_* settings from a .env file without overriding the process env.

    - Source checkout: {root}/.env, root being the directory holding pyproject.toml.
    - Installed package: the nearest .env found from the working directory upwards.
    - Idempotent and safe to call multiple times.
    """
    root = _project_root()
    env_path = root / ".env" if root is not None else None
    if env_path is None or not env_path.exists():
        found = find_dotenv(usecwd=True)
        env_path = Path(found) if found else None

    if env_path is not None and env_path.exists():
        load_dotenv(env_path, override=False)
        logger.info("Loaded environment from %s", env_path)
    else:
        logger.info(".env file not found; using existing process env only")
