"""Runtime settings for rpncalc, read from the environment and an optional .env file."""

import logging
import os
from dataclasses import dataclass

from dotenv import find_dotenv, load_dotenv

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

DEFAULT_HISTORY_FILE = os.path.expanduser("~/.rpncalc_history")
DEFAULT_PROMPT = "Enter an expression: "


@dataclass
class Settings:
    log_level: str = "WARNING"
    history_file: str = DEFAULT_HISTORY_FILE
    host: str = "127.0.0.1"
    port: int = 8000
    prompt: str = DEFAULT_PROMPT


def _read_port(raw: str) -> int:
    try:
        port = int(raw)
    except ValueError:
        raise ValueError(f"RPNCALC_PORT must be an integer, got {raw!r}")
    if not 0 < port < 65536:
        raise ValueError(f"RPNCALC_PORT must be between 1 and 65535, got {port}")
    return port


def load_settings(dotenv: bool = True) -> Settings:
    """
    Build Settings from RPNCALC_* environment variables.

    Args:
        dotenv: Load a .env file from the working directory first. Variables
            already present in the environment take precedence.

    Returns:
        Settings with defaults for any variable that is not set.
    """
    if dotenv:
        load_dotenv(find_dotenv(usecwd=True))

    defaults = Settings()
    return Settings(
        log_level=os.getenv("RPNCALC_LOG_LEVEL", defaults.log_level).upper(),
        history_file=os.path.expanduser(os.getenv("RPNCALC_HISTORY_FILE", defaults.history_file)),
        host=os.getenv("RPNCALC_HOST", defaults.host),
        port=_read_port(os.getenv("RPNCALC_PORT", str(defaults.port))),
        prompt=os.getenv("RPNCALC_PROMPT", defaults.prompt),
    )


def configure_logging(level: str) -> None:
    """Configure root logging once for the process."""
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
