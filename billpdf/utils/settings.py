"""
Process configuration.

Settings are read from the environment (and a .env file, via python-dotenv)
exactly once at startup and passed by reference into the service. Nothing in
the request path reads the environment.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

from dotenv import load_dotenv

DEFAULT_CHROMIUM_PATH = "/usr/bin/chromium-browser"
DEFAULT_PORT = 3000
# 50 MB, leaves room for inline signature/QR image data
DEFAULT_MAX_BODY_BYTES = 52_428_800


@dataclass(frozen=True)
class Settings:
    """
    Immutable service configuration.

    Attributes:
        chromium_path: Path to the Chromium executable driven by the engine
        host: Interface the HTTP server binds to
        port: Port the HTTP server listens on
        max_body_bytes: Upper bound on accepted request bodies
        launch_timeout_s: Bound on starting the engine
        load_timeout_s: Bound on loading the composed document
        rasterize_timeout_s: Bound on producing the PDF
        release_timeout_s: Bound on each teardown step
        cors_origins: Allowed CORS origins
        log_level: Console log level
        logs_path: Directory for file logs (None disables file logging)
    """

    chromium_path: str = DEFAULT_CHROMIUM_PATH
    host: str = "0.0.0.0"
    port: int = DEFAULT_PORT
    max_body_bytes: int = DEFAULT_MAX_BODY_BYTES
    launch_timeout_s: float = 30.0
    load_timeout_s: float = 30.0
    rasterize_timeout_s: float = 30.0
    release_timeout_s: float = 10.0
    cors_origins: Tuple[str, ...] = ("*",)
    log_level: str = "INFO"
    logs_path: Optional[Path] = None


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from e
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {raw!r}")
    return value


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = float(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be a number, got {raw!r}") from e
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {raw!r}")
    return value


def load_settings(dotenv_path: Optional[Path] = None) -> Settings:
    """
    Build Settings from the environment.

    Args:
        dotenv_path: Optional .env file (default: python-dotenv's search)

    Returns:
        Frozen Settings instance

    Raises:
        ValueError: If a numeric variable cannot be parsed
    """
    load_dotenv(dotenv_path)

    chromium_path = (
        os.getenv("CHROMIUM_EXECUTABLE_PATH")
        or os.getenv("PUPPETEER_EXECUTABLE_PATH")
        or DEFAULT_CHROMIUM_PATH
    )
    origins = os.getenv("CORS_ORIGINS", "*")
    logs_path = os.getenv("LOGS_PATH")

    return Settings(
        chromium_path=chromium_path,
        host=os.getenv("HOST", "0.0.0.0"),
        port=_env_int("PORT", DEFAULT_PORT),
        max_body_bytes=_env_int("MAX_BODY_BYTES", DEFAULT_MAX_BODY_BYTES),
        launch_timeout_s=_env_float("ENGINE_LAUNCH_TIMEOUT_S", 30.0),
        load_timeout_s=_env_float("ENGINE_LOAD_TIMEOUT_S", 30.0),
        rasterize_timeout_s=_env_float("ENGINE_RASTERIZE_TIMEOUT_S", 30.0),
        release_timeout_s=_env_float("ENGINE_RELEASE_TIMEOUT_S", 10.0),
        cors_origins=tuple(o.strip() for o in origins.split(",") if o.strip()) or ("*",),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        logs_path=Path(logs_path) if logs_path else None,
    )
