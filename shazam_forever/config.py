"""Configuration: env, device platform credentials, batching and recognition settings."""
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Base paths (project root = parent of shazam_forever package)
BASE_DIR = Path(__file__).resolve().parent.parent

# Load .env from project root so PACKAGE_NAME etc. are set
load_dotenv(BASE_DIR / ".env")

APP_TITLE = "Shazam Forever"

# API
API_HOST = os.getenv("SHAZAM_HOST", "0.0.0.0")

# Audio from the glasses: 16-bit little-endian mono PCM
AUDIO_SAMPLE_RATE = int(os.getenv("AUDIO_SAMPLE_RATE", "16000"))

# Batching and recognition
BATCH_INTERVAL_SEC = float(os.getenv("BATCH_INTERVAL_SEC", "10"))
DUPLICATE_COOLDOWN_SEC = float(os.getenv("DUPLICATE_COOLDOWN_SEC", "60"))
HISTORY_LIMIT = int(os.getenv("HISTORY_LIMIT", "10"))
RECOGNITION_TIMEOUT_SEC = float(os.getenv("RECOGNITION_TIMEOUT_SEC", "8"))
UI_REFRESH_EVERY_CHUNKS = 10

# Spotify (optional; client credentials, used only to look up missing track links)
SPOTIFY_CLIENT_ID = os.getenv("SPOTIFY_CLIENT_ID", "")
SPOTIFY_CLIENT_SECRET = os.getenv("SPOTIFY_CLIENT_SECRET", "")


class ConfigError(RuntimeError):
    """Required configuration is missing or invalid."""


@dataclass(frozen=True)
class Settings:
    """Values the server cannot start without."""
    package_name: str
    api_key: str
    port: int


def _require(name: str) -> str:
    value = os.getenv(name, "").strip()
    if not value:
        raise ConfigError(f"{name} is not set in .env file")
    return value


def load_settings() -> Settings:
    """Read required settings from the environment. Raises ConfigError if any is missing."""
    package_name = _require("PACKAGE_NAME")
    api_key = _require("MENTRAOS_API_KEY")
    raw_port = _require("PORT")
    try:
        port = int(raw_port)
    except ValueError:
        raise ConfigError(f"PORT must be an integer, got {raw_port!r}") from None
    return Settings(package_name=package_name, api_key=api_key, port=port)
