import os


def normalize_api_base(raw_base: str = None) -> str:
    """Привести адрес бэкенда к виду .../api"""
    if not raw_base or not raw_base.strip():
        return "http://localhost:8080/api"
    trimmed = raw_base.strip().rstrip("/")
    if trimmed.endswith("/api"):
        return trimmed
    return f"{trimmed}/api"


API_BASE = normalize_api_base(os.getenv("KINO_API_URL"))
REQUEST_TIMEOUT = float(os.getenv("KINO_REQUEST_TIMEOUT", "10"))

STATE_FILE = os.getenv("KINO_STATE_FILE", "data/kino_state.json")
LOG_DIR = os.getenv("KINO_LOG_DIR", "logs")
LOG_LEVEL = os.getenv("KINO_LOG_LEVEL", "INFO")
DOWNLOAD_DIR = os.getenv("KINO_DOWNLOAD_DIR", "downloads")

# Ключи локального хранилища
TOKEN_KEY = "kino_token"
LANG_KEY = "kino_lang"
THEME_KEY = "kino_theme"

DEFAULT_LANG = "ru"
DEFAULT_THEME = "light"
