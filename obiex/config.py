import os

from dotenv import load_dotenv

from .errors import ConfigurationError
from .signing import Credentials

# --- BASE URLS ---
PRODUCTION_BASE_URL = "https://api.obiex.finance"
SANDBOX_BASE_URL = "https://staging.api.obiex.finance"

# --- CACHE ---
# The currency list changes rarely; refresh it once a day.
CURRENCIES_CACHE_KEY = "currencies"
CURRENCIES_CACHE_TTL = 86400

_TRUTHY = {"1", "true", "yes", "on"}


def base_url(sandbox_mode: bool = False) -> str:
    return SANDBOX_BASE_URL if sandbox_mode else PRODUCTION_BASE_URL


def sandbox_mode_from_env() -> bool:
    load_dotenv()
    return os.getenv("OBIEX_SANDBOX_MODE", "false").strip().lower() in _TRUTHY


def credentials_from_env() -> Credentials:
    """Read API credentials from the environment (or a local .env file)."""
    load_dotenv()
    api_key = os.getenv("OBIEX_API_KEY")
    api_secret = os.getenv("OBIEX_API_SECRET")
    missing = [name for name, value in (("OBIEX_API_KEY", api_key), ("OBIEX_API_SECRET", api_secret)) if not value]
    if missing:
        raise ConfigurationError(f"Missing environment variables: {', '.join(missing)}")
    return Credentials(api_key, api_secret)
