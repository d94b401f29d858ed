"""Load and validate environment variables. Uses python-dotenv.

Side-effect free except for loading `.env`.
Callers use the accessor functions below rather than reading `os.environ`
directly.
"""

from pathlib import Path

from dotenv import load_dotenv
import os


def _project_root() -> Path:
    """Resolve project root (the directory holding `storefront/`)."""
    return Path(__file__).resolve().parent.parent.parent


def load_config() -> None:
    """
    Load .env from project root. Idempotent; safe to call multiple times.
    Uses override=True to ensure .env values take precedence over existing env vars.
    """
    env_path = _project_root() / ".env"
    load_dotenv(env_path, override=True)


def get_optional(key: str, default: str = "") -> str:
    """Get optional env var; return default if missing or empty."""
    load_config()
    val = os.getenv(key, "").strip()
    return val if val else default


def get_optional_int(key: str, default: int) -> int:
    """Get optional env var as int; return default if missing or invalid."""
    load_config()
    raw = os.getenv(key, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


# --- Public config accessors ---

def api_base_url() -> str:
    """Optional: REST API root, including the `/api` prefix. Trailing slash is dropped."""
    return get_optional("STOREFRONT_API_URL", "http://localhost:5000/api").rstrip("/")


def request_timeout_ms() -> int:
    """Optional: per-request timeout budget in milliseconds. Default 10000."""
    return get_optional_int("STOREFRONT_REQUEST_TIMEOUT_MS", 10_000)


def retry_max_attempts() -> int:
    """Optional: attempts made by the retry wrapper, first try included. Default 3."""
    return max(1, get_optional_int("STOREFRONT_RETRY_MAX_ATTEMPTS", 3))


def retry_base_delay_ms() -> int:
    """Optional: delay before the first retry in milliseconds. Default 1000."""
    return get_optional_int("STOREFRONT_RETRY_BASE_DELAY_MS", 1000)


def batch_concurrency() -> int:
    """Optional: window size for batched requests. Default 3."""
    return max(1, get_optional_int("STOREFRONT_BATCH_CONCURRENCY", 3))


def sync_interval_seconds() -> int:
    """Optional: period of the background sync job. Default 5 minutes."""
    return get_optional_int("STOREFRONT_SYNC_INTERVAL_SECONDS", 5 * 60)


def products_stale_seconds() -> int:
    """Optional: max age of the cached product list. Default 10 minutes."""
    return get_optional_int("STOREFRONT_PRODUCTS_STALE_SECONDS", 10 * 60)


def orders_stale_seconds() -> int:
    """Optional: max age of the cached order list. Default 2 minutes."""
    return get_optional_int("STOREFRONT_ORDERS_STALE_SECONDS", 2 * 60)


def inventory_stale_seconds() -> int:
    """Optional: max age of the cached inventory list. Default 5 minutes."""
    return get_optional_int("STOREFRONT_INVENTORY_STALE_SECONDS", 5 * 60)


def storage_dir() -> Path:
    """Optional: directory backing durable local storage. Default data/storage/."""
    raw = get_optional("STOREFRONT_STORAGE_DIR", "")
    if raw:
        return Path(raw).expanduser()
    return _project_root() / "data" / "storage"


def log_level() -> str:
    """Optional: logging level name. Default INFO."""
    return get_optional("STOREFRONT_LOG_LEVEL", "INFO").upper()


def log_file() -> Path | None:
    """Optional: log file path. Logs go to stderr only when unset."""
    val = get_optional("STOREFRONT_LOG_FILE", "")
    return Path(val) if val else None


def project_root() -> Path:
    """Project root directory."""
    return _project_root()
