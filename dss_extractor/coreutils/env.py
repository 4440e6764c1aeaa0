from dotenv import load_dotenv
import os

load_dotenv()  # take DSS_* settings from .env

DSS_USERNAME_VAR = "DSS_USERNAME"
DSS_PASSWORD_VAR = "DSS_PASSWORD"


def env_get(key: str, default: str | None = None) -> str | None:
    """Get environment variable or return default."""
    return os.getenv(key, default)


def env_credentials() -> tuple[str, str]:
    """DSS username and password from the environment ('' when unset)."""
    return env_get(DSS_USERNAME_VAR, "") or "", env_get(DSS_PASSWORD_VAR, "") or ""
