import os
from dotenv import load_dotenv

load_dotenv()

DEFAULT_DATA_FILE = "companion_proxy_data.json"
DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 8080
DEFAULT_TIMEOUT_S = 10.0
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Read at call time so .env / test overrides apply after import.


def data_file() -> str:
    return os.getenv("COMPANION_DATA_FILE", DEFAULT_DATA_FILE)


def dispatch_timeout() -> float:
    return float(os.getenv("COMPANION_TIMEOUT", DEFAULT_TIMEOUT_S))


def server_host() -> str:
    return os.getenv("COMPANION_HOST", DEFAULT_HOST)


def server_port() -> int:
    return int(os.getenv("COMPANION_PORT", DEFAULT_PORT))


def log_level(default: str = "INFO") -> str:
    return os.getenv("COMPANION_LOG_LEVEL", default).upper()


def audit_dir() -> str:
    return os.getenv("COMPANION_AUDIT_DIR", "audit")
