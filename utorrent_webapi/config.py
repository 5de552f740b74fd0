import os
import tempfile
import dotenv


dotenv.load_dotenv()


# Defaults
DEBUG = False
VERBOSE = False
LOG_PATH = "utorrent_webapi.log"
LOG_LEVEL = "DEBUG" if DEBUG else "INFO"
LOG_ROTATION = "1 week"
LOG_RETENTION = "1 month"

# uTorrent WebUI defaults
UTORRENT_SCHEME = "http"
UTORRENT_HOST = "localhost"
UTORRENT_PORT = 8080
UTORRENT_USERNAME = "admin"
UTORRENT_PASSWORD = ""
UTORRENT_TIMEOUT = 10


def _as_bool(value):
    return str(value).lower() in ("1", "true", "yes", "on")


class Config:
    DEBUG = _as_bool(os.getenv("DEBUG", DEBUG))
    VERBOSE = _as_bool(os.getenv("VERBOSE", VERBOSE))

    LOG_PATH = os.getenv("LOG_PATH", LOG_PATH)
    LOG_LEVEL = os.getenv("LOG_LEVEL", LOG_LEVEL)
    LOG_ROTATION = os.getenv("LOG_ROTATION", LOG_ROTATION)
    LOG_RETENTION = os.getenv("LOG_RETENTION", LOG_RETENTION)

    # uTorrent WebUI connection
    UTORRENT_SCHEME = os.getenv("UTORRENT_SCHEME", UTORRENT_SCHEME)
    UTORRENT_HOST = os.getenv("UTORRENT_HOST", UTORRENT_HOST)
    UTORRENT_PORT = int(os.getenv("UTORRENT_PORT", UTORRENT_PORT))
    UTORRENT_USERNAME = os.getenv("UTORRENT_USERNAME", UTORRENT_USERNAME)
    UTORRENT_PASSWORD = os.getenv("UTORRENT_PASSWORD", UTORRENT_PASSWORD)
    UTORRENT_TIMEOUT = float(os.getenv("UTORRENT_TIMEOUT", UTORRENT_TIMEOUT))


class TestConfig:
    LOG_PATH = tempfile.NamedTemporaryFile().name

    UTORRENT_SCHEME = "http"
    UTORRENT_HOST = "utorrent.test"
    UTORRENT_PORT = 8080
    UTORRENT_USERNAME = "admin"
    UTORRENT_PASSWORD = "secret"
    UTORRENT_TIMEOUT = 5
