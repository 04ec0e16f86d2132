"""Adaptor configuration loaded from environment variables."""
from pydantic_settings import BaseSettings, SettingsConfigDict

SRC_ENV_VAR = "FSADAPTOR_SRC"


class Settings(BaseSettings):
    """Adaptor configuration loaded from environment variables.

    Attributes:
        src: Filesystem root path to serve documents from.
        host: Bind address for the HTTP server.
        port: Port number for the HTTP server.
        debug: Enable debug logging and API documentation.
        json_logs: Emit JSON log lines instead of console output.
        key: API key for authenticating requests. Empty disables auth.
        shutdown_timeout: Seconds to wait for graceful shutdown.
        base_url: Public scheme and authority used in listing links.
            Empty produces root-relative links.
        spool_max_bytes: Bytes of response body kept in memory before
            spilling to a temporary file.
        chunk_size: Bytes per chunk when streaming a response body.
    """

    model_config = SettingsConfigDict(
        env_prefix="FSADAPTOR_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    src: str = ""
    host: str = "127.0.0.1"
    port: int = 5678
    debug: bool = False
    json_logs: bool = True
    key: str = ""
    shutdown_timeout: float = 30.0
    base_url: str = ""

    spool_max_bytes: int = 1024 * 1024
    chunk_size: int = 64 * 1024
