"""Connection settings for the search engine.

Credential pattern:
  - Separate host / port (not combined URL)
  - opensearch-py is used as the HTTP client library

All settings can be overridden via environment variables or by passing
values directly to ``ConnectionConfig``.
"""

import os
from dataclasses import dataclass, fields
from typing import Optional


def _parse_bool(value: str) -> bool:
    normalized = value.strip().lower()
    if normalized in {"1", "true", "t", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "f", "no", "n", "off"}:
        return False
    raise ValueError(f"Invalid boolean value: {value!r}")


@dataclass
class ConnectionConfig:
    """Connection configuration for a single search cluster."""

    host: str = "localhost"
    port: int = 9200
    user: Optional[str] = None
    password: Optional[str] = None
    use_ssl: bool = False
    verify_certs: bool = True
    ssl_show_warn: bool = False
    ca_certs: Optional[str] = None
    timeout: int = 30
    max_retries: int = 0
    retry_on_timeout: bool = False
    http_compress: bool = False

    @property
    def http_auth(self) -> Optional[tuple[str, str]]:
        if self.user and self.password:
            return (self.user, self.password)
        return None

    @property
    def hosts(self) -> list[dict]:
        """Return hosts list in the format expected by opensearch-py."""
        scheme = "https" if self.use_ssl else "http"
        return [{"host": self.host, "port": self.port, "scheme": scheme}]


_STR_ENV = {
    "ES_HOST": "host",
    "ES_USER": "user",
    "ES_PASSWORD": "password",
    "ES_CA_CERTS": "ca_certs",
}
_INT_ENV = {
    "ES_PORT": "port",
    "ES_TIMEOUT": "timeout",
    "ES_MAX_RETRIES": "max_retries",
}
_BOOL_ENV = {
    "ES_USE_SSL": "use_ssl",
    "ES_VERIFY_CERTS": "verify_certs",
    "ES_RETRY_ON_TIMEOUT": "retry_on_timeout",
    "ES_HTTP_COMPRESS": "http_compress",
}


def load_config(**overrides) -> ConnectionConfig:
    """Build a ConnectionConfig with env-var and keyword overrides.

    Resolution order (later wins):
      1. Dataclass defaults
      2. Environment variables (``ES_HOST``, etc.)
      3. Explicit keyword arguments

    Supported env vars:
      - ES_HOST / ES_PORT
      - ES_USER / ES_PASSWORD
      - ES_USE_SSL  ("true"/"false")
      - ES_VERIFY_CERTS  ("true"/"false")
      - ES_CA_CERTS
      - ES_TIMEOUT
      - ES_MAX_RETRIES
      - ES_RETRY_ON_TIMEOUT ("true"/"false")
      - ES_HTTP_COMPRESS ("true"/"false")

    Retries default to 0: the handler surfaces transport failures once.
    """
    cfg = ConnectionConfig()

    # Env-var layer
    for env, attr in _STR_ENV.items():
        value = os.getenv(env)
        if value:
            setattr(cfg, attr, value)

    for env, attr in _INT_ENV.items():
        value = os.getenv(env)
        if value:
            setattr(cfg, attr, int(value))

    for env, attr in _BOOL_ENV.items():
        value = os.getenv(env)
        if value is not None:
            setattr(cfg, attr, _parse_bool(value))

    # Explicit overrides layer
    known = {f.name for f in fields(ConnectionConfig)}
    for key, value in overrides.items():
        if key in known:
            setattr(cfg, key, value)
        else:
            raise TypeError(f"Unknown config key: {key!r}")

    return cfg
