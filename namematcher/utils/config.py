"""Configuration for the name matcher service."""

from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, Mapping, Optional
import json
import logging
import os

from ..core.models import Environment

logger = logging.getLogger(__name__)

# Environment variable overrides
ENV_ENVIRONMENT = "NAMEMATCHER_ENV"
ENV_DB_PATH = "NAMEMATCHER_DB"
ENV_PORT = "NAMEMATCHER_PORT"


@dataclass
class SSLConfig:
    """TLS settings for the HTTP server."""

    enabled: bool = False
    cert_dir: Path = field(default_factory=lambda: Path("cert"))
    certfile: Optional[str] = None
    keyfile: Optional[str] = None
    bundle: Optional[str] = None  # CA chain, optional

    # Hosts matching this pattern use the certificates in cert_dir;
    # every other host falls back to the self-signed pair below
    domain_pattern: Optional[str] = None
    fallback_certfile: Path = field(
        default_factory=lambda: Path("/etc/pki/tls/certs/localhost.crt"))
    fallback_keyfile: Path = field(
        default_factory=lambda: Path("/etc/pki/tls/private/localhost.key"))


@dataclass
class NameMatcherConfig:
    """Configuration for the name matcher service."""

    environment: Environment = Environment.DEVELOPMENT

    # Persistent store
    db_path: Path = field(default_factory=lambda: Path("data/names.db"))
    store_timeout: float = 5.0  # seconds per store call
    ready_timeout: float = 30.0  # seconds for the initial refresh

    # HTTP server
    host: str = "0.0.0.0"
    port: int = 3500
    ssl: SSLConfig = field(default_factory=SSLConfig)
    # Exposes POST /api/admin/refresh; keep off on public listeners
    admin_enabled: bool = False

    # Tier C (spelling-only) Jaro-Winkler threshold
    orthographic_threshold: float = 0.82

    def __post_init__(self):
        """Coerce values read from JSON or the environment."""
        if isinstance(self.environment, str):
            self.environment = Environment.from_name(self.environment)
        self.db_path = Path(self.db_path)
        self.port = int(self.port)
        self.store_timeout = float(self.store_timeout)
        self.ready_timeout = float(self.ready_timeout)
        self.orthographic_threshold = float(self.orthographic_threshold)
        if not isinstance(self.admin_enabled, bool):
            raise ValueError(f"admin_enabled must be true or false, got {self.admin_enabled!r}")
        if isinstance(self.ssl, Mapping):
            self.ssl = _build(SSLConfig, self.ssl)
        self.ssl.cert_dir = Path(self.ssl.cert_dir)
        self.ssl.fallback_certfile = Path(self.ssl.fallback_certfile)
        self.ssl.fallback_keyfile = Path(self.ssl.fallback_keyfile)


def _build(cls, values: Mapping[str, Any]):
    """Instantiate a config dataclass, rejecting unknown keys."""
    known = {f.name for f in fields(cls)}
    unknown = sorted(set(values) - known)
    if unknown:
        raise ValueError(f"Unknown {cls.__name__} settings: {', '.join(unknown)}")
    return cls(**values)


def load_config(path: Optional[str | Path] = None,
                environ: Optional[Mapping[str, str]] = None) -> NameMatcherConfig:
    """
    Load configuration from a JSON file and environment overrides.

    The file holds a top-level "server" object whose keys are
    NameMatcherConfig fields (with "ssl" as a nested object).

    Args:
        path: JSON config file, or None for defaults only
        environ: Environment mapping (defaults to os.environ)

    Returns:
        NameMatcherConfig

    Raises:
        FileNotFoundError: If path is given but does not exist
        ValueError: On unknown settings or environment names
    """
    environ = os.environ if environ is None else environ
    values: Dict[str, Any] = {}

    if path is not None:
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")
        with open(path, 'r') as f:
            data = json.load(f)
        values.update(data.get('server', {}))
        logger.info(f"Loaded configuration from {path}")

    if environ.get(ENV_ENVIRONMENT):
        values['environment'] = environ[ENV_ENVIRONMENT]
    if environ.get(ENV_DB_PATH):
        values['db_path'] = environ[ENV_DB_PATH]
    if environ.get(ENV_PORT):
        values['port'] = environ[ENV_PORT]

    return _build(NameMatcherConfig, values)
