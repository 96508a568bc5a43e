"""Resolution of TLS certificate paths for the HTTP server."""

from pathlib import Path
from typing import Dict, Optional
import logging
import re
import socket

from .config import SSLConfig

logger = logging.getLogger(__name__)


def resolve_ssl_options(ssl: SSLConfig, hostname: Optional[str] = None) -> Dict[str, str]:
    """
    Pick the certificate files for this host.

    Hosts matching ssl.domain_pattern use the configured certificate, key
    and optional CA bundle from ssl.cert_dir; any other host uses the
    self-signed fallback pair.

    Args:
        ssl: TLS settings
        hostname: Host name to check (defaults to this machine's)

    Returns:
        Keyword arguments for uvicorn (empty when TLS is disabled)

    Raises:
        FileNotFoundError: If a selected certificate file is missing
        ValueError: If the domain certificate or key is not configured
    """
    if not ssl.enabled:
        return {}

    hostname = hostname or socket.gethostname()

    if ssl.domain_pattern and re.search(ssl.domain_pattern, hostname):
        if not ssl.certfile or not ssl.keyfile:
            raise ValueError("ssl.certfile and ssl.keyfile are required for domain certificates")
        certfile = ssl.cert_dir / ssl.certfile
        keyfile = ssl.cert_dir / ssl.keyfile
        bundle = ssl.cert_dir / ssl.bundle if ssl.bundle else None
        logger.info(f"Using domain certificates from {ssl.cert_dir}")
    else:
        certfile = Path(ssl.fallback_certfile)
        keyfile = Path(ssl.fallback_keyfile)
        bundle = None
        logger.info(f"Using self-signed certificates for host {hostname}")

    options = {}
    for option, path in (('ssl_certfile', certfile), ('ssl_keyfile', keyfile),
                         ('ssl_ca_certs', bundle)):
        if path is None:
            continue
        if not path.exists():
            raise FileNotFoundError(f"TLS file not found: {path}")
        options[option] = str(path)

    return options
