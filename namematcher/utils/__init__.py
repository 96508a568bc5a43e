"""Configuration and TLS helpers."""

from .config import NameMatcherConfig, SSLConfig, load_config
from .tls import resolve_ssl_options

__all__ = ['NameMatcherConfig', 'SSLConfig', 'load_config', 'resolve_ssl_options']
