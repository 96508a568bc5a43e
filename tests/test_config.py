"""Tests for configuration loading and TLS option resolution."""

import json
from pathlib import Path

import pytest

from namematcher.core.models import Environment
from namematcher.utils.config import NameMatcherConfig, SSLConfig, load_config
from namematcher.utils.tls import resolve_ssl_options


def write_config(tmp_path, server):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({'server': server}))
    return path


class TestLoadConfig:
    """Tests for load_config."""

    def test_defaults(self):
        config = load_config(environ={})
        assert config.environment == Environment.DEVELOPMENT
        assert config.port == 3500
        assert config.orthographic_threshold == 0.82
        assert config.ssl.enabled is False
        assert config.admin_enabled is False

    def test_from_file(self, tmp_path):
        path = write_config(tmp_path, {
            'environment': 'production',
            'db_path': str(tmp_path / 'names.db'),
            'store_timeout': 2,
            'orthographic_threshold': 0.9,
            'ssl': {'enabled': True, 'certfile': 'site.crt', 'keyfile': 'site.key'},
        })
        config = load_config(path, environ={})

        assert config.environment == Environment.PRODUCTION
        assert config.db_path == tmp_path / 'names.db'
        assert config.store_timeout == 2.0
        assert config.orthographic_threshold == 0.9
        assert isinstance(config.ssl, SSLConfig)
        assert config.ssl.certfile == 'site.crt'
        assert config.ssl.cert_dir == Path('cert')

    def test_environment_overrides(self, tmp_path):
        path = write_config(tmp_path, {'environment': 'development', 'port': 4000})
        config = load_config(path, environ={
            'NAMEMATCHER_ENV': 'PRODUCTION',
            'NAMEMATCHER_DB': str(tmp_path / 'other.db'),
            'NAMEMATCHER_PORT': '8080',
        })
        assert config.environment == Environment.PRODUCTION
        assert config.db_path == tmp_path / 'other.db'
        assert config.port == 8080

    def test_admin_enabled_from_file(self, tmp_path):
        path = write_config(tmp_path, {'admin_enabled': True})
        assert load_config(path, environ={}).admin_enabled is True

    def test_admin_enabled_must_be_boolean(self, tmp_path):
        path = write_config(tmp_path, {'admin_enabled': 'yes'})
        with pytest.raises(ValueError, match="admin_enabled"):
            load_config(path, environ={})

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / 'missing.json', environ={})

    def test_unknown_setting_rejected(self, tmp_path):
        path = write_config(tmp_path, {'colour': 'blue'})
        with pytest.raises(ValueError, match="colour"):
            load_config(path, environ={})

    def test_unknown_environment_rejected(self):
        with pytest.raises(ValueError, match="staging"):
            load_config(environ={'NAMEMATCHER_ENV': 'staging'})


class TestResolveSSLOptions:
    """Tests for TLS certificate selection."""

    @pytest.fixture
    def cert_dir(self, tmp_path):
        cert_dir = tmp_path / 'cert'
        cert_dir.mkdir()
        for name in ('site.crt', 'site.key', 'bundle.crt'):
            (cert_dir / name).write_text('---')
        return cert_dir

    def test_disabled(self):
        assert resolve_ssl_options(SSLConfig(enabled=False)) == {}

    def test_domain_certificates(self, cert_dir):
        ssl = SSLConfig(enabled=True, cert_dir=cert_dir, certfile='site.crt',
                        keyfile='site.key', bundle='bundle.crt', domain_pattern=r'example\.org')
        options = resolve_ssl_options(ssl, hostname='api.example.org')
        assert options == {
            'ssl_certfile': str(cert_dir / 'site.crt'),
            'ssl_keyfile': str(cert_dir / 'site.key'),
            'ssl_ca_certs': str(cert_dir / 'bundle.crt'),
        }

    def test_self_signed_fallback(self, cert_dir):
        ssl = SSLConfig(enabled=True, cert_dir=cert_dir, certfile='site.crt',
                        keyfile='site.key', domain_pattern=r'example\.org',
                        fallback_certfile=cert_dir / 'site.crt',
                        fallback_keyfile=cert_dir / 'site.key')
        options = resolve_ssl_options(ssl, hostname='laptop.local')
        assert options == {
            'ssl_certfile': str(cert_dir / 'site.crt'),
            'ssl_keyfile': str(cert_dir / 'site.key'),
        }

    def test_missing_certificate(self, tmp_path):
        ssl = SSLConfig(enabled=True, fallback_certfile=tmp_path / 'nope.crt',
                        fallback_keyfile=tmp_path / 'nope.key')
        with pytest.raises(FileNotFoundError):
            resolve_ssl_options(ssl, hostname='laptop.local')

    def test_domain_without_certfile(self, cert_dir):
        ssl = SSLConfig(enabled=True, cert_dir=cert_dir, domain_pattern='example')
        with pytest.raises(ValueError):
            resolve_ssl_options(ssl, hostname='example.org')


def test_config_coerces_strings():
    config = NameMatcherConfig(environment='production', db_path='x.db', port='9000')
    assert config.environment == Environment.PRODUCTION
    assert config.db_path == Path('x.db')
    assert config.port == 9000
