# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
TLS context construction for the network backend.

Contexts are built per backend from a Config and never touch the process-wide
`ssl` defaults. Trust and key stores are PEM files: a bundle of CA certificates
for the trust store, a certificate chain plus private key for the key store.
Hostname verification is always off; these contexts are meant for test
environments, not production traffic.
"""

from __future__ import annotations

import logging
import ssl

from ..config import DEFAULT_SSL_ALGORITHM, Config
from ..errors import ConfigurationError

logger = logging.getLogger(__name__)

_SUPPORTED_STORE_TYPES = {"pem"}
_PROTOCOL_VERSIONS: dict[str, ssl.TLSVersion | None] = {
    "TLS": None,
    "SSL": None,
    "TLSV1": ssl.TLSVersion.TLSv1,
    "TLSV1.1": ssl.TLSVersion.TLSv1_1,
    "TLSV1.2": ssl.TLSVersion.TLSv1_2,
    "TLSV1.3": ssl.TLSVersion.TLSv1_3,
}


def _check_store_type(kind: str, store_type: str | None) -> None:
    if store_type is not None and store_type.strip().lower() not in _SUPPORTED_STORE_TYPES:
        raise ConfigurationError(f"unsupported {kind} store type: {store_type} (expected PEM)")


def _protocol_version(algorithm: str | None) -> ssl.TLSVersion | None:
    name = (algorithm or DEFAULT_SSL_ALGORITHM).strip().upper()
    if name not in _PROTOCOL_VERSIONS:
        raise ConfigurationError(f"unsupported ssl algorithm: {algorithm}")
    return _PROTOCOL_VERSIONS[name]


def build_ssl_context(config: Config) -> ssl.SSLContext:
    """
    Build an SSLContext for `config`, raising ConfigurationError on any failure.

    - no trust store and `ssl_trust_all`: every server certificate is accepted and
      no store is read
    - trust store given: its CAs are loaded; with `ssl_trust_all` chain
      verification is relaxed as well so self-signed servers still connect
    - neither: the platform's default CAs are used
    - key store given: loaded as the client identity, unlocked with the key store
      password when there is one
    """
    try:
        version = _protocol_version(config.ssl_algorithm)
        context = ssl.SSLContext(ssl.PROTOCOL_TLS_CLIENT)
        if version is not None:
            context.minimum_version = version
            context.maximum_version = version
        context.check_hostname = False

        if config.ssl_trust_store is None:
            if config.ssl_trust_all:
                context.verify_mode = ssl.CERT_NONE
            else:
                context.load_default_certs()
        else:
            _check_store_type("trust", config.ssl_trust_store_type)
            context.load_verify_locations(cafile=config.ssl_trust_store)
            # the ssl module has no per-certificate trust hook, so accepting
            # self-signed peers means skipping chain validation
            if config.ssl_trust_all:
                context.verify_mode = ssl.CERT_NONE

        if config.ssl_key_store is not None:
            _check_store_type("key", config.ssl_key_store_type)
            context.load_cert_chain(config.ssl_key_store, password=config.ssl_key_store_password)
        return context
    except ConfigurationError as exc:
        logger.error("ssl context init failed: %s", exc)
        raise
    except (OSError, ValueError) as exc:
        logger.error("ssl context init failed: %s", exc)
        raise ConfigurationError(f"ssl context init failed: {exc}") from exc


__all__ = ["build_ssl_context"]
