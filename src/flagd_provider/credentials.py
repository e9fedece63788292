"""TLS trust configuration for the gRPC provider."""

import logging
from typing import Callable, Optional

import grpc
from cryptography import x509
from cryptography.hazmat.primitives import serialization

from flagd_provider.config import Config

logger = logging.getLogger(__name__)

CertificateLoader = Callable[[str], bytes]


def load_pem_certificate(cert_path: str) -> bytes:
    """Read the first PEM certificate in `cert_path`.

    Args:
        cert_path (str): Path to a PEM-encoded certificate file.

    Returns:
        bytes: That certificate alone, re-encoded as PEM.

    Raises:
        OSError: If the file cannot be read.
        ValueError: If the file does not hold a valid PEM certificate.
    """
    with open(cert_path, "rb") as f:
        pem_data = f.read()
    certificate = x509.load_pem_x509_certificate(pem_data)
    logger.debug(f"Loaded CA certificate {certificate.subject.rfc4514_string()}")
    return certificate.public_bytes(serialization.Encoding.PEM)


def build_channel_credentials(
    config: Config, certificate_loader: CertificateLoader = load_pem_certificate
) -> Optional[grpc.ChannelCredentials]:
    """Derive channel credentials from the config.

    Returns None for a plaintext channel. With a `cert_path` the trust store
    holds exactly that certificate, otherwise the default roots are used.
    """
    if not config.tls:
        return None
    if config.cert_path:
        root_certificates = certificate_loader(config.cert_path)
        return grpc.ssl_channel_credentials(root_certificates=root_certificates)
    return grpc.ssl_channel_credentials()
