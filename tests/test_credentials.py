from unittest.mock import Mock, patch

import pytest
from cryptography import x509

from flagd_provider import Config
from flagd_provider.credentials import build_channel_credentials, load_pem_certificate


class TestLoadPemCertificate:
    def test_returns_the_certificate(self, pem_certificate) -> None:
        pem = load_pem_certificate(str(pem_certificate))

        assert pem.startswith(b"-----BEGIN CERTIFICATE-----")
        certificate = x509.load_pem_x509_certificate(pem)
        assert certificate.subject.rfc4514_string() == "CN=flagd-test-ca"

    def test_keeps_only_the_first_certificate(self, pem_certificate, tmp_path) -> None:
        bundle = tmp_path / "bundle.pem"
        bundle.write_bytes(pem_certificate.read_bytes() * 2)

        pem = load_pem_certificate(str(bundle))

        assert pem.count(b"-----BEGIN CERTIFICATE-----") == 1

    def test_missing_file(self, tmp_path) -> None:
        with pytest.raises(FileNotFoundError):
            load_pem_certificate(str(tmp_path / "missing.pem"))

    def test_malformed_file(self, tmp_path) -> None:
        cert_path = tmp_path / "ca.pem"
        cert_path.write_text("not a certificate")

        with pytest.raises(ValueError):
            load_pem_certificate(str(cert_path))


class TestBuildChannelCredentials:
    def test_plaintext(self) -> None:
        assert build_channel_credentials(Config.new()) is None

    @patch("flagd_provider.credentials.grpc.ssl_channel_credentials")
    def test_default_roots(self, ssl_credentials) -> None:
        credentials = build_channel_credentials(Config.new(tls=True))

        assert credentials is ssl_credentials.return_value
        ssl_credentials.assert_called_once_with()

    @patch("flagd_provider.credentials.grpc.ssl_channel_credentials")
    def test_custom_certificate(self, ssl_credentials, pem_certificate) -> None:
        config = Config.new(tls=True, cert_path=str(pem_certificate))

        build_channel_credentials(config)

        root_certificates = ssl_credentials.call_args.kwargs["root_certificates"]
        assert root_certificates == load_pem_certificate(str(pem_certificate))

    def test_injected_loader(self) -> None:
        loader = Mock(return_value=b"pem")
        config = Config.new(tls=True, cert_path="/etc/flagd/ca.pem")

        with patch(
            "flagd_provider.credentials.grpc.ssl_channel_credentials"
        ) as ssl_credentials:
            build_channel_credentials(config, certificate_loader=loader)

        loader.assert_called_once_with("/etc/flagd/ca.pem")
        ssl_credentials.assert_called_once_with(root_certificates=b"pem")
