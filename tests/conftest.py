# Copyright 2026 Cisco Systems, Inc. and its affiliates
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
#
# SPDX-License-Identifier: Apache-2.0


"""
Pytest configuration and shared fixtures.

This file is automatically loaded by pytest before running tests.
All fixtures defined here are available to every test module without
explicit imports.
"""

from __future__ import annotations

import struct
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path

import pytest
from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives.serialization import pkcs7
from cryptography.x509.oid import ExtendedKeyUsageOID, NameOID
from dotenv import load_dotenv

from allowlist_builder.core.certificates import CertificateReader, DecodedCertificate, SignedCertificate
from allowlist_builder.core.exceptions import CertificateReadError
from allowlist_builder.core.path_normalizer import PathNormalizer

# ---------------------------------------------------------------------------
# Environment
# ---------------------------------------------------------------------------

project_root = Path(__file__).parent.parent
env_file = project_root / ".env"

if env_file.exists():
    load_dotenv(env_file)


@pytest.fixture(autouse=True)
def _clean_builder_env(monkeypatch):
    """Keep ALLOWLIST_BUILDER_* settings from the developer's shell out of tests."""
    for name in (
        "ALLOWLIST_BUILDER_GROUP_RULE",
        "ALLOWLIST_BUILDER_TARGET_PATH",
        "ALLOWLIST_BUILDER_USE_REGEX",
        "ALLOWLIST_BUILDER_IGNORE_CRL",
        "ALLOWLIST_BUILDER_FORMAT",
        "ALLOWLIST_BUILDER_TEMPLATE",
    ):
        monkeypatch.delenv(name, raising=False)


# ---------------------------------------------------------------------------
# Fakes for the external collaborators
# ---------------------------------------------------------------------------


class RecordingNormalizer(PathNormalizer):
    """Maps C:\\Tools to %TOOLS% and records every path it sees."""

    def __init__(self):
        self.seen: list[str] = []

    def normalize(self, path: str) -> str:
        self.seen.append(path)
        return path.replace("C:\\Tools", "%TOOLS%")


class FakeCertificateReader(CertificateReader):
    """Serves canned certificate fields keyed by path."""

    def __init__(self, certificates: dict[str, tuple[str, str, str]], expires_at: datetime | None = None):
        self.certificates = certificates
        self.expires_at = expires_at or datetime(2030, 1, 2, 3, 4, tzinfo=timezone.utc)
        self.read_paths: list[str] = []

    def read_signed_certificate(self, path) -> SignedCertificate:
        self.read_paths.append(str(path))
        if str(path) not in self.certificates:
            raise CertificateReadError(f"No certificate in {path}")
        return SignedCertificate(raw_data=str(path).encode("utf-8"), expires_at=self.expires_at)

    def decode_certificate(self, raw_data: bytes) -> DecodedCertificate:
        subject, issuer, thumbprint = self.certificates[raw_data.decode("utf-8")]
        return DecodedCertificate(subject=subject, issuer=issuer, thumbprint=thumbprint)


@pytest.fixture
def recording_normalizer() -> RecordingNormalizer:
    return RecordingNormalizer()


@pytest.fixture
def fake_reader() -> FakeCertificateReader:
    return FakeCertificateReader(
        {
            "acme.exe": ("CN=Acme Software, O=Acme Corp, C=US", "CN=Acme Issuing CA, O=Acme Corp, C=US", "AB12CD"),
            "quoted.exe": ('CN="Widgets, Inc.", O=Widgets, C=US', "CN=Widgets CA, O=Widgets, C=US", "EF34"),
        }
    )


# ---------------------------------------------------------------------------
# Real certificates
# ---------------------------------------------------------------------------


@dataclass
class CodeSigningChain:
    """A root CA and a code-signing leaf it issued."""

    ca: x509.Certificate
    leaf: x509.Certificate
    leaf_key: ec.EllipticCurvePrivateKey


LEAF_NOT_AFTER = datetime(2030, 1, 2, 3, 4, tzinfo=timezone.utc)


def _name(common_name: str, organization: str) -> x509.Name:
    return x509.Name(
        [
            x509.NameAttribute(NameOID.COUNTRY_NAME, "US"),
            x509.NameAttribute(NameOID.ORGANIZATION_NAME, organization),
            x509.NameAttribute(NameOID.COMMON_NAME, common_name),
        ]
    )


@pytest.fixture(scope="session")
def code_signing_chain() -> CodeSigningChain:
    """Generate a CA and a code-signing certificate issued by it."""
    ca_key = ec.generate_private_key(ec.SECP256R1())
    ca_name = _name("Example Root CA", "Example Trust")
    ca = (
        x509.CertificateBuilder()
        .subject_name(ca_name)
        .issuer_name(ca_name)
        .public_key(ca_key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(datetime(2024, 1, 1, tzinfo=timezone.utc))
        .not_valid_after(datetime(2040, 1, 1, tzinfo=timezone.utc))
        .add_extension(x509.BasicConstraints(ca=True, path_length=None), critical=True)
        .sign(ca_key, hashes.SHA256())
    )

    leaf_key = ec.generate_private_key(ec.SECP256R1())
    leaf = (
        x509.CertificateBuilder()
        .subject_name(_name("Example Corp", "Example"))
        .issuer_name(ca_name)
        .public_key(leaf_key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(datetime(2024, 1, 1, tzinfo=timezone.utc))
        .not_valid_after(LEAF_NOT_AFTER)
        .add_extension(x509.ExtendedKeyUsage([ExtendedKeyUsageOID.CODE_SIGNING]), critical=False)
        .sign(ca_key, hashes.SHA256())
    )
    return CodeSigningChain(ca=ca, leaf=leaf, leaf_key=leaf_key)


@pytest.fixture(scope="session")
def authenticode_signature(code_signing_chain) -> bytes:
    """A DER PKCS#7 SignedData blob signed by the leaf, carrying the CA too."""
    return (
        pkcs7.PKCS7SignatureBuilder()
        .set_data(b"authenticode content")
        .add_signer(code_signing_chain.leaf, code_signing_chain.leaf_key, hashes.SHA256())
        .add_certificate(code_signing_chain.ca)
        .sign(serialization.Encoding.DER, [])
    )


def build_pe_image(signature: bytes | None = None, pe32_plus: bool = False) -> bytes:
    """Assemble a minimal PE image with an optional WIN_CERTIFICATE."""
    magic, directory_offset = (0x20B, 112) if pe32_plus else (0x10B, 96)
    pe_offset = 0x80
    optional_header = pe_offset + 4 + 20
    image = bytearray(optional_header + directory_offset + 16 * 8)

    image[0:2] = b"MZ"
    struct.pack_into("<I", image, 0x3C, pe_offset)
    image[pe_offset : pe_offset + 4] = b"PE\x00\x00"
    struct.pack_into("<H", image, optional_header, magic)
    struct.pack_into("<I", image, optional_header + directory_offset - 4, 16)

    if signature is None:
        return bytes(image)

    image.extend(b"\x00" * (-len(image) % 8))
    win_certificate = struct.pack("<IHH", 8 + len(signature), 0x0200, 0x0002) + signature
    win_certificate += b"\x00" * (-len(win_certificate) % 8)
    struct.pack_into("<II", image, optional_header + directory_offset + 8 * 4, len(image), len(win_certificate))
    return bytes(image) + win_certificate


@pytest.fixture
def signed_pe_file(tmp_path, authenticode_signature) -> Path:
    path = tmp_path / "signed.exe"
    path.write_bytes(build_pe_image(authenticode_signature))
    return path


@pytest.fixture
def unsigned_pe_file(tmp_path) -> Path:
    path = tmp_path / "unsigned.exe"
    path.write_bytes(build_pe_image())
    return path


@pytest.fixture
def pem_certificate_file(tmp_path, code_signing_chain) -> Path:
    path = tmp_path / "vendor.pem"
    path.write_bytes(code_signing_chain.leaf.public_bytes(serialization.Encoding.PEM))
    return path


@pytest.fixture
def der_certificate_file(tmp_path, code_signing_chain) -> Path:
    path = tmp_path / "vendor.cer"
    path.write_bytes(code_signing_chain.leaf.public_bytes(serialization.Encoding.DER))
    return path


@pytest.fixture
def pe_image_builder():
    """The ``build_pe_image`` helper, for tests that need unusual images."""
    return build_pe_image
