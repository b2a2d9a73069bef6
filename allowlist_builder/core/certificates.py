# Copyright 2026 Cisco Systems, Inc.
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
Certificate reading for trusted vendor entries.

A "signed file" is either a PE image carrying an embedded Authenticode
signature, or a bare certificate exported as PEM or DER.  For PE images the
signature lives in the security data directory as a ``WIN_CERTIFICATE``
wrapping a PKCS#7 SignedData blob; the signer certificate is picked out of
the certificates that blob carries.

No signature or chain validation happens here: the reader only extracts the
certificate the policy should trust.
"""

from __future__ import annotations

import logging
import struct
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from cryptography import x509
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.serialization import Encoding, pkcs7
from cryptography.x509.oid import ExtendedKeyUsageOID, NameOID

from .exceptions import CertificateReadError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SignedCertificate:
    """The signer certificate of a file and when it expires."""

    raw_data: bytes  # DER
    expires_at: datetime


@dataclass(frozen=True)
class DecodedCertificate:
    """Display fields of an X.509 certificate."""

    subject: str
    issuer: str
    thumbprint: str


class CertificateReader(ABC):
    """Extracts and decodes the certificate that signed a file."""

    @abstractmethod
    def read_signed_certificate(self, path: str | Path) -> SignedCertificate:
        """Return the raw signer certificate of *path* and its expiry."""
        pass

    @abstractmethod
    def decode_certificate(self, raw_data: bytes) -> DecodedCertificate:
        """Decode subject, issuer and thumbprint from a DER certificate."""
        pass


# ---------------------------------------------------------------------------
# PE / Authenticode layout
# ---------------------------------------------------------------------------

_PE_POINTER_OFFSET = 0x3C
_PE_SIGNATURE = b"PE\x00\x00"
_COFF_HEADER_SIZE = 20
_OPTIONAL_HEADER_PE32 = 0x10B
_OPTIONAL_HEADER_PE32_PLUS = 0x20B
# Offset of the data directory table within the optional header
_DATA_DIRECTORY_OFFSETS = {_OPTIONAL_HEADER_PE32: 96, _OPTIONAL_HEADER_PE32_PLUS: 112}
_SECURITY_DIRECTORY_INDEX = 4
_WIN_CERT_HEADER_SIZE = 8
_WIN_CERT_TYPE_PKCS_SIGNED_DATA = 0x0002

_PEM_CERTIFICATE_MARKER = b"-----BEGIN CERTIFICATE-----"


def extract_authenticode_signature(data: bytes) -> bytes:
    """
    Return the PKCS#7 SignedData blob embedded in a PE image.

    Args:
        data: Contents of the PE file

    Returns:
        DER-encoded PKCS#7 bytes

    Raises:
        CertificateReadError: If the image is malformed or unsigned
    """
    if data[:2] != b"MZ":
        raise CertificateReadError("Not a PE image (missing MZ header)")

    try:
        (pe_offset,) = struct.unpack_from("<I", data, _PE_POINTER_OFFSET)
        if data[pe_offset : pe_offset + 4] != _PE_SIGNATURE:
            raise CertificateReadError("Not a PE image (missing PE signature)")

        optional_header = pe_offset + 4 + _COFF_HEADER_SIZE
        (magic,) = struct.unpack_from("<H", data, optional_header)
        directory_offset = _DATA_DIRECTORY_OFFSETS.get(magic)
        if directory_offset is None:
            raise CertificateReadError(f"Unknown optional header magic 0x{magic:x}")

        directories = optional_header + directory_offset
        (directory_count,) = struct.unpack_from("<I", data, directories - 4)
        if directory_count <= _SECURITY_DIRECTORY_INDEX:
            raise CertificateReadError("PE image has no security directory")

        address, size = struct.unpack_from("<II", data, directories + 8 * _SECURITY_DIRECTORY_INDEX)
        if address == 0 or size == 0:
            raise CertificateReadError("PE image is not signed")
        if address + size > len(data):
            raise CertificateReadError("Security directory extends past end of file")

        # WIN_CERTIFICATE: dwLength, wRevision, wCertificateType, bCertificate[]
        length, _revision, cert_type = struct.unpack_from("<IHH", data, address)
    except struct.error as e:
        raise CertificateReadError(f"Truncated PE image: {e}") from e

    if cert_type != _WIN_CERT_TYPE_PKCS_SIGNED_DATA:
        raise CertificateReadError(f"Unsupported WIN_CERTIFICATE type 0x{cert_type:x}")
    if length <= _WIN_CERT_HEADER_SIZE or length > size:
        raise CertificateReadError(f"Invalid WIN_CERTIFICATE length {length}")

    return data[address + _WIN_CERT_HEADER_SIZE : address + length]


def select_signer_certificate(certificates: list[x509.Certificate]) -> x509.Certificate:
    """
    Pick the signing certificate out of a PKCS#7 certificate bag.

    The bag holds the signer plus its chain (and often a timestamping
    chain).  Leaves are certificates that issued nothing else in the bag;
    a leaf marked for code signing is preferred.
    """
    if not certificates:
        raise CertificateReadError("Signature carries no certificates")

    leaves = [
        cert
        for cert in certificates
        if not any(other is not cert and other.issuer == cert.subject for other in certificates)
    ]
    for cert in leaves:
        try:
            usage = cert.extensions.get_extension_for_class(x509.ExtendedKeyUsage).value
        except x509.ExtensionNotFound:
            continue
        if ExtendedKeyUsageOID.CODE_SIGNING in usage:
            return cert

    return leaves[0] if leaves else certificates[0]


# ---------------------------------------------------------------------------
# Distinguished name rendering
# ---------------------------------------------------------------------------

_ATTRIBUTE_LABELS = {
    NameOID.COMMON_NAME: "CN",
    NameOID.ORGANIZATION_NAME: "O",
    NameOID.ORGANIZATIONAL_UNIT_NAME: "OU",
    NameOID.LOCALITY_NAME: "L",
    NameOID.STATE_OR_PROVINCE_NAME: "S",
    NameOID.COUNTRY_NAME: "C",
    NameOID.STREET_ADDRESS: "STREET",
    NameOID.EMAIL_ADDRESS: "E",
    NameOID.DOMAIN_COMPONENT: "DC",
    NameOID.SERIAL_NUMBER: "SERIALNUMBER",
    NameOID.TITLE: "T",
    NameOID.GIVEN_NAME: "G",
    NameOID.SURNAME: "SN",
}

_QUOTED_CHARACTERS = frozenset(',+=<>#;"\n')


def _format_attribute_value(value: str) -> str:
    if value != value.strip() or any(ch in _QUOTED_CHARACTERS for ch in value):
        return '"' + value.replace('"', '""') + '"'
    return value


def format_distinguished_name(name: x509.Name) -> str:
    """Render *name* most-specific first, e.g. ``CN=Acme, O=Acme Inc, C=US``.

    Values containing separators are wrapped in double quotes.
    """
    parts = []
    for rdn in reversed(name.rdns):
        for attribute in rdn:
            label = _ATTRIBUTE_LABELS.get(attribute.oid, f"OID.{attribute.oid.dotted_string}")
            value = attribute.value if isinstance(attribute.value, str) else attribute.value.hex()
            parts.append(f"{label}={_format_attribute_value(value)}")
    return ", ".join(parts)


# ---------------------------------------------------------------------------
# Default reader
# ---------------------------------------------------------------------------


class X509CertificateReader(CertificateReader):
    """Reads Authenticode-signed PE images and PEM/DER certificate files."""

    def read_signed_certificate(self, path: str | Path) -> SignedCertificate:
        path = Path(path)
        try:
            data = path.read_bytes()
        except OSError as e:
            raise CertificateReadError(f"Failed to read {path}: {e}") from e

        certificate = self._load_certificate(data, path)
        return SignedCertificate(
            raw_data=certificate.public_bytes(Encoding.DER),
            expires_at=certificate.not_valid_after_utc,
        )

    def decode_certificate(self, raw_data: bytes) -> DecodedCertificate:
        try:
            certificate = x509.load_der_x509_certificate(raw_data)
        except ValueError as e:
            raise CertificateReadError(f"Failed to decode certificate: {e}") from e

        return DecodedCertificate(
            subject=format_distinguished_name(certificate.subject),
            issuer=format_distinguished_name(certificate.issuer),
            thumbprint=certificate.fingerprint(hashes.SHA1()).hex().upper(),
        )

    def _load_certificate(self, data: bytes, path: Path) -> x509.Certificate:
        if data[:2] == b"MZ":
            signature = extract_authenticode_signature(data)
            try:
                certificates = pkcs7.load_der_pkcs7_certificates(signature)
            except ValueError as e:
                raise CertificateReadError(f"Failed to parse Authenticode signature in {path}: {e}") from e
            logger.debug("%s: signature carries %d certificate(s)", path, len(certificates))
            return select_signer_certificate(certificates)

        try:
            if _PEM_CERTIFICATE_MARKER in data:
                return x509.load_pem_x509_certificate(data)
            return x509.load_der_x509_certificate(data)
        except ValueError as e:
            raise CertificateReadError(f"No certificate found in {path}: {e}") from e
