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
Trusted-vendor entry construction from signed files.
"""

from __future__ import annotations

import logging
import re
from datetime import datetime
from pathlib import Path

from ..config.constants import AllowlistBuilderConstants
from .certificates import CertificateReader, X509CertificateReader
from .models import TrustedVendorEntry

logger = logging.getLogger(__name__)

# Text between "CN=" and the first ", O" (Organization or OrganizationalUnit)
_COMMON_NAME_RE = re.compile(r"CN=(.+?), O")

# Short date + short time, fixed so artifacts do not depend on the host locale
EXPIRY_DATE_FORMAT = "%Y-%m-%d %H:%M"


def extract_common_name(distinguished_name: str) -> str:
    """
    Return the common name in *distinguished_name*.

    Names without a ``", O"`` component after the common name are returned
    unmodified.
    """
    match = _COMMON_NAME_RE.search(distinguished_name)
    if match is None:
        return distinguished_name
    return match.group(1)


def format_expiry(expires_at: datetime) -> str:
    return expires_at.strftime(EXPIRY_DATE_FORMAT)


class TrustedVendorBuilder:
    """Turns one signed file into a trusted vendor entry."""

    def __init__(self, reader: CertificateReader | None = None):
        self.reader = reader or X509CertificateReader()

    def build(self, path: str | Path, ignore_crl: bool = True) -> TrustedVendorEntry:
        """
        Build the trusted vendor entry for the certificate that signed *path*.

        Args:
            path: Signed PE image or certificate file
            ignore_crl: Record the flags that suppress revocation-check errors

        Raises:
            CertificateReadError: If no certificate can be read from *path*
        """
        signed = self.reader.read_signed_certificate(path)
        decoded = self.reader.decode_certificate(signed.raw_data)

        issuer_name = extract_common_name(decoded.issuer)
        issued_to = extract_common_name(decoded.subject).replace('"', "")

        entry = TrustedVendorEntry(
            raw_certificate_data=signed.raw_data,
            description=f"Issuer: {issuer_name}. Thumbprint: {decoded.thumbprint}",
            issued_to=issued_to,
            expiry_date=format_expiry(signed.expires_at),
            ignore_crl_errors=ignore_crl,
            crl_validation_flags=AllowlistBuilderConstants.IGNORE_CRL_FLAGS if ignore_crl else None,
        )
        logger.debug("Built trusted vendor entry for %s (%s)", entry.issued_to, decoded.thumbprint)
        return entry
