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
Data models for allowlist policy entries and the records they are built from.
"""

from __future__ import annotations

import base64
from dataclasses import dataclass, field
from enum import IntFlag
from typing import Any


class CrlValidationFlags(IntFlag):
    """Chain-verification flags recorded on a trusted vendor entry.

    The bit values follow the X.509 chain verification flags understood by
    the endpoint product.  ``IGNORE_REVOCATION_ERRORS`` (1792) suppresses the
    "revocation status unknown" failures raised when a CRL endpoint cannot
    be reached.
    """

    NONE = 0
    IGNORE_END_REVOCATION_UNKNOWN = 0x100
    IGNORE_CTL_SIGNER_REVOCATION_UNKNOWN = 0x200
    IGNORE_CERTIFICATE_AUTHORITY_REVOCATION_UNKNOWN = 0x400
    IGNORE_REVOCATION_ERRORS = 0x700


# Record keys accepted from inventories (compared case-insensitively)
_RECORD_KEYS = {
    "path": "path",
    "company": "company",
    "vendor": "vendor",
    "product": "product",
    "description": "description",
}


@dataclass(frozen=True)
class FileRecord:
    """One row of a file inventory: a path plus the metadata found on it."""

    path: str
    company: str | None = None
    vendor: str | None = None
    product: str | None = None
    description: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> FileRecord:
        """Build a record from a mapping with ``Path``/``Company``/... keys.

        Keys are matched case-insensitively; unknown keys are ignored.
        """
        kwargs: dict[str, Any] = {}
        for key, value in data.items():
            attr = _RECORD_KEYS.get(str(key).strip().lower())
            if attr is not None:
                kwargs[attr] = None if value is None else str(value)
        return cls(
            path=kwargs.get("path", ""),
            company=kwargs.get("company"),
            vendor=kwargs.get("vendor"),
            product=kwargs.get("product"),
            description=kwargs.get("description"),
        )


@dataclass(frozen=True)
class MetadataField:
    """A single metadata value and whether the rule matches on it."""

    value: str = ""
    enabled: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {"value": self.value, "enabled": self.enabled}

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> MetadataField:
        data = data or {}
        return cls(value=data.get("value", ""), enabled=bool(data.get("enabled", False)))


@dataclass(frozen=True)
class FileMetadata:
    """Version-resource metadata an accessible entry can match on."""

    company_name: MetadataField = field(default_factory=MetadataField)
    vendor_name: MetadataField = field(default_factory=MetadataField)
    product_name: MetadataField = field(default_factory=MetadataField)
    file_description: MetadataField = field(default_factory=MetadataField)

    def to_dict(self) -> dict[str, Any]:
        return {
            "company_name": self.company_name.to_dict(),
            "vendor_name": self.vendor_name.to_dict(),
            "product_name": self.product_name.to_dict(),
            "file_description": self.file_description.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> FileMetadata:
        data = data or {}
        return cls(
            company_name=MetadataField.from_dict(data.get("company_name")),
            vendor_name=MetadataField.from_dict(data.get("vendor_name")),
            product_name=MetadataField.from_dict(data.get("product_name")),
            file_description=MetadataField.from_dict(data.get("file_description")),
        )


@dataclass(frozen=True)
class AccessibleEntry:
    """A rule granting execution trust to a file path or path pattern.

    ``match_key`` is the key the product indexes its file collection by.  In
    literal mode it is the normalized path; in pattern mode it carries a
    unique suffix so that identical pattern texts do not collapse.
    """

    path: str
    match_key: str
    use_regex: bool = False
    description: str = ""
    metadata: FileMetadata = field(default_factory=FileMetadata)
    trusted_ownership_checking: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "path": self.path,
            "match_key": self.match_key,
            "use_regex": self.use_regex,
            "description": self.description,
            "metadata": self.metadata.to_dict(),
            "trusted_ownership_checking": self.trusted_ownership_checking,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AccessibleEntry:
        path = data.get("path", "")
        return cls(
            path=path,
            match_key=data.get("match_key", path),
            use_regex=bool(data.get("use_regex", False)),
            description=data.get("description", ""),
            metadata=FileMetadata.from_dict(data.get("metadata")),
            trusted_ownership_checking=bool(data.get("trusted_ownership_checking", False)),
        )


@dataclass(frozen=True)
class TrustedVendorEntry:
    """A rule granting trust to every binary signed by one certificate."""

    raw_certificate_data: bytes
    description: str
    issued_to: str
    expiry_date: str
    ignore_crl_errors: bool = False
    crl_validation_flags: int | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "raw_certificate_data": base64.b64encode(self.raw_certificate_data).decode("ascii"),
            "description": self.description,
            "issued_to": self.issued_to,
            "expiry_date": self.expiry_date,
            "ignore_crl_errors": self.ignore_crl_errors,
            "crl_validation_flags": self.crl_validation_flags,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TrustedVendorEntry:
        flags = data.get("crl_validation_flags")
        return cls(
            raw_certificate_data=base64.b64decode(data.get("raw_certificate_data", "") or ""),
            description=data.get("description", ""),
            issued_to=data.get("issued_to", ""),
            expiry_date=str(data.get("expiry_date", "")),
            ignore_crl_errors=bool(data.get("ignore_crl_errors", False)),
            crl_validation_flags=None if flags is None else int(flags),
        )
