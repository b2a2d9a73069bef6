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
Metadata selection for accessible file entries.

Inventories report whatever version-resource strings a file carries, and
scanners tend to emit ``""`` or a lone space when a field is missing.  Only
fields with real content are matched on; the last one present in the order
company, vendor, product, description becomes the entry's label.
"""

from __future__ import annotations

from ..config.constants import AllowlistBuilderConstants
from .models import FileMetadata, FileRecord, MetadataField

NO_METADATA_DESCRIPTION = AllowlistBuilderConstants.NO_METADATA_DESCRIPTION

# (record attribute, FileMetadata attribute), in description-priority order
_FIELD_ORDER = (
    ("company", "company_name"),
    ("vendor", "vendor_name"),
    ("product", "product_name"),
    ("description", "file_description"),
)


def is_present(value: str | None) -> bool:
    """A field counts only when its trimmed text is longer than one character."""
    return value is not None and len(value.strip()) > 1


def select_metadata(record: FileRecord) -> tuple[FileMetadata, str]:
    """Return the metadata to match on and the entry description for *record*."""
    description = NO_METADATA_DESCRIPTION
    fields: dict[str, MetadataField] = {}

    for record_attr, metadata_attr in _FIELD_ORDER:
        value = getattr(record, record_attr)
        if is_present(value):
            fields[metadata_attr] = MetadataField(value=value, enabled=True)
            description = value
        else:
            fields[metadata_attr] = MetadataField(enabled=False)

    return FileMetadata(**fields), description
