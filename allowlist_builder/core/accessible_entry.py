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
Accessible-entry construction from file inventory records.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable

from .exceptions import RecordValidationError
from .metadata import select_metadata
from .models import AccessibleEntry, FileRecord
from .path_normalizer import EnvironmentPathNormalizer, PathNormalizer

logger = logging.getLogger(__name__)


def new_match_token() -> str:
    """Return a fresh random 128-bit token."""
    return str(uuid.uuid4())


class AccessibleEntryBuilder:
    """Turns one file record into an accessible entry.

    Every call returns a new, immutable ``AccessibleEntry``; nothing carries
    over from one record to the next.
    """

    def __init__(
        self,
        normalizer: PathNormalizer | None = None,
        token_factory: Callable[[], str] | None = None,
    ):
        """
        Initialize the builder.

        Args:
            normalizer: Path normalizer.  Defaults to environment tokens.
            token_factory: Source of the unique suffix used in pattern mode.
        """
        self.normalizer = normalizer or EnvironmentPathNormalizer()
        self.token_factory = token_factory or new_match_token

    def build(self, record: FileRecord, use_regex: bool = False) -> AccessibleEntry:
        """
        Build the accessible entry for *record*.

        In pattern mode the match key is the path followed by a space and a
        unique token.  The product keys its file collection by that value,
        and pattern texts repeat across records far more often than literal
        paths do.

        Raises:
            RecordValidationError: If the record has no usable path
        """
        if not isinstance(record.path, str) or not record.path.strip():
            raise RecordValidationError(f"File record has no path: {record!r}")

        path = self.normalizer.normalize(record.path)
        match_key = f"{path} {self.token_factory()}" if use_regex else path
        metadata, description = select_metadata(record)

        entry = AccessibleEntry(
            path=path,
            match_key=match_key,
            use_regex=use_regex,
            description=description,
            metadata=metadata,
            trusted_ownership_checking=False,
        )
        logger.debug("Built accessible entry %s (%s)", entry.match_key, entry.description)
        return entry
