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
Artifact writer: persists a serialized policy document.
"""

from __future__ import annotations

import logging
from pathlib import Path

from .backends import PolicyBackend, YamlPolicyBackend
from .exceptions import ArtifactWriteError
from .policy import PolicyDocument

logger = logging.getLogger(__name__)


class ArtifactWriter:
    """Serializes a policy through a backend and writes it to disk."""

    def __init__(self, backend: PolicyBackend | None = None):
        self.backend = backend or YamlPolicyBackend()

    def persist(self, document: PolicyDocument, target_path: str | Path) -> Path:
        """
        Write *document* to *target_path*, creating parent directories.

        No locking is done; a concurrent writer to the same path races.

        Returns:
            The target path

        Raises:
            ArtifactWriteError: If the directory or file cannot be written
        """
        target_path = Path(target_path)
        try:
            target_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ArtifactWriteError(f"Failed to create directory {target_path.parent}: {e}") from e

        data = self.backend.serialize(document)
        try:
            target_path.write_bytes(data)
        except OSError as e:
            raise ArtifactWriteError(f"Failed to write policy artifact {target_path}: {e}") from e

        logger.info("Wrote %s policy artifact (%d bytes) to %s", self.backend.get_name(), len(data), target_path)
        return target_path
