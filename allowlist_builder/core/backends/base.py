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
Base interface for policy serialization backends.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path

from ..exceptions import AllowlistBuilderError
from ..policy import PolicyDocument


class PolicyBackend(ABC):
    """Compiles a policy document to the bytes a policy product consumes."""

    def __init__(self, name: str, file_extension: str):
        """
        Initialize backend.

        Args:
            name: Short name used on the command line (``yaml``, ``json``)
            file_extension: Extension of artifacts this backend writes
        """
        self.name = name
        self.file_extension = file_extension

    @abstractmethod
    def serialize(self, document: PolicyDocument) -> bytes:
        """
        Serialize a policy document.

        Args:
            document: The aggregate policy

        Returns:
            Artifact bytes
        """
        pass

    @abstractmethod
    def deserialize(self, data: bytes) -> PolicyDocument:
        """
        Parse artifact bytes back into a policy document.

        Raises:
            AllowlistBuilderError: If *data* is not a valid artifact
        """
        pass

    def load(self, path: str | Path) -> PolicyDocument:
        """Read and parse the artifact at *path*."""
        path = Path(path)
        try:
            data = path.read_bytes()
        except OSError as e:
            raise AllowlistBuilderError(f"Failed to read policy artifact {path}: {e}") from e
        return self.deserialize(data)

    def get_name(self) -> str:
        """Get the backend name."""
        return self.name
