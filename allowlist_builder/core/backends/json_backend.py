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
JSON policy backend.
"""

from __future__ import annotations

import json

from ..exceptions import AllowlistBuilderError, PolicyTemplateError
from ..policy import PolicyDocument
from .base import PolicyBackend


class JsonPolicyBackend(PolicyBackend):
    """Writes policies as JSON documents."""

    def __init__(self, pretty: bool = True):
        """
        Initialize JSON backend.

        Args:
            pretty: If True, indent the output
        """
        super().__init__(name="json", file_extension=".json")
        self.pretty = pretty

    def serialize(self, document: PolicyDocument) -> bytes:
        if self.pretty:
            text = json.dumps(document.to_dict(), indent=2, ensure_ascii=False)
        else:
            text = json.dumps(document.to_dict(), separators=(",", ":"), ensure_ascii=False)
        return text.encode("utf-8")

    def deserialize(self, data: bytes) -> PolicyDocument:
        try:
            raw = json.loads(data.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise AllowlistBuilderError(f"Invalid JSON policy artifact: {e}") from e
        if not isinstance(raw, dict):
            raise AllowlistBuilderError("JSON policy artifact must be an object")
        try:
            return PolicyDocument.from_dict(raw)
        except PolicyTemplateError as e:
            raise AllowlistBuilderError(f"Invalid JSON policy artifact: {e}") from e
