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
YAML policy backend.
"""

from __future__ import annotations

import yaml

from ..exceptions import AllowlistBuilderError, PolicyTemplateError
from ..policy import PolicyDocument
from .base import PolicyBackend

_HEADER = (
    "# Allowlist Builder – Generated Policy\n"
    "# Merge the target group rule into the product configuration.\n\n"
)


class YamlPolicyBackend(PolicyBackend):
    """Writes policies as YAML, in the same layout as the policy template."""

    def __init__(self):
        super().__init__(name="yaml", file_extension=".yaml")

    def serialize(self, document: PolicyDocument) -> bytes:
        body = yaml.dump(document.to_dict(), default_flow_style=False, sort_keys=False, width=120, allow_unicode=True)
        return (_HEADER + body).encode("utf-8")

    def deserialize(self, data: bytes) -> PolicyDocument:
        try:
            raw = yaml.safe_load(data.decode("utf-8")) or {}
        except (UnicodeDecodeError, yaml.YAMLError) as e:
            raise AllowlistBuilderError(f"Invalid YAML policy artifact: {e}") from e
        if not isinstance(raw, dict):
            raise AllowlistBuilderError("YAML policy artifact must be a mapping")
        try:
            return PolicyDocument.from_dict(raw)
        except PolicyTemplateError as e:
            raise AllowlistBuilderError(f"Invalid YAML policy artifact: {e}") from e
