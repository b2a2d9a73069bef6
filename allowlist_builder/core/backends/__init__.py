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
Policy serialization backends.

Each backend turns a ``PolicyDocument`` into the bytes of one artifact
format and back.  The builder only talks to the ``PolicyBackend``
interface.
"""

from __future__ import annotations

from pathlib import Path

from .base import PolicyBackend
from .json_backend import JsonPolicyBackend
from .yaml_backend import YamlPolicyBackend

_BACKENDS: dict[str, type[PolicyBackend]] = {
    "yaml": YamlPolicyBackend,
    "json": JsonPolicyBackend,
}

_EXTENSIONS = {
    ".yaml": "yaml",
    ".yml": "yaml",
    ".json": "json",
}


def backend_names() -> list[str]:
    """Return available backend names."""
    return sorted(_BACKENDS)


def get_backend(name: str) -> PolicyBackend:
    """Return a backend by name: ``yaml`` or ``json``."""
    name_lower = name.lower()
    if name_lower not in _BACKENDS:
        raise ValueError(f"Unknown policy format '{name}'. Available: {', '.join(backend_names())}")
    return _BACKENDS[name_lower]()


def backend_for_path(path: str | Path) -> PolicyBackend:
    """Pick a backend from the artifact's file extension (YAML if unknown)."""
    return get_backend(_EXTENSIONS.get(Path(path).suffix.lower(), "yaml"))


__all__ = [
    "PolicyBackend",
    "YamlPolicyBackend",
    "JsonPolicyBackend",
    "backend_names",
    "get_backend",
    "backend_for_path",
]
