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
Path normalization: absolute Windows paths to portable environment tokens.

``C:\\Program Files\\Acme\\tool.exe`` becomes ``%PROGRAMFILES%\\Acme\\tool.exe``
so that a rule written on one machine matches on another where Windows or
Program Files live elsewhere.
"""

from __future__ import annotations

import logging
import os
from abc import ABC, abstractmethod
from collections.abc import Mapping

logger = logging.getLogger(__name__)

# Variables considered for substitution when none are supplied explicitly
DEFAULT_PATH_VARIABLES = (
    "PROGRAMFILES(X86)",
    "PROGRAMFILES",
    "COMMONPROGRAMFILES(X86)",
    "COMMONPROGRAMFILES",
    "PROGRAMDATA",
    "LOCALAPPDATA",
    "APPDATA",
    "USERPROFILE",
    "PUBLIC",
    "SYSTEMROOT",
    "WINDIR",
    "SYSTEMDRIVE",
)


class PathNormalizer(ABC):
    """Maps an absolute filesystem path to its portable form."""

    @abstractmethod
    def normalize(self, path: str) -> str:
        """Return the portable form of *path*."""
        pass


class EnvironmentPathNormalizer(PathNormalizer):
    """Replaces the longest matching directory prefix with its ``%VARIABLE%``."""

    def __init__(self, variables: Mapping[str, str] | None = None):
        """
        Initialize the normalizer.

        Args:
            variables: Variable name to directory mapping.  If None, the
                values of ``DEFAULT_PATH_VARIABLES`` are read from the
                process environment.
        """
        if variables is None:
            variables = {name: os.environ[name] for name in DEFAULT_PATH_VARIABLES if os.environ.get(name)}

        prefixes = []
        for name, directory in variables.items():
            canonical = self._canonical(directory).rstrip("\\")
            if canonical:
                prefixes.append((canonical, name.upper()))
        # Longest first so %PROGRAMFILES(X86)% wins over %SYSTEMDRIVE%
        self._prefixes = sorted(prefixes, key=lambda p: len(p[0]), reverse=True)

    @staticmethod
    def _canonical(path: str) -> str:
        return path.replace("/", "\\").lower()

    def normalize(self, path: str) -> str:
        windows_path = path.replace("/", "\\")
        canonical = windows_path.lower()
        for prefix, name in self._prefixes:
            if canonical == prefix or canonical.startswith(prefix + "\\"):
                normalized = f"%{name}%{windows_path[len(prefix):]}"
                logger.debug("Normalized %s -> %s", path, normalized)
                return normalized
        return path
