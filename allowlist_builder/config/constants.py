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
Constants for Allowlist Builder.
"""

import tempfile
from pathlib import Path

from ..core.models import CrlValidationFlags

try:
    from .._version import __version__ as PACKAGE_VERSION
except Exception:  # pragma: no cover
    PACKAGE_VERSION = "0.0.0-dev"


class AllowlistBuilderConstants:
    """Constants used throughout the builder."""

    VERSION = PACKAGE_VERSION

    # Project paths
    PACKAGE_ROOT = Path(__file__).parent.parent

    # Resource paths
    DATA_DIR = PACKAGE_ROOT / "data"
    DEFAULT_TEMPLATE_PATH = DATA_DIR / "default_policy.yaml"

    # Default values
    DEFAULT_GROUP_RULE = "Everyone"
    DEFAULT_OUTPUT_FORMAT = "yaml"
    DEFAULT_ARTIFACT_NAME = "AllowlistPolicy"
    DEFAULT_USE_REGEX = False
    DEFAULT_IGNORE_CRL = True

    # Entry values
    NO_METADATA_DESCRIPTION = "[No metadata found]"
    IGNORE_CRL_FLAGS = int(CrlValidationFlags.IGNORE_REVOCATION_ERRORS)  # 1792

    @classmethod
    def get_data_path(cls) -> Path:
        """Get path to data directory."""
        return cls.DATA_DIR

    @classmethod
    def get_default_target_path(cls, extension: str = ".yaml") -> Path:
        """Get the artifact path used when no target is given."""
        return Path(tempfile.gettempdir()) / cls.DEFAULT_ARTIFACT_NAME / f"{cls.DEFAULT_ARTIFACT_NAME}{extension}"
