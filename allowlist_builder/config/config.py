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
Configuration class for Allowlist Builder.
"""

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from .constants import AllowlistBuilderConstants


def _env_flag(name: str) -> bool | None:
    """Return True/False for a boolean environment variable, None if unset."""
    value = os.getenv(name, "").strip().lower()
    if value in ("true", "1", "yes"):
        return True
    if value in ("false", "0", "no"):
        return False
    return None


@dataclass
class Config:
    """
    Configuration for Allowlist Builder.

    Explicit values win; values left at their defaults are filled from
    ``ALLOWLIST_BUILDER_*`` environment variables.
    """

    # Policy target
    group_rule: str = AllowlistBuilderConstants.DEFAULT_GROUP_RULE
    template_path: str | None = None

    # Entry options
    use_regex: bool = AllowlistBuilderConstants.DEFAULT_USE_REGEX
    ignore_crl: bool = AllowlistBuilderConstants.DEFAULT_IGNORE_CRL

    # Output options
    target_path: str | None = None
    output_format: str = AllowlistBuilderConstants.DEFAULT_OUTPUT_FORMAT

    def __post_init__(self):
        """Load configuration from environment variables if not provided."""

        if self.group_rule == AllowlistBuilderConstants.DEFAULT_GROUP_RULE:
            if env_group := os.getenv("ALLOWLIST_BUILDER_GROUP_RULE"):
                self.group_rule = env_group

        if self.template_path is None:
            self.template_path = os.getenv("ALLOWLIST_BUILDER_TEMPLATE")

        if self.target_path is None:
            self.target_path = os.getenv("ALLOWLIST_BUILDER_TARGET_PATH")

        if self.output_format == AllowlistBuilderConstants.DEFAULT_OUTPUT_FORMAT:
            if env_format := os.getenv("ALLOWLIST_BUILDER_FORMAT"):
                self.output_format = env_format.lower()

        if not self.use_regex and _env_flag("ALLOWLIST_BUILDER_USE_REGEX"):
            self.use_regex = True

        if self.ignore_crl and _env_flag("ALLOWLIST_BUILDER_IGNORE_CRL") is False:
            self.ignore_crl = False

    def resolve_target_path(self, extension: str = ".yaml") -> Path:
        """Return the configured artifact path, or the temp-directory default."""
        if self.target_path:
            return Path(self.target_path)
        return AllowlistBuilderConstants.get_default_target_path(extension)

    @classmethod
    def from_env(cls) -> "Config":
        """
        Create configuration from environment variables.

        Returns:
            Config instance with values from environment
        """
        return cls()

    @classmethod
    def from_file(cls, config_file: Path) -> "Config":
        """
        Load configuration from .env file.

        Args:
            config_file: Path to .env file

        Returns:
            Config instance
        """
        if config_file.exists():
            load_dotenv(config_file, override=True)

        return cls.from_env()
