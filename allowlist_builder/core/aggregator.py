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
Policy aggregator: owns the policy document for the length of one run.
"""

from __future__ import annotations

import logging
from pathlib import Path

from ..config.constants import AllowlistBuilderConstants
from .exceptions import AllowlistBuilderError
from .models import AccessibleEntry, TrustedVendorEntry
from .policy import GroupRule, PolicyDocument

logger = logging.getLogger(__name__)


class PolicyAggregator:
    """Accumulates built entries into the target group rule.

    Each run starts from a freshly loaded template; nothing is shared
    between aggregators.
    """

    def __init__(self, template_path: str | Path | None = None):
        """
        Initialize aggregator.

        Args:
            template_path: Custom template overlaid on the built-in default.
                If None, the built-in default is used as-is.
        """
        self.template_path = template_path
        self.group_name: str | None = None
        self._document: PolicyDocument | None = None

    def initialize(self, group_name: str = AllowlistBuilderConstants.DEFAULT_GROUP_RULE) -> PolicyDocument:
        """
        Load the template and prune the placeholder folders of *group_name*.

        Raises:
            PolicyTemplateError: If the template cannot be loaded
        """
        if self.template_path is None:
            document = PolicyDocument.default()
        else:
            document = PolicyDocument.from_template(self.template_path)

        group = document.ensure_group(group_name)
        pruned = len(group.accessible_folders)
        group.accessible_folders.clear()
        logger.info("Initialized policy for group '%s' (pruned %d default folder(s))", group_name, pruned)

        self.group_name = group_name
        self._document = document
        return document

    @property
    def document(self) -> PolicyDocument:
        if self._document is None:
            raise AllowlistBuilderError("Policy aggregator has not been initialized")
        return self._document

    @property
    def group_rule(self) -> GroupRule:
        """The target group rule entries are appended to."""
        return self.document.group_rules[self.group_name]  # type: ignore[index]

    def append_accessible_entry(self, entry: AccessibleEntry) -> None:
        self.group_rule.accessible_files.append(entry)

    def append_trusted_vendor(self, entry: TrustedVendorEntry) -> None:
        self.group_rule.trusted_vendors.append(entry)
