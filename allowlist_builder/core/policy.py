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
Policy document: group rules holding accessible folders, files and vendors.

A ``PolicyDocument`` is the in-memory aggregate a run accumulates entries
into.  It always starts from the product-default template that ships with
the package; an organisation can overlay its own template on top.

Usage
-----
    from allowlist_builder.core.policy import PolicyDocument

    # Load the built-in default template
    document = PolicyDocument.default()

    # Overlay an org template (merges on top of defaults)
    document = PolicyDocument.from_template("corp_template.yaml")

    # Dump the template for editing
    document.to_yaml("generated_template.yaml")
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from .exceptions import PolicyTemplateError
from .models import AccessibleEntry, TrustedVendorEntry

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Where the built-in default template lives (ships with the package)
# ---------------------------------------------------------------------------
_DATA_DIR = Path(__file__).resolve().parent.parent / "data"
_DEFAULT_TEMPLATE_PATH = _DATA_DIR / "default_policy.yaml"


# ---------------------------------------------------------------------------
# Group rule sections
# ---------------------------------------------------------------------------


@dataclass
class AccessibleFolder:
    """A folder whose contents the group may execute."""

    path: str
    description: str = ""
    include_subfolders: bool = True

    def to_dict(self) -> dict[str, Any]:
        return {
            "path": self.path,
            "description": self.description,
            "include_subfolders": self.include_subfolders,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AccessibleFolder:
        return cls(
            path=data.get("path", ""),
            description=data.get("description", ""),
            include_subfolders=bool(data.get("include_subfolders", True)),
        )


@dataclass
class GroupRule:
    """Allow and trust entries applied to one named group of users."""

    accessible_folders: list[AccessibleFolder] = field(default_factory=list)
    accessible_files: list[AccessibleEntry] = field(default_factory=list)
    trusted_vendors: list[TrustedVendorEntry] = field(default_factory=list)

    def files_by_match_key(self) -> dict[str, AccessibleEntry]:
        """Return the keyed view of the file collection.

        The product indexes accessible files by ``match_key``; a repeated key
        replaces the earlier entry.
        """
        keyed: dict[str, AccessibleEntry] = {}
        for entry in self.accessible_files:
            keyed[entry.match_key] = entry
        return keyed

    def to_dict(self) -> dict[str, Any]:
        return {
            "accessible_folders": [f.to_dict() for f in self.accessible_folders],
            "accessible_files": [e.to_dict() for e in self.accessible_files],
            "trusted_vendors": [v.to_dict() for v in self.trusted_vendors],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> GroupRule:
        data = data or {}
        return cls(
            accessible_folders=[AccessibleFolder.from_dict(f) for f in data.get("accessible_folders") or []],
            accessible_files=[AccessibleEntry.from_dict(e) for e in data.get("accessible_files") or []],
            trusted_vendors=[TrustedVendorEntry.from_dict(v) for v in data.get("trusted_vendors") or []],
        )


# ---------------------------------------------------------------------------
# The top-level document
# ---------------------------------------------------------------------------


@dataclass
class PolicyDocument:
    """Application-control configuration, keyed by group name."""

    policy_name: str = "default"
    policy_version: str = "1.0"
    group_rules: dict[str, GroupRule] = field(default_factory=dict)

    def get_group(self, name: str) -> GroupRule | None:
        """Return the group rule called *name*, or ``None``."""
        return self.group_rules.get(name)

    def ensure_group(self, name: str) -> GroupRule:
        """Return the group rule called *name*, creating an empty one if needed."""
        group = self.group_rules.get(name)
        if group is None:
            logger.debug("Template has no '%s' group rule; creating an empty one", name)
            group = GroupRule()
            self.group_rules[name] = group
        return group

    # -----------------------------------------------------------------------
    # Construction helpers
    # -----------------------------------------------------------------------

    @classmethod
    def default(cls) -> PolicyDocument:
        """Load the built-in default template that ships with the package."""
        return cls.from_template(_DEFAULT_TEMPLATE_PATH)

    @classmethod
    def default_template_path(cls) -> Path:
        return _DEFAULT_TEMPLATE_PATH

    @classmethod
    def from_template(cls, path: str | Path) -> PolicyDocument:
        """
        Load a policy template from a YAML file.

        A custom template is merged on top of the built-in default so that
        it only needs to spell out the groups and sections it changes.
        """
        path = Path(path)
        raw = cls._read_yaml(path)

        if path.resolve() == _DEFAULT_TEMPLATE_PATH.resolve():
            merged = raw
        else:
            merged = cls._deep_merge(cls._read_yaml(_DEFAULT_TEMPLATE_PATH), raw)

        return cls.from_dict(merged)

    def to_yaml(self, path: str | Path) -> None:
        """Dump the full document to a YAML file for editing."""
        data = self.to_dict()
        with open(path, "w", encoding="utf-8") as fh:
            fh.write("# Allowlist Builder – Policy Template\n")
            fh.write("# Group rules listed here seed every generated policy.\n")
            fh.write("# The target group's accessible folders are pruned before entries are added.\n\n")
            yaml.dump(data, fh, default_flow_style=False, sort_keys=False, width=120)

    # -----------------------------------------------------------------------
    # Internal parsing
    # -----------------------------------------------------------------------

    @staticmethod
    def _read_yaml(path: Path) -> dict[str, Any]:
        if not path.exists():
            raise PolicyTemplateError(f"Policy template not found: {path}")
        try:
            with open(path, encoding="utf-8") as fh:
                raw = yaml.safe_load(fh) or {}
        except (OSError, yaml.YAMLError) as e:
            raise PolicyTemplateError(f"Failed to read policy template {path}: {e}") from e
        if not isinstance(raw, dict):
            raise PolicyTemplateError(f"Policy template {path} must be a mapping, got {type(raw).__name__}")
        return raw

    @staticmethod
    def _deep_merge(base: dict, override: dict) -> dict:
        """Recursively merge *override* into *base*.

        Lists in the override **replace** the base list, so a template can
        narrow a group's folders without repeating every entry.
        """
        result = dict(base)
        for key, val in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(val, dict):
                result[key] = PolicyDocument._deep_merge(result[key], val)
            else:
                result[key] = val
        return result

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> PolicyDocument:
        groups = d.get("group_rules") or {}
        if not isinstance(groups, dict):
            raise PolicyTemplateError("'group_rules' must map group names to rules")
        try:
            group_rules = {str(name): GroupRule.from_dict(rule) for name, rule in groups.items()}
        except (AttributeError, TypeError, ValueError) as e:
            raise PolicyTemplateError(f"Malformed group rule: {e}") from e

        return cls(
            policy_name=str(d.get("policy_name", "default")),
            policy_version=str(d.get("policy_version", "1.0")),
            group_rules=group_rules,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "policy_name": self.policy_name,
            "policy_version": self.policy_version,
            "group_rules": {name: rule.to_dict() for name, rule in self.group_rules.items()},
        }
