# Copyright 2026 Cisco Systems, Inc. and its affiliates
# SPDX-License-Identifier: Apache-2.0

"""Tests for the policy document, template loading and the aggregator."""

import pytest

from allowlist_builder.core.aggregator import PolicyAggregator
from allowlist_builder.core.exceptions import AllowlistBuilderError, PolicyTemplateError
from allowlist_builder.core.models import AccessibleEntry
from allowlist_builder.core.policy import AccessibleFolder, GroupRule, PolicyDocument


class TestDefaultTemplate:
    """Test the built-in template that ships with the package."""

    def test_default_loads(self):
        document = PolicyDocument.default()
        assert document.policy_name == "default"
        assert document.policy_version == "1.0"
        assert set(document.group_rules) == {"Everyone", "Administrators"}

    def test_default_everyone_has_placeholder_folders(self):
        everyone = PolicyDocument.default().get_group("Everyone")
        paths = [folder.path for folder in everyone.accessible_folders]
        assert "%PROGRAMFILES%" in paths
        assert everyone.accessible_files == []
        assert everyone.trusted_vendors == []

    def test_default_template_path_exists(self):
        assert PolicyDocument.default_template_path().exists()

    def test_every_load_is_independent(self):
        first = PolicyDocument.default()
        first.get_group("Everyone").accessible_folders.clear()
        assert PolicyDocument.default().get_group("Everyone").accessible_folders


class TestCustomTemplate:
    """Test overlaying an organisation template on the defaults."""

    def test_overlay_replaces_group_lists(self, tmp_path):
        template = tmp_path / "corp.yaml"
        template.write_text(
            "policy_name: corp\n"
            "group_rules:\n"
            "  Everyone:\n"
            "    accessible_folders:\n"
            "      - path: '%PROGRAMDATA%\\Corp'\n"
        )
        document = PolicyDocument.from_template(template)

        assert document.policy_name == "corp"
        assert [f.path for f in document.get_group("Everyone").accessible_folders] == ["%PROGRAMDATA%\\Corp"]
        assert "Administrators" in document.group_rules

    def test_overlay_can_add_groups(self, tmp_path):
        template = tmp_path / "corp.yaml"
        template.write_text("group_rules:\n  Developers:\n    accessible_folders: []\n")
        document = PolicyDocument.from_template(template)
        assert document.get_group("Developers") is not None
        assert document.get_group("Everyone") is not None

    def test_missing_template_raises(self, tmp_path):
        with pytest.raises(PolicyTemplateError, match="not found"):
            PolicyDocument.from_template(tmp_path / "nope.yaml")

    def test_invalid_yaml_raises(self, tmp_path):
        template = tmp_path / "bad.yaml"
        template.write_text("group_rules: [unclosed\n")
        with pytest.raises(PolicyTemplateError):
            PolicyDocument.from_template(template)

    def test_non_mapping_template_raises(self, tmp_path):
        template = tmp_path / "list.yaml"
        template.write_text("- one\n- two\n")
        with pytest.raises(PolicyTemplateError, match="mapping"):
            PolicyDocument.from_template(template)

    def test_malformed_group_rules_raise(self, tmp_path):
        template = tmp_path / "bad_groups.yaml"
        template.write_text("group_rules:\n  - Everyone\n")
        with pytest.raises(PolicyTemplateError):
            PolicyDocument.from_template(template)

    def test_to_yaml_round_trips(self, tmp_path):
        path = tmp_path / "dump.yaml"
        PolicyDocument.default().to_yaml(path)

        assert path.read_text(encoding="utf-8").startswith("# Allowlist Builder")
        reloaded = PolicyDocument.from_template(path)
        assert reloaded.to_dict() == PolicyDocument.default().to_dict()


class TestGroupRule:
    """Test the keyed view of accessible files."""

    def test_files_by_match_key_later_entry_wins(self):
        first = AccessibleEntry(path="%TOOLS%\\a.exe", match_key="%TOOLS%\\a.exe", description="first")
        second = AccessibleEntry(path="%TOOLS%\\a.exe", match_key="%TOOLS%\\a.exe", description="second")
        rule = GroupRule(accessible_files=[first, second])

        keyed = rule.files_by_match_key()
        assert list(keyed) == ["%TOOLS%\\a.exe"]
        assert keyed["%TOOLS%\\a.exe"].description == "second"
        assert len(rule.accessible_files) == 2

    def test_folder_defaults(self):
        folder = AccessibleFolder.from_dict({"path": "%WINDIR%"})
        assert folder.include_subfolders is True
        assert folder.description == ""


class TestPolicyAggregator:
    """Test initialization, pruning and appending."""

    def test_initialize_prunes_target_group_folders(self):
        aggregator = PolicyAggregator()
        document = aggregator.initialize("Everyone")

        assert document.get_group("Everyone").accessible_folders == []
        assert document.get_group("Administrators").accessible_folders

    def test_initialize_creates_missing_group(self):
        aggregator = PolicyAggregator()
        document = aggregator.initialize("Contractors")

        group = document.get_group("Contractors")
        assert group is not None
        assert group.accessible_folders == []
        assert document.get_group("Everyone").accessible_folders

    def test_uninitialized_access_raises(self):
        with pytest.raises(AllowlistBuilderError, match="not been initialized"):
            PolicyAggregator().document

    def test_append_preserves_order(self):
        aggregator = PolicyAggregator()
        aggregator.initialize()
        for name in ("b.exe", "a.exe", "c.exe"):
            aggregator.append_accessible_entry(AccessibleEntry(path=name, match_key=name))

        assert [e.path for e in aggregator.group_rule.accessible_files] == ["b.exe", "a.exe", "c.exe"]

    def test_custom_template_is_used(self, tmp_path):
        template = tmp_path / "corp.yaml"
        template.write_text("policy_name: corp\n")
        document = PolicyAggregator(template_path=template).initialize()
        assert document.policy_name == "corp"
