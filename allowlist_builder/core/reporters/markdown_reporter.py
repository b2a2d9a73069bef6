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
Markdown format reporter for policy documents.
"""

from ..policy import GroupRule, PolicyDocument


class MarkdownReporter:
    """Generates Markdown summaries of a policy document."""

    def __init__(self, detailed: bool = True):
        """
        Initialize Markdown reporter.

        Args:
            detailed: If True, list every entry of every group
        """
        self.detailed = detailed

    def generate_report(self, document: PolicyDocument) -> str:
        """
        Generate Markdown report.

        Args:
            document: Policy document to summarise

        Returns:
            Markdown string
        """
        lines = []

        lines.append("# Allowlist Policy Report")
        lines.append("")
        lines.append(f"**Policy:** {document.policy_name} (version {document.policy_version})")
        lines.append(f"**Group rules:** {len(document.group_rules)}")
        lines.append("")

        lines.append("## Summary")
        lines.append("")
        lines.append("| Group | Folders | Files | Trusted vendors |")
        lines.append("|-------|---------|-------|-----------------|")
        for name, rule in document.group_rules.items():
            lines.append(
                f"| {name} | {len(rule.accessible_folders)} | {len(rule.accessible_files)} | {len(rule.trusted_vendors)} |"
            )
        lines.append("")

        if self.detailed:
            for name, rule in document.group_rules.items():
                lines.extend(self._group_section(name, rule))

        return "\n".join(lines)

    def _group_section(self, name: str, rule: GroupRule) -> list[str]:
        lines = [f"## {name}", ""]

        if not (rule.accessible_folders or rule.accessible_files or rule.trusted_vendors):
            lines.append("*No entries.*")
            lines.append("")
            return lines

        if rule.accessible_folders:
            lines.append("### Accessible Folders")
            lines.append("")
            for folder in rule.accessible_folders:
                scope = "recursive" if folder.include_subfolders else "top level only"
                lines.append(f"- `{folder.path}` ({scope}) {folder.description}".rstrip())
            lines.append("")

        if rule.accessible_files:
            lines.append("### Accessible Files")
            lines.append("")
            for entry in rule.accessible_files:
                mode = "regex" if entry.use_regex else "literal"
                lines.append(f"- `{entry.path}` [{mode}] {entry.description}")
                enabled = [
                    label
                    for label, metadata_field in (
                        ("company", entry.metadata.company_name),
                        ("vendor", entry.metadata.vendor_name),
                        ("product", entry.metadata.product_name),
                        ("description", entry.metadata.file_description),
                    )
                    if metadata_field.enabled
                ]
                if enabled:
                    lines.append(f"  - Matches on: {', '.join(enabled)}")
            lines.append("")

        if rule.trusted_vendors:
            lines.append("### Trusted Vendors")
            lines.append("")
            for vendor in rule.trusted_vendors:
                lines.append(f"- **{vendor.issued_to}** (expires {vendor.expiry_date})")
                lines.append(f"  - {vendor.description}")
                if vendor.ignore_crl_errors:
                    lines.append(f"  - CRL errors ignored (flags {vendor.crl_validation_flags})")
            lines.append("")

        return lines
