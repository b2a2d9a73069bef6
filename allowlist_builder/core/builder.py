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
Policy builder: drives one run from inputs to a persisted artifact.

Usage
-----
    from allowlist_builder.core.builder import build_policy

    artifact = build_policy(
        accessible_files=[{"Path": r"C:\\Tools\\app.exe", "Company": "Acme"}],
        trusted_vendors=[r"C:\\Tools\\signed.exe"],
        target_path="out/policy.yaml",
    )
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from pathlib import Path
from typing import Any

from ..config.constants import AllowlistBuilderConstants
from .accessible_entry import AccessibleEntryBuilder
from .aggregator import PolicyAggregator
from .backends import PolicyBackend, YamlPolicyBackend
from .certificates import CertificateReader
from .models import FileRecord
from .path_normalizer import PathNormalizer
from .policy import PolicyDocument
from .trusted_vendor import TrustedVendorBuilder
from .writer import ArtifactWriter

logger = logging.getLogger(__name__)

FileRecordInput = FileRecord | Mapping[str, Any]


def _as_record(item: FileRecordInput) -> FileRecord:
    if isinstance(item, FileRecord):
        return item
    return FileRecord.from_dict(dict(item))


class AllowlistPolicyBuilder:
    """Builds allowlist policies from file records and signed files.

    Entries are processed in input order and the first failing record
    aborts the run.
    """

    def __init__(
        self,
        normalizer: PathNormalizer | None = None,
        certificate_reader: CertificateReader | None = None,
        backend: PolicyBackend | None = None,
        template_path: str | Path | None = None,
        token_factory: Callable[[], str] | None = None,
    ):
        """
        Initialize the builder.

        Args:
            normalizer: Path normalizer for accessible entries
            certificate_reader: Reader for signer certificates
            backend: Serialization backend (default: YAML)
            template_path: Custom template overlaid on the built-in default
            token_factory: Source of unique match-key suffixes in pattern mode
        """
        self.accessible_builder = AccessibleEntryBuilder(normalizer=normalizer, token_factory=token_factory)
        self.vendor_builder = TrustedVendorBuilder(reader=certificate_reader)
        self.backend = backend or YamlPolicyBackend()
        self.template_path = template_path

    def build(
        self,
        accessible_files: Iterable[FileRecordInput] | None = None,
        trusted_vendors: Iterable[str | Path] | None = None,
        use_regex: bool = AllowlistBuilderConstants.DEFAULT_USE_REGEX,
        group_rule: str = AllowlistBuilderConstants.DEFAULT_GROUP_RULE,
        ignore_crl: bool = AllowlistBuilderConstants.DEFAULT_IGNORE_CRL,
    ) -> PolicyDocument:
        """
        Build the aggregate policy document without writing it.

        Raises:
            AllowlistBuilderError: On the first record or certificate that fails
        """
        aggregator = PolicyAggregator(template_path=self.template_path)
        document = aggregator.initialize(group_rule)

        file_count = 0
        if accessible_files is not None:
            for item in accessible_files:
                entry = self.accessible_builder.build(_as_record(item), use_regex=use_regex)
                aggregator.append_accessible_entry(entry)
                file_count += 1

        vendor_count = 0
        if trusted_vendors is not None:
            for path in trusted_vendors:
                entry = self.vendor_builder.build(path, ignore_crl=ignore_crl)
                aggregator.append_trusted_vendor(entry)
                vendor_count += 1

        if not file_count and not vendor_count:
            logger.warning("No entries given; group '%s' holds only the pruned template", group_rule)
        logger.info(
            "Group '%s': added %d accessible file(s) and %d trusted vendor(s)", group_rule, file_count, vendor_count
        )
        return document

    def run(
        self,
        accessible_files: Iterable[FileRecordInput] | None = None,
        trusted_vendors: Iterable[str | Path] | None = None,
        use_regex: bool = AllowlistBuilderConstants.DEFAULT_USE_REGEX,
        group_rule: str = AllowlistBuilderConstants.DEFAULT_GROUP_RULE,
        target_path: str | Path | None = None,
        ignore_crl: bool = AllowlistBuilderConstants.DEFAULT_IGNORE_CRL,
    ) -> Path:
        """
        Build the policy and persist it.

        Returns:
            Path of the written artifact
        """
        document = self.build(
            accessible_files=accessible_files,
            trusted_vendors=trusted_vendors,
            use_regex=use_regex,
            group_rule=group_rule,
            ignore_crl=ignore_crl,
        )
        if target_path is None:
            target_path = AllowlistBuilderConstants.get_default_target_path(self.backend.file_extension)
        return ArtifactWriter(self.backend).persist(document, target_path)


def build_policy(
    accessible_files: Iterable[FileRecordInput] | None = None,
    trusted_vendors: Iterable[str | Path] | None = None,
    use_regex: bool = AllowlistBuilderConstants.DEFAULT_USE_REGEX,
    group_rule: str = AllowlistBuilderConstants.DEFAULT_GROUP_RULE,
    target_path: str | Path | None = None,
    ignore_crl: bool = AllowlistBuilderConstants.DEFAULT_IGNORE_CRL,
    **builder_options: Any,
) -> Path:
    """
    Convenience function to build and persist a policy.

    Args:
        accessible_files: File records (``FileRecord`` or ``Path``/``Company``/... mappings)
        trusted_vendors: Signed files whose signer certificate should be trusted
        use_regex: Treat paths as regular expressions
        group_rule: Group the entries are added to
        target_path: Artifact location (default: temp directory)
        ignore_crl: Suppress revocation-check errors for trusted vendors
        **builder_options: Forwarded to ``AllowlistPolicyBuilder``

    Returns:
        Path of the written artifact
    """
    builder = AllowlistPolicyBuilder(**builder_options)
    return builder.run(
        accessible_files=accessible_files,
        trusted_vendors=trusted_vendors,
        use_regex=use_regex,
        group_rule=group_rule,
        target_path=target_path,
        ignore_crl=ignore_crl,
    )
