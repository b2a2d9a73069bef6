# Copyright 2026 Cisco Systems, Inc. and its affiliates
# SPDX-License-Identifier: Apache-2.0

"""Tests for accessible-entry construction."""

import dataclasses
import itertools

import pytest

from allowlist_builder.core.accessible_entry import AccessibleEntryBuilder, new_match_token
from allowlist_builder.core.exceptions import RecordValidationError
from allowlist_builder.core.models import FileRecord


class TestLiteralMode:
    """Match keys in literal mode."""

    def test_match_key_is_normalized_path(self, recording_normalizer):
        builder = AccessibleEntryBuilder(normalizer=recording_normalizer)
        entry = builder.build(FileRecord(path="C:\\Tools\\app.exe", company="Acme"))

        assert entry.path == "%TOOLS%\\app.exe"
        assert entry.match_key == "%TOOLS%\\app.exe"
        assert entry.use_regex is False
        assert recording_normalizer.seen == ["C:\\Tools\\app.exe"]

    def test_trusted_ownership_checking_is_off(self, recording_normalizer):
        entry = AccessibleEntryBuilder(normalizer=recording_normalizer).build(FileRecord(path="C:\\a.exe"))
        assert entry.trusted_ownership_checking is False

    def test_missing_metadata_still_builds(self, recording_normalizer):
        entry = AccessibleEntryBuilder(normalizer=recording_normalizer).build(FileRecord(path="C:\\a.exe"))
        assert entry.description == "[No metadata found]"


class TestPatternMode:
    """Match keys in regular-expression mode."""

    def test_identical_paths_get_distinct_keys(self, recording_normalizer):
        builder = AccessibleEntryBuilder(normalizer=recording_normalizer)
        record = FileRecord(path="C:\\Tools\\.*\\.exe")

        first = builder.build(record, use_regex=True)
        second = builder.build(record, use_regex=True)

        assert first.match_key != second.match_key
        assert first.match_key.startswith("%TOOLS%\\.*\\.exe ")
        assert second.match_key.startswith("%TOOLS%\\.*\\.exe ")
        assert first.path == second.path == "%TOOLS%\\.*\\.exe"
        assert first.use_regex and second.use_regex

    def test_key_is_path_space_token(self, recording_normalizer):
        tokens = (f"token-{i}" for i in itertools.count())
        builder = AccessibleEntryBuilder(normalizer=recording_normalizer, token_factory=lambda: next(tokens))

        entry = builder.build(FileRecord(path="C:\\Tools\\a.exe"), use_regex=True)
        assert entry.match_key == "%TOOLS%\\a.exe token-0"

    def test_default_token_is_128_bit_uuid(self):
        token = new_match_token()
        assert len(token.replace("-", "")) == 32
        assert token != new_match_token()


class TestEntryImmutability:
    """Entries are fresh values per record."""

    def test_entry_is_frozen(self, recording_normalizer):
        entry = AccessibleEntryBuilder(normalizer=recording_normalizer).build(FileRecord(path="C:\\a.exe"))
        with pytest.raises(dataclasses.FrozenInstanceError):
            entry.description = "changed"  # type: ignore[misc]

    def test_entries_do_not_share_metadata(self, recording_normalizer):
        builder = AccessibleEntryBuilder(normalizer=recording_normalizer)
        first = builder.build(FileRecord(path="C:\\a.exe", company="Acme", description="Tool"))
        second = builder.build(FileRecord(path="C:\\b.exe"))

        assert first.description == "Tool"
        assert second.description == "[No metadata found]"
        assert first.metadata.company_name.enabled
        assert not second.metadata.company_name.enabled


class TestRecordValidation:
    """Records without a path are rejected."""

    @pytest.mark.parametrize("path", ["", "   "])
    def test_blank_path_raises(self, recording_normalizer, path):
        with pytest.raises(RecordValidationError):
            AccessibleEntryBuilder(normalizer=recording_normalizer).build(FileRecord(path=path))
