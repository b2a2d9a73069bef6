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


"""Allowlist Builder exceptions.

This module defines custom exceptions for policy building operations.
All exceptions inherit from AllowlistBuilderError for easy catching.

Example:
    >>> from allowlist_builder.core.builder import build_policy
    >>> from allowlist_builder.core.exceptions import CertificateReadError
    >>>
    >>> try:
    ...     artifact = build_policy(trusted_vendors=["C:/Tools/signed.exe"])
    ... except CertificateReadError as e:
    ...     print(f"Failed to read certificate: {e}")
    ... except AllowlistBuilderError as e:
    ...     print(f"Policy build failed: {e}")
"""


class AllowlistBuilderError(Exception):
    """Base exception for all Allowlist Builder errors."""

    pass


class PolicyTemplateError(AllowlistBuilderError):
    """Raised when the default policy template cannot be loaded.

    This can indicate:
    - Missing template file in the package data
    - Invalid YAML in the template or a custom overlay
    - A template whose sections have the wrong shape
    """

    pass


class InventoryLoadError(AllowlistBuilderError):
    """Raised when a file inventory cannot be read or parsed."""

    pass


class RecordValidationError(AllowlistBuilderError):
    """Raised when a file record cannot be turned into an accessible entry.

    This typically indicates a record without a path, or a path that is
    not a string.
    """

    pass


class CertificateReadError(AllowlistBuilderError):
    """Raised when no certificate can be obtained from a signed file.

    This can indicate:
    - The file cannot be read
    - A PE image without an Authenticode signature
    - A signature or certificate blob that does not decode
    """

    pass


class ArtifactWriteError(AllowlistBuilderError):
    """Raised when the policy artifact cannot be written to disk."""

    pass
