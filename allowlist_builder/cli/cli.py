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


"""Command-line interface for the Allowlist Builder."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from ..config.config import Config
from ..core.backends import backend_for_path, backend_names, get_backend
from ..core.builder import AllowlistPolicyBuilder
from ..core.exceptions import AllowlistBuilderError
from ..core.inventory import InventoryLoader
from ..core.models import FileRecord
from ..core.policy import PolicyDocument
from ..core.reporters.markdown_reporter import MarkdownReporter

logger = logging.getLogger("allowlist_builder.cli")


# ---------------------------------------------------------------------------
# Shared helpers
# ---------------------------------------------------------------------------


def _configure_logging(args: argparse.Namespace) -> None:
    level = logging.DEBUG if getattr(args, "verbose", False) else logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def _load_config(args: argparse.Namespace) -> Config:
    """Load configuration from ``--env-file`` or the environment."""
    env_file = getattr(args, "env_file", None)
    if env_file:
        return Config.from_file(Path(env_file))
    return Config.from_env()


def _collect_records(args: argparse.Namespace) -> list[FileRecord] | None:
    """Gather file records from ``--inventory`` files and ``--file`` paths."""
    if not args.inventory and not args.file:
        return None

    loader = InventoryLoader()
    records: list[FileRecord] = []
    for inventory in args.inventory or []:
        records.extend(loader.load(inventory))
    for path in args.file or []:
        records.append(FileRecord(path=path))
    return records


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


def build_command(args: argparse.Namespace) -> int:
    """Handle the ``build`` command."""
    config = _load_config(args)

    group_rule = args.group_rule or config.group_rule
    output_format = args.format or config.output_format
    template_path = args.template or config.template_path
    use_regex = args.use_regex or config.use_regex
    ignore_crl = config.ignore_crl and not args.no_ignore_crl

    try:
        backend = get_backend(output_format)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    target_path = Path(args.output) if args.output else config.resolve_target_path(backend.file_extension)

    try:
        records = _collect_records(args)
        builder = AllowlistPolicyBuilder(backend=backend, template_path=template_path)
        artifact = builder.run(
            accessible_files=records,
            trusted_vendors=args.trusted_vendor or None,
            use_regex=use_regex,
            group_rule=group_rule,
            target_path=target_path,
            ignore_crl=ignore_crl,
        )
    except AllowlistBuilderError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(artifact)
    return 0


def inspect_command(args: argparse.Namespace) -> int:
    """Handle the ``inspect`` command."""
    artifact = Path(args.artifact)
    if not artifact.exists():
        print(f"Error: Policy artifact does not exist: {artifact}", file=sys.stderr)
        return 1

    backend = get_backend(args.format) if args.format else backend_for_path(artifact)
    try:
        document = backend.load(artifact)
    except AllowlistBuilderError as e:
        print(f"Error loading policy artifact: {e}", file=sys.stderr)
        return 1

    print(MarkdownReporter(detailed=not args.summary).generate_report(document))
    return 0


def generate_template_command(args: argparse.Namespace) -> int:
    """Handle the ``generate-template`` command."""
    output_path = Path(args.output)
    try:
        PolicyDocument.default().to_yaml(output_path)
    except (AllowlistBuilderError, OSError) as e:
        print(f"Error generating template: {e}", file=sys.stderr)
        return 1

    print(f"Generated policy template: {output_path}\n")
    print("Edit the file to customise, then use:")
    print(f"  allowlist-builder build --template {output_path} --inventory files.csv\n")
    return 0


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def main() -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Allowlist Builder - Build application-allowlisting policies from scan results",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  allowlist-builder build --inventory files.csv -o policy.yaml
  allowlist-builder build --inventory files.json --use-regex --group-rule Administrators
  allowlist-builder build --trusted-vendor C:/Tools/signed.exe --no-ignore-crl
  allowlist-builder inspect policy.yaml
  allowlist-builder generate-template -o template.yaml
        """,
    )
    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    # -- build -------------------------------------------------------------
    build_p = subparsers.add_parser("build", help="Build a policy artifact")
    build_p.add_argument(
        "--inventory", "-i", action="append", help="File inventory (YAML, JSON or CSV); repeatable"
    )
    build_p.add_argument("--file", action="append", help="Path to allow without metadata; repeatable")
    build_p.add_argument(
        "--trusted-vendor", "-t", action="append", help="Signed file or certificate to trust; repeatable"
    )
    build_p.add_argument("--use-regex", action="store_true", help="Treat paths as regular expressions")
    build_p.add_argument("--group-rule", "-g", help="Group rule to add entries to (default: Everyone)")
    build_p.add_argument("--output", "-o", help="Artifact path (default: temp directory)")
    build_p.add_argument("--format", "-f", choices=backend_names(), help="Artifact format (default: yaml)")
    build_p.add_argument("--template", help="Custom policy template overlaid on the built-in default")
    build_p.add_argument(
        "--no-ignore-crl", action="store_true", help="Do not suppress certificate revocation errors"
    )
    build_p.add_argument("--env-file", help="Load ALLOWLIST_BUILDER_* settings from a .env file")
    build_p.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")

    # -- inspect -----------------------------------------------------------
    inspect_p = subparsers.add_parser("inspect", help="Summarise a policy artifact")
    inspect_p.add_argument("artifact", help="Path to policy artifact")
    inspect_p.add_argument("--format", "-f", choices=backend_names(), help="Artifact format (default: from extension)")
    inspect_p.add_argument("--summary", action="store_true", help="Only print per-group counts")
    inspect_p.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")

    # -- generate-template -------------------------------------------------
    gt_p = subparsers.add_parser("generate-template", help="Write the built-in policy template")
    gt_p.add_argument("--output", "-o", default="policy_template.yaml", help="Output file path")

    # -- dispatch ----------------------------------------------------------
    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        return 1

    _configure_logging(args)

    dispatch = {
        "build": build_command,
        "inspect": inspect_command,
        "generate-template": generate_template_command,
    }
    handler = dispatch.get(args.command)
    if handler:
        return handler(args)

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
