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
File inventory loader.

Inventories are the output of a filesystem scan: one record per file with
``Path``, ``Company``, ``Vendor``, ``Product`` and ``Description``.  They
can be YAML, JSON or CSV.  YAML and JSON inventories are either a list of
records or a mapping with the list under ``files`` or ``accessible_files``.
"""

from __future__ import annotations

import csv
import json
import logging
from pathlib import Path
from typing import Any

import yaml

from .exceptions import InventoryLoadError
from .models import FileRecord

logger = logging.getLogger(__name__)


class InventoryLoader:
    """Loads file records from inventory files."""

    YAML_EXTENSIONS = {".yaml", ".yml"}
    JSON_EXTENSIONS = {".json"}
    CSV_EXTENSIONS = {".csv"}

    _LIST_KEYS = ("files", "accessible_files")

    def load(self, inventory_path: str | Path) -> list[FileRecord]:
        """
        Load every record of an inventory file, in file order.

        Raises:
            InventoryLoadError: If the file cannot be read or a record is malformed
        """
        path = Path(inventory_path)
        if not path.exists():
            raise InventoryLoadError(f"Inventory file does not exist: {path}")

        suffix = path.suffix.lower()
        try:
            with open(path, encoding="utf-8-sig", newline="") as f:
                if suffix in self.CSV_EXTENSIONS:
                    rows: Any = list(csv.DictReader(f))
                elif suffix in self.JSON_EXTENSIONS:
                    rows = json.load(f)
                elif suffix in self.YAML_EXTENSIONS:
                    rows = yaml.safe_load(f)
                else:
                    raise InventoryLoadError(f"Unsupported inventory format: {path.suffix or path.name}")
        except (OSError, UnicodeDecodeError, csv.Error, json.JSONDecodeError, yaml.YAMLError) as e:
            raise InventoryLoadError(f"Failed to read inventory {path}: {e}") from e

        records = [self._to_record(row, path, index) for index, row in enumerate(self._unwrap(rows, path), start=1)]
        logger.info("Loaded %d record(s) from %s", len(records), path)
        return records

    def _unwrap(self, rows: Any, path: Path) -> list[Any]:
        if rows is None:
            return []
        if isinstance(rows, dict):
            for key in self._LIST_KEYS:
                if key in rows:
                    rows = rows[key] or []
                    break
            else:
                raise InventoryLoadError(f"Inventory {path} has no 'files' list")
        if not isinstance(rows, list):
            raise InventoryLoadError(f"Inventory {path} must contain a list of records")
        return rows

    @staticmethod
    def _to_record(row: Any, path: Path, index: int) -> FileRecord:
        if isinstance(row, str):
            return FileRecord(path=row)
        if not isinstance(row, dict):
            raise InventoryLoadError(f"{path}: record {index} is not a mapping")
        record = FileRecord.from_dict(row)
        if not record.path.strip():
            raise InventoryLoadError(f"{path}: record {index} has no Path")
        return record


def load_inventory(inventory_path: str | Path) -> list[FileRecord]:
    """
    Convenience function to load a file inventory.

    Args:
        inventory_path: Path to a YAML, JSON or CSV inventory

    Returns:
        File records in inventory order
    """
    return InventoryLoader().load(inventory_path)
