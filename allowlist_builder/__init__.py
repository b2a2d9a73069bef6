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
Allowlist Builder - Application-allowlisting policy builder.
"""

try:
    from ._version import __version__
except ImportError:
    __version__ = "0.0.0+unknown"


def __getattr__(name: str):
    """Lazy-load public API symbols on first access.

    Importing the package alone does not pull in PyYAML or cryptography.
    """
    _lazy_map = {
        "Config": (".config.config", "Config"),
        "AllowlistBuilderConstants": (".config.constants", "AllowlistBuilderConstants"),
        "AllowlistPolicyBuilder": (".core.builder", "AllowlistPolicyBuilder"),
        "build_policy": (".core.builder", "build_policy"),
        "AccessibleEntry": (".core.models", "AccessibleEntry"),
        "TrustedVendorEntry": (".core.models", "TrustedVendorEntry"),
        "FileRecord": (".core.models", "FileRecord"),
        "PolicyDocument": (".core.policy", "PolicyDocument"),
        "GroupRule": (".core.policy", "GroupRule"),
        "load_inventory": (".core.inventory", "load_inventory"),
    }
    if name in _lazy_map:
        module_path, attr = _lazy_map[name]
        import importlib

        mod = importlib.import_module(module_path, __package__)
        val = getattr(mod, attr)
        globals()[name] = val
        return val
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    "AllowlistPolicyBuilder",
    "build_policy",
    "AccessibleEntry",
    "TrustedVendorEntry",
    "FileRecord",
    "PolicyDocument",
    "GroupRule",
    "load_inventory",
    "Config",
    "AllowlistBuilderConstants",
]
