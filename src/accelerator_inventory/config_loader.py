"""Utilities to load the accelerator mapping YAML into typed objects.

The mapping file is a top-level list of vendor records validated via the
``accelerator_inventory.config_types`` Pydantic models. Nothing is cached here;
callers build the lookup table once and keep it.
"""

from __future__ import annotations

from collections.abc import Hashable
from pathlib import Path
from typing import List

import yaml
from pydantic import ValidationError

from .config_types import VendorModelsConfig

PROJECT_ROOT = Path(__file__).resolve().parents[2]
DEFAULT_CONFIG_DIR = PROJECT_ROOT / "configs"
DEFAULT_MAPPING_FILE = DEFAULT_CONFIG_DIR / "accelerators.yaml"


class ConfigLoaderError(RuntimeError):
    """Raised when a configuration file is missing or malformed."""


class _IdPreservingLoader(yaml.SafeLoader):
    """SafeLoader that keeps numeric-looking scalars such as ``0x10de`` as strings.

    Repeated keys inside one mapping are rejected instead of last-one-wins.
    """

    def construct_mapping(self, node, deep=False):
        seen = set()
        for key_node, _ in node.value:
            # merged keys (<<) may be overridden by explicit ones
            if key_node.tag == "tag:yaml.org,2002:merge":
                continue
            key = self.construct_object(key_node, deep=deep)
            if not isinstance(key, Hashable):
                continue
            if key in seen:
                raise yaml.constructor.ConstructorError(
                    "while constructing a mapping",
                    node.start_mark,
                    f"found duplicate key {key!r}",
                    key_node.start_mark,
                )
            seen.add(key)
        return super().construct_mapping(node, deep=deep)


_NUMERIC_TAGS = {"tag:yaml.org,2002:int", "tag:yaml.org,2002:float"}
_IdPreservingLoader.yaml_implicit_resolvers = {
    first_char: [(tag, regexp) for tag, regexp in resolvers if tag not in _NUMERIC_TAGS]
    for first_char, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}


def _load_yaml(path: Path) -> object:
    if not path.exists():
        raise ConfigLoaderError(f"Config file not found: {path}")
    try:
        with path.open("r", encoding="utf-8") as fh:
            return yaml.load(fh, Loader=_IdPreservingLoader)  # noqa: S506 - SafeLoader subclass
    except OSError as exc:
        raise ConfigLoaderError(f"failed to open accelerators config file {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigLoaderError(f"failed to parse accelerators config file {path}: {exc}") from exc


def parse_vendor_models(raw: object, source: str = "<memory>") -> List[VendorModelsConfig]:
    """Validate an already parsed document (list of vendor mappings)."""

    if raw is None:
        return []
    if not isinstance(raw, list):
        raise ConfigLoaderError(f"Config {source} should contain a list of vendors at top level")
    try:
        return [VendorModelsConfig.model_validate(item) for item in raw]
    except ValidationError as exc:
        raise ConfigLoaderError(f"failed to unmarshal accelerators config data in {source}: {exc}") from exc


def load_vendor_models(path: Path | None = None) -> List[VendorModelsConfig]:
    """Load vendor/model records from the mapping file (defaults to configs/accelerators.yaml)."""

    mapping_path = Path(path) if path is not None else DEFAULT_MAPPING_FILE
    return parse_vendor_models(_load_yaml(mapping_path), source=str(mapping_path))
