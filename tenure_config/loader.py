"""
Configuration Loader (``tenure_config.loader``).

Responsibility
--------------
Loads the YAML configuration file and parses it into the frozen
dataclasses of ``tenure_config.schema``.  Sections and keys that are
absent fall back to the schema defaults; unknown keys are rejected.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Unknown section / key or invalid value  -> ``ValueError``.

``compute_checksum`` produces a deterministic SHA-256 hash of the parsed
configuration, logged on every load so a run can be traced to the exact
settings it used.
"""

from __future__ import annotations

import dataclasses
import hashlib
import json
import os
from collections.abc import Mapping
from importlib import resources
from pathlib import Path
from typing import Any

import yaml

from tenure_config.schema import (
    EligibilityConfig,
    ScheduleConfig,
    StorageConfig,
    TenureEngineConfig,
)
from tenure_engines.catalog import CatalogMatching
from tenure_engines.domain import SupplementTier
from tenure_kernel.logging_config import get_logger

logger = get_logger("config.loader")

DATABASE_URL_ENV = "TENURE_DATABASE_URL"
_DEFAULTS_RESOURCE = "defaults.yaml"


def _section(data: Mapping[str, Any], name: str, allowed: set[str]) -> dict[str, Any]:
    section = data.get(name)
    if section is None:
        return {}
    if not isinstance(section, Mapping):
        raise ValueError(f"Section '{name}' must be a mapping")
    unknown = set(section) - allowed
    if unknown:
        raise ValueError(f"Unknown keys in section '{name}': {sorted(unknown)}")
    return dict(section)


def _str_tuple(value: Any, name: str) -> tuple[str, ...]:
    if isinstance(value, str) or not isinstance(value, (list, tuple)):
        raise ValueError(f"'{name}' must be a list of strings")
    return tuple(str(v) for v in value)


def parse_catalog_matching(data: Mapping[str, Any]) -> CatalogMatching:
    kwargs: dict[str, Any] = {}
    if "fixed_bonus_patterns" in data:
        kwargs["fixed_bonus_patterns"] = _str_tuple(
            data["fixed_bonus_patterns"], "fixed_bonus_patterns",
        )
    if "supplement_patterns" in data:
        kwargs["supplement_patterns"] = _str_tuple(
            data["supplement_patterns"], "supplement_patterns",
        )
    if "tier_fragments" in data:
        raw = data["tier_fragments"]
        if not isinstance(raw, Mapping):
            raise ValueError("'tier_fragments' must be a mapping of tier -> fragments")
        kwargs["tier_fragments"] = {
            SupplementTier(str(tier)): _str_tuple(fragments, f"tier_fragments.{tier}")
            for tier, fragments in raw.items()
        }
    return CatalogMatching(**kwargs)


def parse_config(data: Mapping[str, Any] | None) -> TenureEngineConfig:
    """Parse a configuration mapping (as loaded from YAML)."""
    data = data or {}
    unknown = set(data) - {"eligibility", "catalog", "schedule", "storage"}
    if unknown:
        raise ValueError(f"Unknown configuration sections: {sorted(unknown)}")

    eligibility = _section(data, "eligibility", {"guild_tokens", "owned_concept_type"})
    if "guild_tokens" in eligibility:
        eligibility["guild_tokens"] = _str_tuple(eligibility["guild_tokens"], "guild_tokens")

    catalog = _section(
        data, "catalog", {"fixed_bonus_patterns", "supplement_patterns", "tier_fragments"},
    )
    schedule = _section(data, "schedule", {"tick_interval_seconds", "checkpoint_key"})
    if "tick_interval_seconds" in schedule:
        schedule["tick_interval_seconds"] = int(schedule["tick_interval_seconds"])
    storage = _section(data, "storage", {"database_url"})

    return TenureEngineConfig(
        eligibility=EligibilityConfig(**eligibility),
        catalog=parse_catalog_matching(catalog),
        schedule=ScheduleConfig(**schedule),
        storage=StorageConfig(**storage),
    )


def load_config(path: str | Path | None = None) -> TenureEngineConfig:
    """Load configuration from ``path``, or the packaged defaults.

    The ``TENURE_DATABASE_URL`` environment variable, when set, overrides
    ``storage.database_url``.
    """
    if path is None:
        text = resources.files("tenure_config").joinpath(_DEFAULTS_RESOURCE).read_text(
            encoding="utf-8",
        )
        source = f"package:{_DEFAULTS_RESOURCE}"
    else:
        text = Path(path).read_text(encoding="utf-8")
        source = str(path)

    config = parse_config(yaml.safe_load(text))

    env_url = os.environ.get(DATABASE_URL_ENV)
    if env_url:
        config = dataclasses.replace(config, storage=StorageConfig(database_url=env_url))

    logger.info(
        "config_loaded",
        extra={"source": source, "checksum": compute_checksum(config)},
    )
    return config


def _to_plain(value: Any) -> Any:
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {f.name: _to_plain(getattr(value, f.name)) for f in dataclasses.fields(value)}
    if isinstance(value, Mapping):
        return {str(getattr(k, "value", k)): _to_plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_to_plain(v) for v in value]
    return value


def compute_checksum(config: TenureEngineConfig) -> str:
    """Deterministic SHA-256 of the configuration's canonical JSON form."""
    canonical = json.dumps(_to_plain(config), sort_keys=True, separators=(",", ":"))
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()
