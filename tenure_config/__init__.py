"""
tenure_config -- YAML-backed configuration for the tenure reconciliation engine.

Public API:
    load_config(path=None)  -> TenureEngineConfig
    parse_config(mapping)   -> TenureEngineConfig
    compute_checksum(config) -> str
"""

from tenure_config.loader import compute_checksum, load_config, parse_config
from tenure_config.schema import (
    EligibilityConfig,
    ScheduleConfig,
    StorageConfig,
    TenureEngineConfig,
)

__all__ = [
    "EligibilityConfig",
    "ScheduleConfig",
    "StorageConfig",
    "TenureEngineConfig",
    "compute_checksum",
    "load_config",
    "parse_config",
]
