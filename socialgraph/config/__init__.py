"""Analysis configuration system with frozen, hashable, serializable dataclasses."""

from socialgraph.config.analysis import (
    AnalysisConfig,
    BaselineConfig,
    CentralityConfig,
    SBMConfig,
)
from socialgraph.config.defaults import DEFAULT_CONFIG
from socialgraph.config.hashing import config_hash, full_config_hash, sbm_config_hash
from socialgraph.config.serialization import (
    config_from_dict,
    config_from_json,
    config_to_dict,
    config_to_json,
)

__all__ = [
    "AnalysisConfig",
    "BaselineConfig",
    "CentralityConfig",
    "SBMConfig",
    "DEFAULT_CONFIG",
    "config_hash",
    "full_config_hash",
    "sbm_config_hash",
    "config_from_dict",
    "config_from_json",
    "config_to_dict",
    "config_to_json",
]
