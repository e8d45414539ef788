"""JSON serialization and deserialization for analysis configs."""

import json
from dataclasses import asdict
from typing import Any

from dacite import Config as DaciteConfig
from dacite import from_dict

from socialgraph.config.analysis import AnalysisConfig

# strict=True rejects unknown keys; cast=[tuple] turns JSON arrays back into tags.
_DACITE_CONFIG = DaciteConfig(cast=[tuple], check_types=True, strict=True)


def config_to_json(config: AnalysisConfig) -> str:
    """Serialize an AnalysisConfig to an indented, key-sorted JSON string."""
    return json.dumps(asdict(config), indent=2, sort_keys=True)


def config_from_json(json_str: str) -> AnalysisConfig:
    """Deserialize a JSON string to an AnalysisConfig.

    Missing sections fall back to their defaults, so a config file may carry
    only the fields it overrides, e.g. ``{"sbm": {"k_max": 4}}``.
    """
    return config_from_dict(json.loads(json_str))


def config_to_dict(config: AnalysisConfig) -> dict[str, Any]:
    """Convert an AnalysisConfig to a plain dictionary."""
    return asdict(config)


def config_from_dict(d: dict[str, Any]) -> AnalysisConfig:
    """Reconstruct an AnalysisConfig from a plain dictionary."""
    return from_dict(data_class=AnalysisConfig, data=d, config=_DACITE_CONFIG)
