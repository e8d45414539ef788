"""Deterministic config hashing using SHA-256 over sorted JSON."""

import hashlib
import json
from dataclasses import asdict
from typing import Any

from socialgraph.config.analysis import AnalysisConfig


def config_hash(config: Any, exclude_fields: list[str] | None = None) -> str:
    """Deterministic SHA-256 hash of a config dataclass.

    Args:
        config: Any dataclass instance (or sub-config).
        exclude_fields: Optional top-level field names to leave out.

    Returns:
        First 16 hex characters of the SHA-256 hash.
    """
    d = asdict(config)
    for name in exclude_fields or ():
        d.pop(name, None)
    serialized = json.dumps(
        d,
        sort_keys=True,
        ensure_ascii=True,
        separators=(",", ":"),
    )
    return hashlib.sha256(serialized.encode("utf-8")).hexdigest()[:16]


def sbm_config_hash(config: AnalysisConfig) -> str:
    """Hash of the estimator settings only.

    Two configs differing only in description, tags or reporting options
    share the same SBM hash, so their block model fits are interchangeable.
    """
    return config_hash(config.sbm)


def full_config_hash(config: AnalysisConfig) -> str:
    """Hash of the full analysis configuration, description excluded."""
    return config_hash(config, exclude_fields=["description", "tags"])
