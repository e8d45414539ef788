"""Reproducibility infrastructure: seed management and provenance tracking."""

from socialgraph.reproducibility.provenance import get_git_hash, library_versions
from socialgraph.reproducibility.seed import (
    derive_rng,
    resolve_seed,
    set_seed,
)

__all__ = [
    "derive_rng",
    "get_git_hash",
    "library_versions",
    "resolve_seed",
    "set_seed",
]
