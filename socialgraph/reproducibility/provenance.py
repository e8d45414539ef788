"""Code and library provenance recorded alongside analysis results."""

import subprocess
from importlib import metadata

TRACKED_DISTRIBUTIONS = ("numpy", "scipy", "scikit-learn", "dacite")


def get_git_hash() -> str:
    """Short git SHA of HEAD, suffixed '-dirty' when the tree has changes.

    Returns "unknown" outside a git checkout or when git is unavailable.
    """
    try:
        sha = subprocess.check_output(
            ["git", "rev-parse", "--short", "HEAD"],
            stderr=subprocess.DEVNULL,
        ).decode().strip()
        status = subprocess.check_output(
            ["git", "status", "--porcelain", "--untracked-files=no"],
            stderr=subprocess.DEVNULL,
        ).decode().strip()
    except (subprocess.CalledProcessError, FileNotFoundError):
        return "unknown"
    return f"{sha}-dirty" if status else sha


def library_versions() -> dict[str, str]:
    """Installed versions of the numerical stack, "missing" when absent."""
    versions = {}
    for dist in TRACKED_DISTRIBUTIONS:
        try:
            versions[dist] = metadata.version(dist)
        except metadata.PackageNotFoundError:
            versions[dist] = "missing"
    return versions
