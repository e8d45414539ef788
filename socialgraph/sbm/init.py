"""Initial block memberships for variational EM.

Seeds are hard partitions softened towards uniform, so the first E-step can
still move every node.
"""

import logging
import warnings

import numpy as np
import scipy.linalg
from sklearn.cluster import KMeans
from sklearn.exceptions import ConvergenceWarning

log = logging.getLogger(__name__)

PERTURB_FRACTION = 0.1  # share of nodes relabeled in perturbed spectral seeds


def soften(labels: np.ndarray, K: int, smoothing: float) -> np.ndarray:
    """Turn hard labels into row-stochastic memberships.

    Z = (1 - smoothing) * onehot(labels) + smoothing / K
    """
    n = len(labels)
    Z = np.full((n, K), smoothing / K, dtype=np.float64)
    Z[np.arange(n), labels] += 1.0 - smoothing
    return Z


def random_labels(n: int, K: int, rng: np.random.Generator) -> np.ndarray:
    """Balanced random partition; every block is non-empty when n >= K."""
    return rng.permutation(np.arange(n) % K)


def spectral_labels(
    adjacency: np.ndarray, K: int, rng: np.random.Generator
) -> np.ndarray:
    """k-means on the row-normalized leading K eigenvectors of A.

    Eigenvectors are ranked by eigenvalue magnitude so that strongly
    disassortative structure is picked up as well as communities.
    """
    n = adjacency.shape[0]
    if K == 1:
        return np.zeros(n, dtype=np.int64)

    eigvals, eigvecs = scipy.linalg.eigh(adjacency)
    top = np.argsort(-np.abs(eigvals), kind="stable")[:K]
    embedding = eigvecs[:, top]
    norms = np.linalg.norm(embedding, axis=1, keepdims=True)
    embedding = embedding / np.where(norms > 0, norms, 1.0)

    kmeans = KMeans(
        n_clusters=K,
        n_init=10,
        random_state=int(rng.integers(2**31 - 1)),
    )
    # Fewer distinct embedding rows than K (e.g. an edgeless graph) only
    # yields duplicate centers; EM sorts the memberships out.
    with warnings.catch_warnings():
        warnings.simplefilter("ignore", ConvergenceWarning)
        labels = kmeans.fit_predict(embedding)
    return labels.astype(np.int64)


def perturbed_labels(
    labels: np.ndarray, K: int, fraction: float, rng: np.random.Generator
) -> np.ndarray:
    """Copy of labels with about fraction of the nodes moved to random blocks."""
    labels = labels.copy()
    moved = rng.random(len(labels)) < fraction
    labels[moved] = rng.integers(0, K, size=int(moved.sum()))
    return labels


def initial_memberships(
    adjacency: np.ndarray,
    K: int,
    restart: int,
    strategy: str,
    smoothing: float,
    rng: np.random.Generator,
) -> np.ndarray:
    """Membership seed for one restart.

    Restart 0 is always seeded spectrally. Later restarts perturb a spectral
    seed under the "spectral" strategy and draw a fresh balanced random
    partition under "random".
    """
    n = adjacency.shape[0]
    if restart == 0 or strategy == "spectral":
        labels = spectral_labels(adjacency, K, rng)
        if restart > 0:
            labels = perturbed_labels(labels, K, PERTURB_FRACTION, rng)
        log.debug(
            "K=%d restart=%d: spectral seed sizes %s",
            K, restart, np.bincount(labels, minlength=K).tolist(),
        )
    else:
        labels = random_labels(n, K, rng)
    return soften(labels, K, smoothing)
