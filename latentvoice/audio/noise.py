"""Gaussian noise sampling for the initial denoising latent.

Responsibilities:
- Draw standard-normal samples with the Box-Muller transform.
- Offer seeded, reproducible sampling for tests and repeatable runs.
"""

from __future__ import annotations

import numpy as np


class GaussianNoiseSampler:
    """Box-Muller sampler over a numpy random `Generator`.

    Each pair of output slots `(2k, 2k+1)` is filled from two independent
    uniform draws as `(r cos theta, r sin theta)`. For odd sizes the last
    pair's sine sample is discarded, so a seeded sampler returns the same
    prefix for sizes `2n - 1` and `2n`.
    """

    def __init__(self, seed: int | None = None) -> None:
        """Initialize with an optional seed; `None` draws fresh OS entropy."""

        self._seed = seed
        self._rng = np.random.default_rng(seed)

    @property
    def seed(self) -> int | None:
        return self._seed

    def sample(self, size: int) -> np.ndarray:
        """Return `size` float32 standard-normal samples."""

        if size <= 0:
            raise ValueError("Noise sample size must be a positive integer.")

        pairs = (size + 1) // 2
        # 1 - U[0, 1) keeps u1 in (0, 1] so the log stays finite.
        u1 = 1.0 - self._rng.random(pairs)
        u2 = self._rng.random(pairs)
        radius = np.sqrt(-2.0 * np.log(u1))
        theta = 2.0 * np.pi * u2

        noise = np.empty(pairs * 2, dtype=np.float64)
        noise[0::2] = radius * np.cos(theta)
        noise[1::2] = radius * np.sin(theta)
        return noise[:size].astype(np.float32)
