"""Weighted bounded-L1 similarity between two feature vectors."""

from __future__ import annotations

from ..types import FEATURE_KEYS, FeatureVector, FeatureWeights


def weighted_similarity(
    observed: FeatureVector,
    reference: FeatureVector,
    weights: FeatureWeights,
) -> float:
    """Weighted mean of ``1 - |observed - reference|`` over weighted axes.

    Both vectors live in the unit cube, so every per-axis term is in
    [0, 1] and so is the result. Axes with zero weight are skipped; if no
    axis carries weight the similarity is 0. Swapping ``observed`` and
    ``reference`` gives the same value.
    """

    weighted_sum = 0.0
    total_weight = 0.0
    for key in FEATURE_KEYS:
        weight = getattr(weights, key)
        if weight <= 0.0:
            continue
        # Identical vectors must score exactly 1.0: both sums share one order.
        weighted_sum += (1.0 - abs(getattr(observed, key) - getattr(reference, key))) * weight
        total_weight += weight

    if total_weight <= 0.0:
        return 0.0
    return weighted_sum / total_weight
