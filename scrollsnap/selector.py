from __future__ import annotations
import logging
from typing import List, Optional, Sequence, Tuple

from scrollsnap.types import Decision, SnapMode, SnapPoint, ThresholdPolicy

logger = logging.getLogger(__name__)


def rank_candidates(target: float, candidates: Sequence[SnapPoint]) -> List[Tuple[float, SnapPoint]]:
    """
    (distance, point) pairs, nearest first. sorted() is stable, so equal
    distances keep their snapshot order.
    """
    ranked = [(abs(p.position - target), p) for p in candidates]
    ranked.sort(key=lambda pair: pair[0])
    return ranked


def effective_threshold(point: SnapPoint, axis_extent: float, default_threshold: Optional[float] = None) -> float:
    if point.threshold_override is not None:
        return float(point.threshold_override)
    if default_threshold is not None:
        return float(default_threshold)
    return float(axis_extent)


def _within(distance: float, threshold: float, policy: ThresholdPolicy) -> bool:
    if policy == ThresholdPolicy.FULL:
        return distance <= threshold
    return distance <= threshold / 2


class NearestPointSelector:
    """
    Picks the snap point for a target position.

    MANDATORY   -> nearest candidate, always (None only if there are none)
    PROXIMITY   -> first candidate, nearest first, inside its own threshold
                   window; None when nothing qualifies

    accept_radius overrides the threshold rule for any mode: the first
    candidate with distance <= accept_radius wins. The predictive trigger
    uses it as its look-ahead zone.
    """
    def __init__(self,
                 mode: SnapMode = SnapMode.MANDATORY,
                 default_threshold: Optional[float] = None,
                 policy: ThresholdPolicy = ThresholdPolicy.HALF):
        self.mode = SnapMode(mode)
        self.default_threshold = default_threshold
        self.policy = ThresholdPolicy(policy)

    def select(self,
               target: float,
               candidates: Sequence[SnapPoint],
               axis_extent: float,
               accept_radius: Optional[float] = None) -> Optional[Decision]:
        return select_point(target, candidates, self.mode, axis_extent,
                            default_threshold=self.default_threshold,
                            policy=self.policy,
                            accept_radius=accept_radius)


def select_point(target: float,
                 candidates: Sequence[SnapPoint],
                 mode: SnapMode,
                 axis_extent: float,
                 default_threshold: Optional[float] = None,
                 policy: ThresholdPolicy = ThresholdPolicy.HALF,
                 accept_radius: Optional[float] = None) -> Optional[Decision]:
    if not candidates:
        return None
    ranked = rank_candidates(target, candidates)

    if accept_radius is not None:
        radius = float(accept_radius)
        for distance, point in ranked:
            if distance <= radius:
                return Decision(chosen_point=point, distance=distance,
                                effective_threshold=radius, mode=SnapMode.PROXIMITY)
        return None

    if mode == SnapMode.MANDATORY:
        distance, point = ranked[0]
        return Decision(chosen_point=point, distance=distance,
                        effective_threshold=effective_threshold(point, axis_extent, default_threshold),
                        mode=SnapMode.MANDATORY)

    for distance, point in ranked:
        threshold = effective_threshold(point, axis_extent, default_threshold)
        if _within(distance, threshold, policy):
            return Decision(chosen_point=point, distance=distance,
                            effective_threshold=threshold, mode=SnapMode.PROXIMITY)
    logger.debug("no snap point within threshold of %.1f (%d candidates)", target, len(ranked))
    return None
