from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


class SnapMode(str, Enum):
    MANDATORY = "mandatory"
    PROXIMITY = "proximity"


class ThresholdPolicy(str, Enum):
    HALF = "half"   # symmetric window: distance <= threshold / 2
    FULL = "full"   # one-sided: distance <= threshold


class Initiator(str, Enum):
    NONE = "none"
    SNAP = "snap"
    PREDICTIVE = "predictive"
    USER = "user"


class Source(str, Enum):
    EXPLICIT = "explicit"
    ELEMENT = "element"


class Align(str, Enum):
    START = "start"
    CENTER = "center"
    END = "end"


@dataclass(frozen=True)
class Rect:
    top: float = 0.0
    left: float = 0.0
    width: float = 0.0
    height: float = 0.0

    @property
    def bottom(self) -> float: return self.top + self.height
    @property
    def right(self) -> float: return self.left + self.width


@dataclass(frozen=True)
class SnapPoint:
    id: int
    position: float
    user_data: Any = None
    source: Source = Source.EXPLICIT
    threshold_override: Optional[float] = None
    align: Optional[Align] = None       # only set for element-derived points


@dataclass(frozen=True)
class ScrollSample:
    """A single position/velocity report from the scroll engine."""
    position: float
    velocity: float
    previous_velocity: float = 0.0
    initiator: Initiator = Initiator.NONE
    timestamp: float = 0.0

    @property
    def self_generated(self) -> bool:
        return self.initiator in (Initiator.SNAP, Initiator.PREDICTIVE)


@dataclass(frozen=True)
class VelocityClass:
    is_decelerating: bool
    is_reversing: bool
    is_coasting: bool


@dataclass(frozen=True)
class Decision:
    chosen_point: SnapPoint
    distance: float
    effective_threshold: float
    mode: SnapMode

    @property
    def position(self) -> float:
        return self.chosen_point.position


@dataclass(eq=False)
class SnapSession:
    target: Decision
    start_time: float
    initiator: Initiator = Initiator.SNAP
    locked: bool = True
