from __future__ import annotations

from scrollsnap.types import ScrollSample, VelocityClass


def _sign(x: float) -> int:
    if x > 0: return 1
    if x < 0: return -1
    return 0


def classify_velocity(previous_velocity: float, velocity: float, velocity_threshold: float) -> VelocityClass:
    """
    Label one velocity step. Pure: depends only on the two consecutive
    velocities, so samples must arrive in emission order.
    """
    decelerating = abs(previous_velocity) > abs(velocity)
    reversing = _sign(previous_velocity) != _sign(velocity) and velocity != 0
    coasting = abs(velocity) < velocity_threshold and decelerating and not reversing
    return VelocityClass(is_decelerating=decelerating, is_reversing=reversing, is_coasting=coasting)


class VelocityClassifier:
    def __init__(self, velocity_threshold: float = 1.0):
        self.velocity_threshold = float(velocity_threshold)

    def classify(self, sample: ScrollSample) -> VelocityClass:
        return classify_velocity(sample.previous_velocity, sample.velocity, self.velocity_threshold)
