from dataclasses import dataclass

@dataclass
class ScrollModel:
    """ One scroll axis: content length, viewport length along the axis, offset. """
    content: float = 0.0
    extent: float = 0.0
    offset: float = 0.0

    def max(self) -> float: return max(0.0, float(self.content - self.extent))
    def clamped(self, value: float) -> float: return max(0.0, min(self.max(), float(value)))
    def clamp(self): self.offset = self.clamped(self.offset)
