"""Counter interpolation state"""

from dataclasses import dataclass


@dataclass
class AnimationState:
    """
    One in-flight interpolation of a displayed quantity.

    Replaced on every new target; dropped by CounterAnimator once progress
    reaches 1.
    """
    start_value: float
    target_value: float
    start_time: float  # ms, clock time
    duration: float = 500.0  # ms

    def progress(self, now: float) -> float:
        """Completion fraction clamped to [0, 1]"""
        if self.duration <= 0:
            return 1.0
        p = (now - self.start_time) / self.duration
        return min(max(p, 0.0), 1.0)
