"""
CounterAnimator - smooths visible changes of the displayed total.

Pure function of elapsed time plus a small mutable AnimationState. It owns
no loop and no timer: the render loop samples it on demand.
"""

from typing import Callable, Optional

from revdash.models.animation import AnimationState
from revdash.models.easing import ease_out_cubic
from revdash.utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.ANIMATION)


class CounterAnimator:
    """
    Cubic ease-out interpolation toward the latest target.

    - set_target() while idle starts from the committed value
    - set_target() mid-animation starts from the value currently on
      screen, so rapid updates never jump
    - once progress reaches 1 the target becomes the committed value

    Example:
        anim = CounterAnimator(initial_value=100, duration=500)
        anim.set_target(200, now=0)
        anim.sample(250)  # 187.5
        anim.sample(500)  # 200.0
    """

    def __init__(
        self,
        initial_value: float = 0.0,
        duration: float = 500.0,
        ease_function: Callable[[float], float] = ease_out_cubic,
    ):
        self.duration = duration
        self.ease_function = ease_function
        self._committed = float(initial_value)
        self._state: Optional[AnimationState] = None

    # ------------------------------------------------------------
    # State
    # ------------------------------------------------------------

    @property
    def committed_value(self) -> float:
        """Baseline for the next set_target() when no animation is running"""
        return self._committed

    @property
    def state(self) -> Optional[AnimationState]:
        return self._state

    @property
    def is_animating(self) -> bool:
        return self._state is not None

    @property
    def target(self) -> float:
        return self._state.target_value if self._state else self._committed

    def reset(self, value: float) -> None:
        """Drop any running animation and display value directly"""
        self._state = None
        self._committed = float(value)

    # ------------------------------------------------------------
    # Core
    # ------------------------------------------------------------

    def set_target(self, new_target: float, now: float) -> None:
        """Start a new interpolation toward new_target at time now"""
        start_value = self.sample(now) if self._state is not None else self._committed

        self._state = AnimationState(
            start_value=start_value,
            target_value=float(new_target),
            start_time=now,
            duration=self.duration,
        )
        log.debug("Counter retargeted", start=f"{start_value:.2f}", target=f"{new_target:.2f}")

    def sample(self, now: float) -> float:
        """Displayed value at time now"""
        state = self._state
        if state is None:
            return self._committed

        progress = state.progress(now)
        if progress >= 1.0:
            self._committed = state.target_value
            self._state = None
            return self._committed
        if progress <= 0.0:
            return state.start_value

        eased = self.ease_function(progress)
        return state.start_value + (state.target_value - state.start_value) * eased
