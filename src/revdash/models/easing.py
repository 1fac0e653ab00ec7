"""
Easing Functions

Progress-to-output curves used by the counter animator.
Input t is progress (0.0 = start, 1.0 = end), output is the
interpolation factor (0.0 to 1.0).
"""


def ease_out_cubic(t: float) -> float:
    """Cubic ease-out (fast start → very slow end)"""
    return 1 - (1 - t) ** 3
