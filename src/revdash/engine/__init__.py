"""
Engine package - simulation and animation core
"""

from .clock import Clock, AsyncioClock, ManualClock, TimerHandle
from .revenue_accumulator import RevenueAccumulator
from .transaction_generator import TransactionGenerator
from .transaction_feed import TransactionFeed
from .counter_animator import CounterAnimator
from .render_loop import RenderLoop

__all__ = [
    "Clock",
    "AsyncioClock",
    "ManualClock",
    "TimerHandle",
    "RevenueAccumulator",
    "TransactionGenerator",
    "TransactionFeed",
    "CounterAnimator",
    "RenderLoop",
]
