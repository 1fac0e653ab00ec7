"""
revdash - simulated revenue dashboard engine

Fabricates a plausible, continuously rising revenue total and a stream of
synthetic transactions, animating the displayed counter between values.
"""

__version__ = "1.0.0"
