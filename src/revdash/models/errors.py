"""Simulation-layer exceptions"""


class SimulationError(Exception):
    """Base exception for the simulation engine"""


class InvalidAmountError(SimulationError, ValueError):
    """A non-positive (or non-finite) amount would make the total non-monotonic"""

    def __init__(self, amount, reason: str = "amount must be positive"):
        self.amount = amount
        super().__init__(f"Invalid amount {amount!r}: {reason}")


class TransactionCatalogError(SimulationError):
    """Category tier tables are malformed or inconsistent"""


class ControllerShutdownError(SimulationError):
    """Controller was used after shutdown()"""
