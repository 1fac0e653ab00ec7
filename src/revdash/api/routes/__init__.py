from . import dashboard, system

__all__ = ["dashboard", "system"]
