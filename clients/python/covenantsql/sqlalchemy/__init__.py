"""SQLAlchemy integration for CovenantSQL."""

from .dialect import CovenantDialect, register

__all__ = ["CovenantDialect", "register"]
