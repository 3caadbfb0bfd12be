"""Exception taxonomy for BiasLab."""

from __future__ import annotations


class BiasLabError(Exception):
    """Base class for all BiasLab errors."""


# =============================================================================
# Recoverable input
# =============================================================================


class CatalogError(BiasLabError):
    """Raised when a catalog source cannot be read or parsed."""


class EmptyCatalogError(BiasLabError):
    """Raised when a practice session is requested from a catalog with no scenarios."""


# =============================================================================
# Persistence
# =============================================================================


class PersistenceError(BiasLabError):
    """Raised by storage backends when a read, write or delete fails."""


# =============================================================================
# Caller contract violations
# =============================================================================


class InvariantViolation(BiasLabError):
    """Raised when a caller breaks the engine's contract."""


class UnknownOptionError(InvariantViolation):
    """Raised when an answer names an option the scenario does not have."""

    def __init__(self, scenario_id: str, option_id: str):
        super().__init__(f"Scenario {scenario_id!r} has no option {option_id!r}")
        self.scenario_id = scenario_id
        self.option_id = option_id


class SessionStateError(InvariantViolation):
    """Raised when a session operation is not valid in the current state."""


class InvalidSettingError(InvariantViolation, ValueError):
    """Raised for an unknown setting key or a value outside its domain."""
