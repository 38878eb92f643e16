from __future__ import annotations


class PairleroyError(Exception):
    """Base class for board core errors."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ConfigurationError(PairleroyError):
    """Percentages, palette or board size rejected before any work is done."""

    def __init__(self, message: str, errors: list[str] | None = None):
        self.errors = list(errors) if errors else [message]
        super().__init__(message)


class InfeasibleQuotaError(PairleroyError):
    """Quotas cannot be turned into a concrete combo set."""
    pass


class CapacityExceededError(InfeasibleQuotaError):
    """Capped apportionment cannot fit the total under its ceilings."""

    def __init__(self, message: str, total: int, caps: list[int] | None = None):
        self.total = total
        self.caps = list(caps) if caps is not None else None
        super().__init__(message)


class BacktrackLimitError(InfeasibleQuotaError):
    """Backtracking search gave up after its failure budget."""

    def __init__(self, message: str, backtracks: int):
        self.backtracks = backtracks
        super().__init__(message)


class TopologyError(PairleroyError):
    """Coordinate map is inconsistent with the tile list."""
    pass


class InvalidPlacementError(PairleroyError):
    """A commit was attempted for a placement the validator rejects."""

    def __init__(self, message: str, tile_index: int | None = None):
        self.tile_index = tile_index
        super().__init__(message)
