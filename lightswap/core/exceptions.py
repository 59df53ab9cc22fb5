"""Custom exception hierarchy for the light-swap puzzle."""


class LightswapError(Exception):
    """Base exception for puzzle failures."""


class InvalidConfiguration(LightswapError):
    """Raised when a board is requested with an unsupported size."""


class OutOfBounds(LightswapError):
    """Raised when a coordinate lies outside the board."""


class InvalidState(LightswapError):
    """Raised when a cell or board would hold an illegal color layout."""


class SolverExhausted(LightswapError):
    """Raised when the solver ran every phase without solving the board."""
