"""Compression error taxonomy."""


class CompressionError(Exception):
    """Base class for every failure raised by the compression engine."""


class InvalidBudget(CompressionError, ValueError):
    """Budget ceilings are non-positive or quality is out of range."""


class DecodeError(CompressionError):
    """Input bytes could not be decoded into a pixel buffer."""


class EncoderFailure(CompressionError):
    """The encode collaborator failed."""


class ResizerFailure(CompressionError):
    """The resize collaborator failed or returned an oversized buffer."""


class BudgetUnsatisfiable(CompressionError):
    """
    Quality and dimension floors were exhausted without meeting the budget.
    
    The smallest encoding reached is kept on `best_effort` so the caller
    can still accept a degraded result.
    """
    
    def __init__(self, best_effort, budget):
        self.best_effort = best_effort
        self.budget = budget
        super().__init__(
            f"Could not fit {budget.max_output_bytes} bytes: best effort is "
            f"{best_effort.size} bytes at {best_effort.width}x{best_effort.height}, "
            f"quality {best_effort.quality}"
        )
