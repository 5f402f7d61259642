"""
errors.py - Exceptions raised by the biscuit packing solver
"""


class BiscuitPackingError(Exception):
    """Base class for every caller-visible solver error."""


class BiscuitsBelowOneError(BiscuitPackingError, ValueError):
    def __init__(self, message: str = "The number of biscuits to arrange must be at least 1."):
        super().__init__(message)


class StartGreaterThanEndError(BiscuitPackingError, ValueError):
    def __init__(self, start: int, end: int):
        super().__init__(f"start ({start}) must not be greater than end ({end}).")
        self.start = start
        self.end = end


class InvalidPanError(BiscuitPackingError, ValueError):
    def __init__(self, width: float, length: float):
        super().__init__(f"Pan dimensions must be positive, got {width} X {length}.")
        self.width = width
        self.length = length


class SamplingError(BiscuitPackingError, RuntimeError):
    """Poisson-disk sampling could not produce enough candidates."""


class AnnealingConfigError(BiscuitPackingError, ValueError):
    """The annealing run was configured so that it cannot record a result."""
