# Copyright (c) 2026 Harsh Dwivedi
# Licensed under the Harsh Non-Commercial Attribution License (HNCAL) v1.0
# Commercial use requires written permission. See LICENSE for details.

"""
ehog - Error Types
All exceptions raised by the library. Each subclasses the builtin
that best describes it so callers may catch either.
"""


class ConfigurationError(ValueError):
    """Raised when construction parameters or inputs are invalid."""


class EmptyInputError(ConfigurationError):
    """Raised when update() receives an empty or zero-area image."""


class NoScaleAvailable(LookupError):
    """Raised when no pyramid layer can serve the requested patch size."""


def require_positive(**values: float) -> None:
    """
    Raise ConfigurationError naming the first non-positive value.

    Usage:
        require_positive(cols=cols, rows=rows, cell_size=cell_size)
    """
    for name, value in values.items():
        if value is None or value <= 0:
            raise ConfigurationError(f"{name} must be positive, got {value}")
