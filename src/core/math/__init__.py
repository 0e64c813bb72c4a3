"""
Core math modules

Числовые семейства, интерполяция и численные safeguards для кривых.
"""

# Numerical Safeguards
from src.core.math.numerical_safeguards import (
    # Epsilon constants
    PROBABILITY_EPS,
    PROBABILITY_MAX,
    PROBABILITY_MIN,
    # Validity
    is_nan,
    is_valid_number,
    # Utilities
    clamp,
    running_max,
    snap_probability,
    # Validation
    validate_in_range,
)

# Interpolation
from src.core.math.interpolation import (
    NumberFamily,
    bracket_index,
    coerce,
    common_family,
    lerp,
    merge_unique,
    number_family,
    ratio,
    scale,
    to_decimal,
)

# Integration
from src.core.math.integration import PiecewiseLinearIntegral

__all__ = [
    # Numerical Safeguards — Epsilon constants
    "PROBABILITY_EPS",
    "PROBABILITY_MAX",
    "PROBABILITY_MIN",
    # Numerical Safeguards — Validity
    "is_nan",
    "is_valid_number",
    # Numerical Safeguards — Utilities
    "clamp",
    "running_max",
    "snap_probability",
    # Numerical Safeguards — Validation
    "validate_in_range",
    # Interpolation — Types
    "NumberFamily",
    # Interpolation — Functions
    "bracket_index",
    "coerce",
    "common_family",
    "lerp",
    "merge_unique",
    "number_family",
    "ratio",
    "scale",
    "to_decimal",
    # Integration
    "PiecewiseLinearIntegral",
]
