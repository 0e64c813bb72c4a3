"""
Domain models and value objects.

Contains the Curve value type, its point type, policies and errors.
"""

from src.core.domain.curve import (
    DEFAULT_PLATEAU_POLICY,
    Curve,
    CurveError,
    CurvePoint,
    DomainMismatch,
    InvalidCurve,
    InvalidWeight,
    PlateauPolicy,
)

__all__ = [
    # Curve model
    "Curve",
    "CurvePoint",
    # Policies
    "DEFAULT_PLATEAU_POLICY",
    "PlateauPolicy",
    # Errors
    "CurveError",
    "DomainMismatch",
    "InvalidCurve",
    "InvalidWeight",
]
