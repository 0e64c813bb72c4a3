"""
Contract Validation Module

Валидация и (де)сериализация JSON документов кривых.
"""

from .serialization import (
    CURVE_SCHEMA_VERSION,
    CurveDocument,
    curve_from_document,
    curve_to_document,
    decode_value,
    dumps_curve,
    encode_value,
    loads_curve,
)
from .validators import (
    ContractValidator,
    CurveDocumentValidator,
    SchemaLoader,
    validate_curve_document,
)

__all__ = [
    # Classes
    "SchemaLoader",
    "ContractValidator",
    "CurveDocumentValidator",
    "CurveDocument",
    # Constants
    "CURVE_SCHEMA_VERSION",
    # Functions
    "validate_curve_document",
    "curve_to_document",
    "curve_from_document",
    "dumps_curve",
    "loads_curve",
    "encode_value",
    "decode_value",
]
