"""
Serialization — JSON документ кривой

Immutable Pydantic модель документа кривой, совместимая с JSON Schema
(schema/curve.json рядом с модулем).

Формат:
    {
        "schema_version": "1",
        "x_family": "float",
        "y_family": "fraction",
        "points": [[0.0, "0"], [2.5, "1/3"], [10.0, "1"]]
    }

Значения:
- int и float пишутся как JSON числа (float — кратчайший repr, точный round-trip)
- Fraction пишется строкой "n/d" на любой оси (ось float может содержать
  int и Fraction вперемешку), Decimal — своей строкой (с сохранением нулей)

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Round-trip сохраняет порядок точек и точные значения (и их типы)
2. Документ проходит JSON Schema до создания модели
3. Инварианты кривой проверяет конструктор Curve (InvalidCurve)
"""

import json
from decimal import Decimal
from fractions import Fraction
from typing import Any, Dict, Final

from pydantic import BaseModel, Field, model_validator

from src.core.contracts.validators import validate_curve_document
from src.core.domain.curve import Curve
from src.core.math.interpolation import NumberFamily

# =============================================================================
# CONSTANTS
# =============================================================================

CURVE_SCHEMA_VERSION: Final[str] = "1"

# Семейства, значения которых пишутся строками
_STRING_FAMILIES: Final[frozenset] = frozenset({NumberFamily.RATIONAL, NumberFamily.DECIMAL})


# =============================================================================
# VALUE CODEC
# =============================================================================


def encode_value(value) -> int | float | str:
    """
    Кодирование координаты в JSON-совместимое значение.

    Examples:
        >>> encode_value(Fraction(1, 3))
        '1/3'
        >>> encode_value(Fraction(2))
        '2/1'
        >>> encode_value(Decimal('0.50'))
        '0.50'
        >>> encode_value(2)
        2
    """
    if isinstance(value, int):
        return value
    if isinstance(value, Fraction):
        return f"{value.numerator}/{value.denominator}"
    if isinstance(value, Decimal):
        return str(value)
    return float(value)


def _is_fraction_string(raw: str) -> bool:
    return "/" in raw


def decode_value(raw: int | float | str, family: NumberFamily):
    """
    Декодирование координаты по объявленному семейству оси.

    Строка "n/d" всегда декодируется в Fraction.

    Raises:
        ValueError: Строка без "/" для семейства int/float
    """
    if isinstance(raw, str):
        if _is_fraction_string(raw):
            return Fraction(raw)
        if family == NumberFamily.RATIONAL:
            return Fraction(raw)
        if family == NumberFamily.DECIMAL:
            return Decimal(raw)
        raise ValueError(f"String value {raw!r} is not allowed for {family.value} axis")
    return raw


# =============================================================================
# CURVE DOCUMENT MODEL
# =============================================================================


class CurveDocument(BaseModel):
    """
    Документ кривой.

    Immutable модель (frozen=True). Содержит:
    - Версию схемы
    - Семейства типов осей X и Y
    - Точки в порядке возрастания x
    """

    schema_version: str = Field(
        CURVE_SCHEMA_VERSION, pattern="^1$", description="Версия схемы документа"
    )
    x_family: NumberFamily = Field(..., description="Числовое семейство оси X")
    y_family: NumberFamily = Field(..., description="Числовое семейство оси Y")
    points: list[tuple[int | float | str, int | float | str]] = Field(
        ..., min_length=1, description="Точки (x, y) в порядке возрастания x"
    )

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def validate_string_values(self) -> "CurveDocument":
        """Строки допустимы на осях fraction/decimal; на int/float — только "n/d"."""
        for index, (x, y) in enumerate(self.points):
            for name, value, family in (("x", x, self.x_family), ("y", y, self.y_family)):
                if (
                    isinstance(value, str)
                    and family not in _STRING_FAMILIES
                    and not _is_fraction_string(value)
                ):
                    raise ValueError(
                        f"points[{index}].{name} is a non-fraction string on a {family.value} axis"
                    )
        return self

    @classmethod
    def from_curve(cls, curve: Curve) -> "CurveDocument":
        return cls(
            schema_version=CURVE_SCHEMA_VERSION,
            x_family=curve.x_family,
            y_family=curve.y_family,
            points=[(encode_value(p.x), encode_value(p.y)) for p in curve.points],
        )

    def to_curve(self) -> Curve:
        """
        Восстановление кривой.

        Raises:
            InvalidCurve: Если точки нарушают инварианты кривой
        """
        return Curve(
            [
                (decode_value(x, self.x_family), decode_value(y, self.y_family))
                for x, y in self.points
            ]
        )


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================


def curve_to_document(curve: Curve) -> Dict[str, Any]:
    """Документ кривой как dict (готов к json.dumps)."""
    return CurveDocument.from_curve(curve).model_dump(mode="json")


def curve_from_document(data: Dict[str, Any]) -> Curve:
    """
    Кривая из dict-документа.

    Raises:
        jsonschema.ValidationError: Документ не соответствует схеме
        pydantic.ValidationError: Строки без "/" на осях int/float
        InvalidCurve: Точки нарушают инварианты кривой
    """
    validate_curve_document(data)
    return CurveDocument.model_validate(data).to_curve()


def dumps_curve(curve: Curve) -> str:
    """Сериализация кривой в JSON строку."""
    return json.dumps(curve_to_document(curve))


def loads_curve(text: str) -> Curve:
    """Десериализация кривой из JSON строки."""
    return curve_from_document(json.loads(text))
