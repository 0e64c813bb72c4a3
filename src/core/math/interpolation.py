"""
Interpolation — Числовые семейства и линейная интерполяция

Кривые параметризованы по типам X и Y независимо. Поддерживаемые семейства:
- INTEGER  — int
- RATIONAL — fractions.Fraction (точная арифметика)
- FLOAT    — float и прочие numbers.Real
- DECIMAL  — decimal.Decimal (фиксированная точка)

Правила продвижения: INTEGER < RATIONAL < FLOAT. DECIMAL совместим только
с INTEGER: Python не определяет Decimal + float и Decimal + Fraction.

Операция "scale by ratio" (масштабирование разности на долю интервала)
выполняется в семействе разности: доля приводится к её типу, поэтому
интерполяция никогда не падает с TypeError.

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. lerp(y0, y1, 0) == y0 и lerp(y0, y1, 1) == y1 для точных семейств
2. Поиск интервала — bisect, результат идентичен линейному сканированию
3. coerce() не меняет значение, если оно уже совместимо с семейством
"""

from bisect import bisect_right
from decimal import Decimal
from enum import Enum
from fractions import Fraction
from numbers import Real
from typing import Sequence


# =============================================================================
# ЧИСЛОВЫЕ СЕМЕЙСТВА
# =============================================================================


class NumberFamily(str, Enum):
    """Семейство числового типа координаты."""

    INTEGER = "int"
    RATIONAL = "fraction"
    FLOAT = "float"
    DECIMAL = "decimal"


# Порядок продвижения для семейств, совместимых со встроенной арифметикой
_PROMOTION_ORDER = {
    NumberFamily.INTEGER: 0,
    NumberFamily.RATIONAL: 1,
    NumberFamily.FLOAT: 2,
}


def number_family(value: object) -> NumberFamily:
    """
    Определение семейства числа.

    Raises:
        TypeError: Если тип не поддерживается (bool, str, complex, None, ...)

    Examples:
        >>> number_family(3)
        <NumberFamily.INTEGER: 'int'>
        >>> number_family(Fraction(1, 3)).value
        'fraction'
    """
    if isinstance(value, bool):
        raise TypeError(f"bool is not a supported coordinate type: {value!r}")
    if isinstance(value, int):
        return NumberFamily.INTEGER
    if isinstance(value, Fraction):
        return NumberFamily.RATIONAL
    if isinstance(value, Decimal):
        return NumberFamily.DECIMAL
    if isinstance(value, Real):
        return NumberFamily.FLOAT
    raise TypeError(f"Unsupported coordinate type {type(value).__name__}: {value!r}")


def common_family(*families: NumberFamily) -> NumberFamily:
    """
    Общее семейство для набора семейств.

    Raises:
        ValueError: Если набор пуст
        TypeError: Если DECIMAL смешан с RATIONAL или FLOAT

    Examples:
        >>> common_family(NumberFamily.INTEGER, NumberFamily.FLOAT).value
        'float'
        >>> common_family(NumberFamily.INTEGER, NumberFamily.DECIMAL).value
        'decimal'
    """
    if not families:
        raise ValueError("common_family requires at least one family")

    unique = set(families)
    if NumberFamily.DECIMAL in unique:
        others = unique - {NumberFamily.DECIMAL, NumberFamily.INTEGER}
        if others:
            names = sorted(f.value for f in others)
            raise TypeError(f"decimal values cannot be mixed with {', '.join(names)}")
        return NumberFamily.DECIMAL

    return max(unique, key=lambda f: _PROMOTION_ORDER[f])


# =============================================================================
# ПРИВЕДЕНИЕ ТИПОВ
# =============================================================================


def to_decimal(value) -> Decimal:
    """Точное приведение int/float/Fraction к Decimal (Fraction — делением)."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, Fraction):
        return Decimal(value.numerator) / Decimal(value.denominator)
    return Decimal(value)


def coerce(value, family: NumberFamily):
    """
    Приведение value к виду, совместимому с арифметикой семейства.

    Меняются только пары, которые Python не умеет смешивать:
    - семейство DECIMAL, value float/Fraction → Decimal
    - семейство FLOAT, value Decimal → float
    - семейство RATIONAL/INTEGER, value Decimal → Fraction (точно)

    Examples:
        >>> coerce(0.5, NumberFamily.DECIMAL)
        Decimal('0.5')
        >>> coerce(Decimal('0.25'), NumberFamily.RATIONAL)
        Fraction(1, 4)
        >>> coerce(2, NumberFamily.FLOAT)
        2
    """
    if family == NumberFamily.DECIMAL:
        if isinstance(value, (float, Fraction)):
            return to_decimal(value)
        return value

    if isinstance(value, Decimal):
        if family == NumberFamily.FLOAT:
            return float(value)
        return Fraction(value)

    return value


def ratio(numerator, denominator):
    """
    Доля numerator / denominator в общем семействе аргументов.

    int / int даёт float (true division), Fraction остаётся Fraction,
    Decimal / Decimal остаётся Decimal.

    Raises:
        ZeroDivisionError: Если denominator == 0 (вызывающий гарантирует Δ > 0)
    """
    if isinstance(numerator, Decimal) or isinstance(denominator, Decimal):
        return to_decimal(numerator) / to_decimal(denominator)
    return numerator / denominator


def scale(delta, fraction):
    """
    Масштабирование разности delta на долю fraction в семействе delta.

    Examples:
        >>> scale(Decimal('2'), 0.25)
        Decimal('0.50')
        >>> scale(1.0, Decimal('0.5'))
        0.5
    """
    return delta * coerce(fraction, number_family(delta))


def lerp(start, end, fraction):
    """
    Линейная интерполяция start + (end - start) * fraction.

    Examples:
        >>> lerp(0, 1, 0.5)
        0.5
        >>> lerp(Fraction(0), Fraction(1), Fraction(1, 3))
        Fraction(1, 3)
    """
    return start + scale(end - start, fraction)


# =============================================================================
# ПОИСК ИНТЕРВАЛА
# =============================================================================


def bracket_index(values: Sequence, value) -> int:
    """
    Индекс i такой, что values[i] <= value < values[i + 1].

    values строго возрастает, value лежит в [values[0], values[-1]).
    Бинарный поиск (bisect), эквивалентный линейному сканированию
    "последний i с values[i] <= value".

    Examples:
        >>> bracket_index([0, 10, 20], 5)
        0
        >>> bracket_index([0, 10, 20], 10)
        1
    """
    index = bisect_right(values, value) - 1
    return max(0, min(index, len(values) - 2))


def merge_unique(*sequences: Sequence) -> list:
    """
    Слияние отсортированных последовательностей без дубликатов.

    Равные значения разных типов (1 и 1.0) считаются дубликатами;
    остаётся первое встреченное.

    Examples:
        >>> merge_unique([0, 10], [0, 5, 20])
        [0, 5, 10, 20]
    """
    merged = sorted((v for seq in sequences for v in seq))
    result: list = []
    for value in merged:
        if not result or value != result[-1]:
            result.append(value)
    return result
