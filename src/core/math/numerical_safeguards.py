"""
Numerical Safeguards — Safe Math Primitives для кривых

Модуль обеспечивает численную устойчивость операций над кривыми:
- Проверка конечности значений (float, Fraction, Decimal, int)
- Clamp и snap к границам вероятности [0, 1]
- Восстановление монотонности (running max) после накопления ошибок округления

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. NaN/Inf никогда не попадают в точки кривой
2. Snap применяется только к float — точные типы (Fraction, Decimal, int) не трогаются
3. Все операции детерминированы и воспроизводимы
"""

import math
from decimal import Decimal
from fractions import Fraction
from numbers import Real
from typing import Final

# =============================================================================
# EPSILON-ПАРАМЕТРЫ
# =============================================================================

# Epsilon для значений вероятности (Y кривой)
# Результаты комбинаций в пределах eps от 0 или 1 приводятся к границе
PROBABILITY_EPS: Final[float] = 1e-9

# Нижняя и верхняя граница кумулятивной вероятности
PROBABILITY_MIN: Final[int] = 0
PROBABILITY_MAX: Final[int] = 1


# =============================================================================
# ПРОВЕРКА КОНЕЧНОСТИ
# =============================================================================


def is_valid_number(value: object) -> bool:
    """
    Проверка, является ли значение конечным числом поддерживаемого типа.

    bool отвергается явно: True/False не являются координатами кривой.

    Args:
        value: Проверяемое значение

    Returns:
        True если value — конечный int/Fraction/float/Decimal

    Examples:
        >>> is_valid_number(1.5)
        True
        >>> is_valid_number(Fraction(1, 3))
        True
        >>> is_valid_number(float('nan'))
        False
        >>> is_valid_number(True)
        False
    """
    if isinstance(value, bool):
        return False
    if isinstance(value, (int, Fraction)):
        return True
    if isinstance(value, Decimal):
        return value.is_finite()
    if isinstance(value, Real):
        return math.isfinite(value)
    return False


def is_nan(value: object) -> bool:
    """True для float NaN и Decimal NaN."""
    if isinstance(value, Decimal):
        return value.is_nan()
    if isinstance(value, float):
        return math.isnan(value)
    return False


# =============================================================================
# CLAMP И SNAP
# =============================================================================


def clamp(value, min_value=None, max_value=None):
    """
    Ограничение значения в заданном диапазоне.

    Тип значения сохраняется, если оно не выходит за границы.

    Examples:
        >>> clamp(5.0, 0.0, 10.0)
        5.0
        >>> clamp(-1.0, 0.0, 10.0)
        0.0
        >>> clamp(Fraction(3, 2), 0, 1)
        1
    """
    result = value

    if min_value is not None and result < min_value:
        result = min_value

    if max_value is not None and result > max_value:
        result = max_value

    return result


def snap_probability(value, eps: float = PROBABILITY_EPS):
    """
    Приведение float-вероятности к 0 или 1, если она в пределах eps от границы.

    Используется после комбинаций, где сумма float-слагаемых даёт
    0.9999999999999998 вместо 1.0. Точные типы возвращаются без изменений.

    Args:
        value: Значение вероятности
        eps: Толерантность snap (default: PROBABILITY_EPS)

    Returns:
        0.0, 1.0 или исходное value

    Examples:
        >>> snap_probability(0.9999999999999998)
        1.0
        >>> snap_probability(3e-17)
        0.0
        >>> snap_probability(0.5)
        0.5
    """
    if eps < 0:
        raise ValueError(f"eps must be non-negative, got {eps}")

    if not isinstance(value, float):
        return value

    if abs(value - PROBABILITY_MAX) <= eps:
        return float(PROBABILITY_MAX)
    if abs(value - PROBABILITY_MIN) <= eps:
        return float(PROBABILITY_MIN)
    return value


# =============================================================================
# МОНОТОННОСТЬ
# =============================================================================


def running_max(values: list) -> list:
    """
    Восстановление неубывания последовательности (running max).

    Ошибки округления при суммировании вкладов могут дать
    y_{i+1} < y_i на величину порядка ulp. Каждое значение заменяется
    максимумом из всех предыдущих.

    Args:
        values: Последовательность значений

    Returns:
        Новый список, неубывающий

    Examples:
        >>> running_max([0.0, 0.5, 0.4999999999999999, 1.0])
        [0.0, 0.5, 0.5, 1.0]
    """
    result = []
    current = None
    for value in values:
        if current is None or value > current:
            current = value
        result.append(current)
    return result


# =============================================================================
# ВАЛИДАЦИЯ
# =============================================================================


def validate_in_range(
    value,
    name: str,
    min_value=None,
    max_value=None,
) -> None:
    """
    Валидация, что значение конечно и лежит в заданном диапазоне.

    Args:
        value: Проверяемое значение
        name: Имя параметра (для сообщения об ошибке)
        min_value: Минимальное допустимое значение (optional)
        max_value: Максимальное допустимое значение (optional)

    Raises:
        ValueError: Если value не число, NaN/Inf или вне диапазона
    """
    if not is_valid_number(value):
        raise ValueError(f"{name} must be a finite number (not NaN/Inf), got {value!r}")

    if min_value is not None and value < min_value:
        raise ValueError(f"{name} must be >= {min_value}, got {value}")

    if max_value is not None and value > max_value:
        raise ValueError(f"{name} must be <= {max_value}, got {value}")
