"""
Mixture — Взвешенная смесь распределений

Смесь двух (или N) CDF на объединении x-сеток входных кривых:

    result_y(x) = Σ w_k · C_k(x),   Σ w_k = 1

Каждое C_k(x) — прямое вычисление кривой (clamp за пределами домена),
поэтому результат точен в узлах сетки и не зависит от дискретизации.

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Входные кривые не изменяются
2. Результат — валидная Curve (неубывание y сохраняется: сумма
   неубывающих последовательностей с неотрицательными весами)
3. combine_mixture(A, A, w) == A в пределах float-толерантности
"""

import logging
from typing import Sequence

from src.core.domain.curve import Curve, DomainMismatch, InvalidWeight
from src.core.math.interpolation import coerce, common_family, merge_unique
from src.core.math.numerical_safeguards import validate_in_range

logger = logging.getLogger(__name__)


# =============================================================================
# ВАЛИДАЦИЯ
# =============================================================================


def _validate_weight(weight, name: str = "weight", max_value=None) -> None:
    try:
        validate_in_range(weight, name, min_value=0, max_value=max_value)
    except ValueError as e:
        raise InvalidWeight(str(e)) from None


def check_compatible(curves: Sequence[Curve]) -> None:
    """
    Проверка совместимости числовых семейств X и Y у набора кривых.

    Raises:
        DomainMismatch: Если X или Y двух кривых нельзя смешивать
    """
    for axis in ("x", "y"):
        families = [getattr(c, f"{axis}_family") for c in curves]
        try:
            common_family(*families)
        except TypeError as e:
            raise DomainMismatch(f"Incompatible {axis} types: {e}") from None


def _blend(curves: Sequence[Curve], weights: Sequence) -> Curve:
    """Смесь с уже нормированными весами на объединённой x-сетке."""
    grid = merge_unique(*(c.x_values for c in curves))
    family = common_family(*(c.y_family for c in curves))

    points = []
    for x in grid:
        y = 0
        for curve, weight in zip(curves, weights):
            value = coerce(curve.y_at_x(x), family)
            y = y + coerce(weight, family) * value
        points.append((x, y))

    logger.debug("Blended %d curves on %d grid points", len(curves), len(grid))
    return Curve(points)


# =============================================================================
# COMBINATIONS
# =============================================================================


def combine_mixture(a: Curve, b: Curve, weight) -> Curve:
    """
    Смесь двух распределений: weight · A + (1 - weight) · B.

    Сетка результата — объединение x обеих кривых.

    Args:
        a: Кривая A (вес weight)
        b: Кривая B (вес 1 - weight)
        weight: Вес A в [0, 1]

    Returns:
        Новая кривая смеси

    Raises:
        InvalidWeight: Если weight не конечное число в [0, 1]
        DomainMismatch: Если числовые типы X или Y несовместимы

    Examples:
        >>> a = Curve([(0, 0), (10, 1)])
        >>> b = Curve([(0, 0), (20, 1)])
        >>> combine_mixture(a, b, 0.5).y_at_x(10)
        0.75
    """
    _validate_weight(weight, max_value=1)

    check_compatible([a, b])
    return _blend([a, b], [weight, 1 - weight])


def weighted_average(
    curves: Sequence[Curve],
    weights: Sequence,
    simplify_tolerance: float | None = None,
) -> Curve:
    """
    Взвешенное среднее N кривых.

    Веса нормируются на их сумму, поэтому [1, 3] эквивалентно [0.25, 0.75].

    Args:
        curves: Кривые (непустой список)
        weights: Неотрицательные веса той же длины, сумма > 0
        simplify_tolerance: Если задан, к результату применяется
            Curve.simplify(simplify_tolerance)

    Raises:
        DomainMismatch: Пустой список, разная длина curves/weights,
            несовместимые числовые типы
        InvalidWeight: Отрицательный/неконечный вес или нулевая сумма
    """
    if not curves:
        raise DomainMismatch("weighted_average requires at least one curve")
    if len(curves) != len(weights):
        raise DomainMismatch(
            f"Number of curves ({len(curves)}) and weights ({len(weights)}) must match"
        )

    for i, weight in enumerate(weights):
        _validate_weight(weight, name=f"weights[{i}]")

    total = sum(weights)
    if total <= 0:
        raise InvalidWeight("weights must not sum to zero")

    check_compatible(curves)
    result = _blend(curves, [w / total for w in weights])

    if simplify_tolerance is not None:
        result = result.simplify(simplify_tolerance)
    return result
