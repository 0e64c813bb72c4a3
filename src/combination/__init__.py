"""
Combination — Алгебра кривых

Построение новых кривых из существующих:
- combine_sum:      распределение суммы независимых величин (свёртка)
- combine_mixture:  смесь двух распределений с весом
- weighted_average: смесь N распределений
- distance:         площадь между двумя кривыми
- CurveSet:         семейство кривых с интерполяцией по ключу

Ни одна операция не изменяет входные кривые.
"""

from src.combination.convolution import (
    DEFAULT_UNIFORM_RESOLUTION,
    GridKind,
    SumGridPolicy,
    build_sum_grid,
    combine_sum,
)
from src.combination.curve_set import CurveSet, InvalidCurveSet
from src.combination.distance import distance
from src.combination.mixture import (
    check_compatible,
    combine_mixture,
    weighted_average,
)

__all__ = [
    # Convolution
    "DEFAULT_UNIFORM_RESOLUTION",
    "GridKind",
    "SumGridPolicy",
    "build_sum_grid",
    "combine_sum",
    # Mixture
    "check_compatible",
    "combine_mixture",
    "weighted_average",
    # Distance
    "distance",
    # Curve sets
    "CurveSet",
    "InvalidCurveSet",
]
