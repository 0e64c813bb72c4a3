"""
Convolution — Распределение суммы независимых случайных величин

По кривым A (распределение U) и B (распределение V) строится кривая
распределения U + V.

СЕМАНТИКА РАСПРЕДЕЛЕНИЯ:
- Первая точка кривой несёт атом массы y_0 в x_0; ниже x_0 CDF равна 0
- Между соседними точками масса y_{j+1} - y_j распределена равномерно

ВЫЧИСЛЕНИЕ В УЗЛЕ СЕТКИ t (точно, в замкнутой форме):

    F(t) = y0_B · F_A(t - b_0)
         + Σ_j (y_{j+1} - y_j) / (b_{j+1} - b_j) · ∫_{t - b_{j+1}}^{t - b_j} F_A(u) du

Интеграл кусочно-линейной F_A считается точно (PiecewiseLinearIntegral).
Между узлами результат линейно интерполируется — это и есть дискретизация,
выбираемая явно через SumGridPolicy:

- PAIRWISE: узлы {a_i + b_j} — все точки излома точного результата;
            subdivisions > 0 добавляет равномерные узлы внутри каждого зазора
- UNIFORM:  resolution равномерных узлов на [a_0 + b_0, a_n + b_m]
- FIXED:    сетка, заданная вызывающим (сортируется, дубликаты удаляются)

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Результат — валидная Curve: y неубывает (running max после суммирования),
   y ∈ [0, max_y_A · max_y_B]
2. Float-значения в пределах PROBABILITY_EPS от 0/1 приводятся к границе
3. Входные кривые не изменяются
"""

import logging
from dataclasses import dataclass
from enum import Enum
from fractions import Fraction
from typing import Final

from src.core.domain.curve import Curve, DomainMismatch
from src.core.math.integration import PiecewiseLinearIntegral
from src.core.math.interpolation import (
    NumberFamily,
    coerce,
    common_family,
    lerp,
    merge_unique,
    ratio,
)
from src.core.math.numerical_safeguards import (
    PROBABILITY_EPS,
    clamp,
    is_valid_number,
    running_max,
    snap_probability,
)

logger = logging.getLogger(__name__)


# =============================================================================
# CONSTANTS
# =============================================================================

# Количество узлов равномерной сетки по умолчанию
DEFAULT_UNIFORM_RESOLUTION: Final[int] = 101


# =============================================================================
# CONFIG
# =============================================================================


class GridKind(str, Enum):
    """Способ построения выходной сетки свёртки."""

    PAIRWISE = "pairwise"
    UNIFORM = "uniform"
    FIXED = "fixed"


@dataclass(frozen=True)
class SumGridPolicy:
    """Конфигурация дискретизации combine_sum.

    Attributes:
        kind: Способ построения сетки
        subdivisions: PAIRWISE — число дополнительных узлов в каждом зазоре
        resolution: UNIFORM — общее число узлов (>= 2)
        grid: FIXED — узлы, заданные вызывающим (непустые, конечные)
        max_points: Если задан, результат упрощается simplify_fixed(max_points)
    """

    kind: GridKind = GridKind.PAIRWISE
    subdivisions: int = 0
    resolution: int = DEFAULT_UNIFORM_RESOLUTION
    grid: tuple = ()
    max_points: int | None = None

    def __post_init__(self):
        object.__setattr__(self, "kind", GridKind(self.kind))
        object.__setattr__(self, "grid", tuple(self.grid))

        if self.subdivisions < 0:
            raise ValueError(f"subdivisions must be >= 0, got {self.subdivisions}")
        if self.resolution < 2:
            raise ValueError(f"resolution must be >= 2, got {self.resolution}")
        if self.max_points is not None and self.max_points < 2:
            raise ValueError(f"max_points must be >= 2, got {self.max_points}")

        if self.kind == GridKind.FIXED:
            if not self.grid:
                raise ValueError("FIXED grid policy requires a non-empty grid")
            for value in self.grid:
                if isinstance(value, bool) or not is_valid_number(value):
                    raise ValueError(f"grid values must be finite numbers, got {value!r}")

    @classmethod
    def pairwise(cls, subdivisions: int = 0, max_points: int | None = None) -> "SumGridPolicy":
        return cls(kind=GridKind.PAIRWISE, subdivisions=subdivisions, max_points=max_points)

    @classmethod
    def uniform(cls, resolution: int = DEFAULT_UNIFORM_RESOLUTION) -> "SumGridPolicy":
        return cls(kind=GridKind.UNIFORM, resolution=resolution)

    @classmethod
    def fixed(cls, grid) -> "SumGridPolicy":
        return cls(kind=GridKind.FIXED, grid=tuple(grid))


# =============================================================================
# СЕТКА
# =============================================================================


def _grid_fraction(k: int, n: int, family: NumberFamily):
    # RATIONAL-сетка остаётся точной
    if family == NumberFamily.RATIONAL:
        return Fraction(k, n)
    return ratio(k, n)


def _subdivide(grid: list, subdivisions: int, family: NumberFamily) -> list:
    if subdivisions == 0 or len(grid) < 2:
        return grid
    refined = []
    for left, right in zip(grid, grid[1:]):
        refined.append(left)
        for k in range(1, subdivisions + 1):
            refined.append(lerp(left, right, _grid_fraction(k, subdivisions + 1, family)))
    refined.append(grid[-1])
    return merge_unique(refined)


def build_sum_grid(a_xs: tuple, b_xs: tuple, policy: SumGridPolicy, family: NumberFamily) -> list:
    """
    Построение выходной сетки по политике.

    Args:
        a_xs: x кривой A (в рабочем семействе)
        b_xs: x кривой B (в рабочем семействе)
        policy: Политика дискретизации
        family: Рабочее числовое семейство

    Returns:
        Строго возрастающий список узлов
    """
    if policy.kind == GridKind.FIXED:
        return merge_unique([coerce(t, family) for t in policy.grid])

    if policy.kind == GridKind.UNIFORM:
        lo = a_xs[0] + b_xs[0]
        hi = a_xs[-1] + b_xs[-1]
        if lo == hi:
            return [lo]
        last = policy.resolution - 1
        grid = [lerp(lo, hi, _grid_fraction(k, last, family)) for k in range(last)]
        grid.append(hi)
        return merge_unique(grid)

    grid = merge_unique([a + b for a in a_xs for b in b_xs])
    return _subdivide(grid, policy.subdivisions, family)


# =============================================================================
# COMBINE SUM
# =============================================================================


def _working_family(a: Curve, b: Curve) -> NumberFamily:
    try:
        return common_family(a.x_family, a.y_family, b.x_family, b.y_family)
    except TypeError as e:
        raise DomainMismatch(f"Curves cannot be combined: {e}") from None


def combine_sum(a: Curve, b: Curve, grid_policy: SumGridPolicy | None = None) -> Curve:
    """
    Кривая распределения суммы U + V независимых U ~ A, V ~ B.

    Args:
        a: Распределение U
        b: Распределение V
        grid_policy: Дискретизация результата (default: PAIRWISE)

    Returns:
        Новая кривая; в узлах сетки значения точны, между узлами —
        линейная интерполяция

    Raises:
        DomainMismatch: Если числовые типы кривых несовместимы

    Examples:
        >>> u = Curve([(0, 0), (1, 1)])
        >>> combine_sum(u, u).y_at_x(1)
        0.5
    """
    policy = grid_policy or SumGridPolicy()
    family = _working_family(a, b)

    a_xs = tuple(coerce(v, family) for v in a.x_values)
    a_ys = tuple(coerce(v, family) for v in a.y_values)
    b_xs = tuple(coerce(v, family) for v in b.x_values)
    b_ys = tuple(coerce(v, family) for v in b.y_values)

    f_a = PiecewiseLinearIntegral(a_xs, a_ys)

    # Плотности сегментов B: (b_j, b_{j+1}, Δy / Δb); сегменты без массы пропускаются
    segments = []
    for j in range(len(b_xs) - 1):
        mass = b_ys[j + 1] - b_ys[j]
        if mass != 0:
            segments.append((b_xs[j], b_xs[j + 1], mass / (b_xs[j + 1] - b_xs[j])))

    grid = build_sum_grid(a_xs, b_xs, policy, family)
    logger.debug(
        "combine_sum: %d x %d points, %s grid of %d nodes",
        len(a_xs), len(b_xs), policy.kind.value, len(grid),
    )

    atom = b_ys[0]
    ys = []
    for t in grid:
        y = atom * f_a.cdf(t - b_xs[0]) if atom != 0 else 0
        for left, right, density in segments:
            y = y + density * f_a.integral(t - right, t - left)
        ys.append(y)

    upper = a_ys[-1] * b_ys[-1]
    ys = [snap_probability(clamp(y, 0, upper), PROBABILITY_EPS) for y in running_max(ys)]

    result = Curve(list(zip(grid, ys)))
    if policy.max_points is not None:
        result = result.simplify_fixed(policy.max_points)
    return result
