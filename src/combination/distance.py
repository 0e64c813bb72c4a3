"""
Distance — Площадь между двумя кривыми

    distance(A, B) = ∫ |A(x) - B(x)| dx

по объединению x-сеток обеих кривых. На каждом сегменте разность
A - B линейна, поэтому интеграл точен:
- знаки на концах совпадают → трапеция (или треугольник)
- знаки разные → две треугольные части с пересечением внутри сегмента
"""

from src.core.domain.curve import Curve
from src.combination.mixture import check_compatible
from src.core.math.interpolation import merge_unique


def distance(a: Curve, b: Curve) -> float:
    """
    Площадь между кривыми A и B.

    Симметрична, distance(A, A) == 0. Вне общего домена обе кривые
    постоянны (clamp), поэтому вклад там нулевой.

    Raises:
        DomainMismatch: Если числовые типы кривых несовместимы

    Examples:
        >>> distance(Curve([(0, 0), (10, 1)]), Curve([(0, 0), (20, 1)]))
        5.0
    """
    check_compatible([a, b])
    grid = [float(x) for x in merge_unique(a.x_values, b.x_values)]
    diffs = [float(a.y_at_x(x)) - float(b.y_at_x(x)) for x in grid]

    total = 0.0
    for (x1, d1), (x2, d2) in zip(zip(grid, diffs), zip(grid[1:], diffs[1:])):
        h = x2 - x1
        left, right = abs(d1), abs(d2)
        if d1 * d2 >= 0.0:
            total += (left + right) * h * 0.5
        else:
            total += h * 0.5 * (left * left + right * right) / (left + right)
    return total
