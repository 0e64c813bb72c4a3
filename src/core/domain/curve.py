"""
Curve — Эмпирическая функция распределения на конечном наборе точек

Immutable value type: упорядоченная последовательность точек (x, y),
между точками — линейная интерполяция.

КРИТИЧЕСКИЕ ИНВАРИАНТЫ (проверяются при создании, гарантированы для чтения):
1. Последовательность непуста
2. x строго возрастает (дубликат x — ошибка конструирования, а не tie-break)
3. y не убывает; для "полной" кривой первый y == 0, последний y == 1
4. Кривая не изменяется после создания: все операции возвращают новую кривую

ПОЛИТИКИ ВЫЧИСЛЕНИЯ:
- y_at_x:  x ниже первой точки → первый y, выше последней → последний y (clamp)
- x_at_y:  y ниже первого y → первый x, выше последнего → последний x (clamp)
- x_at_y на плато (несколько точек с одинаковым y) → PlateauPolicy,
  по умолчанию DEFAULT_PLATEAU_POLICY = FIRST (начало плато)

Ошибки конструирования — InvalidCurve. Запросы никогда не падают.
"""

import math
from bisect import bisect_left, bisect_right
from dataclasses import dataclass, field
from enum import Enum
from typing import Final, Iterable, NamedTuple

from src.core.math.interpolation import (
    NumberFamily,
    bracket_index,
    coerce,
    common_family,
    lerp,
    number_family,
    ratio,
)
from src.core.math.numerical_safeguards import is_nan, is_valid_number


# =============================================================================
# EXCEPTIONS
# =============================================================================


class CurveError(ValueError):
    """Базовая ошибка операций над кривыми."""

    pass


class InvalidCurve(CurveError):
    """
    Нарушение инварианта при создании кривой.

    Пустой вход, нестрого возрастающий x, убывающий y,
    неподдерживаемое или неконечное число.
    """

    pass


class DomainMismatch(CurveError):
    """
    Входы комбинации несовместимы.

    Например, X одной кривой — Decimal, другой — float: арифметика между
    ними не определена, и статически это не предотвратить.
    """

    pass


class InvalidWeight(CurveError):
    """Вес смеси не является конечным числом в [0, 1]."""

    pass


# =============================================================================
# POLICIES
# =============================================================================


class PlateauPolicy(str, Enum):
    """
    Выбор x при обратном вычислении на плато.

    Плато — серия точек с одинаковым y; любой x внутри плато
    математически корректен.
    """

    FIRST = "first"
    LAST = "last"
    MIDPOINT = "midpoint"


DEFAULT_PLATEAU_POLICY: Final[PlateauPolicy] = PlateauPolicy.FIRST

# Квантили для строкового представления кривой
# Крайние поля сводки — границы области определения, а не квантили 0 и 1
SUMMARY_QUANTILES: Final[tuple[float, ...]] = (0.0, 0.05, 0.5, 0.95, 1.0)


# =============================================================================
# CURVE POINT
# =============================================================================


class CurvePoint(NamedTuple):
    """Точка кривой (x, y)."""

    x: object
    y: object


# =============================================================================
# CURVE
# =============================================================================


def _to_point(raw, index: int) -> CurvePoint:
    try:
        x, y = raw
    except (TypeError, ValueError):
        raise InvalidCurve(f"Point #{index} is not an (x, y) pair: {raw!r}") from None

    for name, value in (("x", x), ("y", y)):
        if isinstance(value, bool) or not is_valid_number(value):
            raise InvalidCurve(
                f"Point #{index}: {name} must be a finite number, got {value!r}"
            )
    return CurvePoint(x, y)


def _family_of(values: tuple, axis: str) -> NumberFamily:
    try:
        return common_family(*(number_family(v) for v in values))
    except TypeError as e:
        raise InvalidCurve(f"Incompatible {axis} value types: {e}") from None


@dataclass(frozen=True)
class Curve:
    """
    Кусочно-линейная CDF, заданная явными точками.

    Создание:
        Curve([(0, 0), (10, 1)])
        Curve.from_unsorted(points)
        Curve.from_regular(x0, step, ys)

    Запросы:
        y_at_x(x)  — прямое вычисление, clamp за пределами домена
        x_at_y(y)  — квантиль, clamp за пределами диапазона y

    X и Y независимо принимают int, Fraction, float или Decimal.
    """

    points: tuple[CurvePoint, ...]

    x_family: NumberFamily = field(init=False, compare=False)
    y_family: NumberFamily = field(init=False, compare=False)
    _xs: tuple = field(init=False, repr=False, compare=False)
    _ys: tuple = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        try:
            raw_points = list(self.points)
        except TypeError:
            raise InvalidCurve(f"Points must be an iterable, got {self.points!r}") from None

        if not raw_points:
            raise InvalidCurve("Curve requires at least one point")

        points = tuple(_to_point(raw, i) for i, raw in enumerate(raw_points))

        for i in range(len(points) - 1):
            left, right = points[i], points[i + 1]
            if not left.x < right.x:
                raise InvalidCurve(
                    f"x values must be strictly increasing: "
                    f"x[{i}]={left.x} >= x[{i + 1}]={right.x}"
                )
            if right.y < left.y:
                raise InvalidCurve(
                    f"y values must be non-decreasing: "
                    f"y[{i}]={left.y} > y[{i + 1}]={right.y}"
                )

        xs = tuple(p.x for p in points)
        ys = tuple(p.y for p in points)

        object.__setattr__(self, "points", points)
        object.__setattr__(self, "x_family", _family_of(xs, "x"))
        object.__setattr__(self, "y_family", _family_of(ys, "y"))
        object.__setattr__(self, "_xs", xs)
        object.__setattr__(self, "_ys", ys)

    # -------------------------------------------------------------------------
    # Альтернативные конструкторы
    # -------------------------------------------------------------------------

    @classmethod
    def from_unsorted(cls, points: Iterable) -> "Curve":
        """
        Создание кривой из точек в произвольном порядке.

        Точки сортируются по x, затем проходят обычную валидацию:
        дубликаты x по-прежнему дают InvalidCurve.
        """
        checked = [_to_point(raw, i) for i, raw in enumerate(points)]
        return cls(sorted(checked, key=lambda p: p.x))

    @classmethod
    def from_regular(cls, x0, step, ys: Iterable) -> "Curve":
        """
        Кривая с точками на равномерной сетке x0, x0 + step, x0 + 2*step, ...

        Args:
            x0: x первой точки
            step: Шаг сетки (> 0)
            ys: Значения y по порядку

        Raises:
            InvalidCurve: Если step не положителен или ys нарушают инварианты
        """
        if isinstance(step, bool) or not is_valid_number(step) or not step > 0:
            raise InvalidCurve(f"step must be a positive finite number, got {step!r}")
        return cls([(x0 + i * step, y) for i, y in enumerate(ys)])

    # -------------------------------------------------------------------------
    # Доступ к точкам
    # -------------------------------------------------------------------------

    def __len__(self) -> int:
        return len(self.points)

    def __iter__(self):
        return iter(self.points)

    @property
    def min_x(self):
        return self._xs[0]

    @property
    def max_x(self):
        return self._xs[-1]

    @property
    def min_y(self):
        return self._ys[0]

    @property
    def max_y(self):
        return self._ys[-1]

    @property
    def x_values(self) -> tuple:
        return self._xs

    @property
    def y_values(self) -> tuple:
        return self._ys

    @property
    def is_complete(self) -> bool:
        """Первый y == 0 и последний y == 1 (нормированная CDF)."""
        return self._ys[0] == 0 and self._ys[-1] == 1

    def as_vectors(self) -> tuple[list, list]:
        """Точки как пара списков (xs, ys)."""
        return list(self._xs), list(self._ys)

    # -------------------------------------------------------------------------
    # Прямое вычисление
    # -------------------------------------------------------------------------

    def y_at_x(self, x):
        """
        Прямое вычисление y = F(x) линейной интерполяцией.

        Политика за пределами домена — clamp:
        x < min_x → первый y; x > max_x → последний y.
        В точности на сохранённом x возвращается сохранённый y без ошибки
        интерполяции. NaN на входе возвращается как есть.

        Examples:
            >>> Curve([(0, 0), (10, 1)]).y_at_x(5)
            0.5
            >>> Curve([(0, 0), (10, 1)]).y_at_x(-3)
            0
        """
        if is_nan(x):
            return x
        x = coerce(x, self.x_family)
        xs, ys = self._xs, self._ys

        if x <= xs[0]:
            return ys[0]
        if x >= xs[-1]:
            return ys[-1]

        i = bracket_index(xs, x)
        if x == xs[i]:
            return ys[i]
        return lerp(ys[i], ys[i + 1], ratio(x - xs[i], xs[i + 1] - xs[i]))

    # -------------------------------------------------------------------------
    # Обратное вычисление
    # -------------------------------------------------------------------------

    def x_at_y(self, y, plateau: PlateauPolicy = DEFAULT_PLATEAU_POLICY):
        """
        Обратное вычисление x = F⁻¹(y) (квантиль).

        - y < min_y → первый x; y > max_y → последний x (clamp)
        - y совпадает с y одной или нескольких подряд идущих точек →
          x выбирается по plateau: FIRST (начало серии), LAST (конец),
          MIDPOINT (середина между началом и концом)
        - иначе линейная интерполяция внутри интервала, где y строго растёт

        Вырожденная кривая (все y равны) не падает: выше/ниже — граничный x,
        на уровне y — по plateau.

        Examples:
            >>> Curve([(0, 0), (10, 1)]).x_at_y(0.5)
            5.0
            >>> Curve([(0, 0), (5, 0.5), (8, 0.5), (10, 1)]).x_at_y(0.5)
            5
        """
        if is_nan(y):
            return y
        plateau = PlateauPolicy(plateau)
        y = coerce(y, self.y_family)
        xs, ys = self._xs, self._ys

        if y < ys[0]:
            return xs[0]
        if y > ys[-1]:
            return xs[-1]

        lo = bisect_left(ys, y)
        hi = bisect_right(ys, y)

        if lo < hi:
            first, last = xs[lo], xs[hi - 1]
            if plateau == PlateauPolicy.FIRST or first == last:
                return first
            if plateau == PlateauPolicy.LAST:
                return last
            return (first + last) / 2

        # ys[lo - 1] < y < ys[lo]
        return lerp(xs[lo - 1], xs[lo], ratio(y - ys[lo - 1], ys[lo] - ys[lo - 1]))

    def plateau_at(self, y) -> tuple | None:
        """
        Границы плато (x_first, x_last) на уровне y или None.

        Плато — две и более подряд идущих точек с y, равным запросу.
        """
        y = coerce(y, self.y_family)
        lo = bisect_left(self._ys, y)
        hi = bisect_right(self._ys, y)
        if hi - lo < 2:
            return None
        return self._xs[lo], self._xs[hi - 1]

    # Интерфейс запросов для потребителей кривой
    evaluate_forward = y_at_x
    evaluate_inverse = x_at_y

    # -------------------------------------------------------------------------
    # Преобразования (всегда новая кривая)
    # -------------------------------------------------------------------------

    def with_point(self, x, y) -> "Curve":
        """
        Новая кривая с добавленной точкой (x, y).

        Raises:
            InvalidCurve: Дубликат x или нарушение монотонности y
        """
        point = _to_point((x, y), len(self.points))
        index = bisect_left(self._xs, point.x)
        if index < len(self._xs) and self._xs[index] == point.x:
            raise InvalidCurve(f"Duplicate x value: {point.x}")
        return Curve(self.points[:index] + (point,) + self.points[index:])

    def simplify(self, tolerance: float) -> "Curve":
        """
        Упрощение Рамера–Дугласа–Пекера.

        Удаляет внутренние точки, отстоящие от хорды не более чем на
        tolerance (евклидово расстояние в координатах (x, y)).
        Крайние точки сохраняются всегда. simplify(0.0) удаляет только
        точки, лежащие точно на прямой между соседями.

        Raises:
            ValueError: Если tolerance < 0 или не конечно
        """
        if not is_valid_number(tolerance) or tolerance < 0:
            raise ValueError(f"tolerance must be a non-negative finite number, got {tolerance!r}")

        if len(self.points) < 3:
            return self

        keep = [False] * len(self.points)
        keep[0] = keep[-1] = True
        stack = [(0, len(self.points) - 1)]

        while stack:
            start, end = stack.pop()
            if end - start < 2:
                continue
            max_distance = -1.0
            max_index = start
            for i in range(start + 1, end):
                d = self._distance_to_chord(start, end, i)
                if d > max_distance:
                    max_distance = d
                    max_index = i
            if max_distance > tolerance:
                keep[max_index] = True
                stack.append((start, max_index))
                stack.append((max_index, end))

        return Curve([p for p, k in zip(self.points, keep) if k])

    def simplify_fixed(self, max_points: int) -> "Curve":
        """
        Упрощение до не более чем max_points точек.

        Пока точек больше лимита, удаляется внутренняя точка с наименьшим
        расстоянием до прямой через её соседей.

        Raises:
            ValueError: Если max_points < 2
        """
        if max_points < 2:
            raise ValueError(f"max_points must be >= 2, got {max_points}")

        points = list(self.points)
        while len(points) > max_points:
            distances = [
                _distance_to_line(points[i - 1], points[i + 1], points[i])
                for i in range(1, len(points) - 1)
            ]
            min_index = distances.index(min(distances)) + 1
            del points[min_index]

        if len(points) == len(self.points):
            return self
        return Curve(points)

    def _distance_to_chord(self, start: int, end: int, i: int) -> float:
        return _distance_to_line(self.points[start], self.points[end], self.points[i])

    # -------------------------------------------------------------------------
    # Представление
    # -------------------------------------------------------------------------

    def __str__(self) -> str:
        quantiles = [f"{float(self.min_x):g}"]
        for q in SUMMARY_QUANTILES[1:-1]:
            quantiles.append(f"{float(self.x_at_y(q)):g}")
        quantiles.append(f"{float(self.max_x):g}")
        labels = ("min", "5%", "med", "95%", "max")
        body = ", ".join(f"{label}={value}" for label, value in zip(labels, quantiles))
        return f"Curve ({body}) with {len(self.points)} points"


def _distance_to_line(a: CurvePoint, b: CurvePoint, p: CurvePoint) -> float:
    """Расстояние от p до прямой через a и b (float-геометрия)."""
    ax, ay = float(a.x), float(a.y)
    bx, by = float(b.x), float(b.y)
    px, py = float(p.x), float(p.y)
    nx, ny = ay - by, bx - ax
    norm = math.hypot(nx, ny)
    if norm == 0.0:
        return math.hypot(px - ax, py - ay)
    return abs((px - ax) * nx + (py - ay) * ny) / norm
