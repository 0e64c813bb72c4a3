"""
Integration — Замкнутые интегралы кусочно-линейной CDF

Для свёртки кривых нужен интеграл ∫ F(u) du по произвольному интервалу,
где F — кусочно-линейная функция распределения:

    F(s) = 0                          для s < x_0
    F(s) = линейная интерполяция      для x_0 <= s <= x_n
    F(s) = y_n                        для s > x_n

Первая точка несёт атом массы y_0 в x_0, поэтому ниже x_0 функция равна 0
(в отличие от clamp-политики прямого вычисления кривой).

Интеграл кусочно-линейной функции — кусочно-квадратичный, поэтому
G(s) = ∫_{x_0}^{s} F(u) du считается точно через префиксные суммы трапеций.
"""

from typing import Sequence

from src.core.math.interpolation import bracket_index, lerp, ratio


class PiecewiseLinearIntegral:
    """
    Первообразная G(s) = ∫_{x_0}^{s} F(u) du кусочно-линейной CDF.

    Префиксные суммы трапеций считаются один раз при создании,
    каждое вычисление — O(log n).
    """

    def __init__(self, xs: Sequence, ys: Sequence):
        """
        Args:
            xs: Строго возрастающие x (непустые)
            ys: Неубывающие y той же длины
        """
        if not xs or len(xs) != len(ys):
            raise ValueError("xs and ys must be non-empty and of equal length")

        self._xs = tuple(xs)
        self._ys = tuple(ys)

        prefix = [0]
        for i in range(len(self._xs) - 1):
            width = self._xs[i + 1] - self._xs[i]
            prefix.append(prefix[-1] + width * (self._ys[i] + self._ys[i + 1]) / 2)
        self._prefix = tuple(prefix)

    def cdf(self, s):
        """F(s) с нулём ниже первой точки."""
        xs, ys = self._xs, self._ys
        if s < xs[0]:
            return 0
        if s >= xs[-1]:
            return ys[-1]
        i = bracket_index(xs, s)
        if s == xs[i]:
            return ys[i]
        return lerp(ys[i], ys[i + 1], ratio(s - xs[i], xs[i + 1] - xs[i]))

    def antiderivative(self, s):
        """G(s) = ∫_{x_0}^{s} F(u) du (0 для s <= x_0)."""
        xs, ys = self._xs, self._ys
        if s <= xs[0]:
            return 0
        if s >= xs[-1]:
            return self._prefix[-1] + ys[-1] * (s - xs[-1])
        i = bracket_index(xs, s)
        y_s = self.cdf(s)
        return self._prefix[i] + (s - xs[i]) * (ys[i] + y_s) / 2

    def integral(self, lower, upper):
        """∫_{lower}^{upper} F(u) du."""
        return self.antiderivative(upper) - self.antiderivative(lower)
