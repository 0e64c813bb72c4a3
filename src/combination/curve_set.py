"""
CurveSet — Семейство кривых, индексированное числовым ключом

Упорядоченный набор пар (key, Curve) со строго возрастающими ключами.
Для ключа между двумя сохранёнными кривые интерполируются
weighted_average с весами (1 - a, a), где a — доля ключа в интервале.

Пример: кривые задержки прибытия, индексированные задержкой отправления.

ПОЛИТИКА ЗА ПРЕДЕЛАМИ ДИАПАЗОНА КЛЮЧЕЙ:
- clamp=True  (default) → граничная кривая (continuation)
- clamp=False → DomainMismatch
"""

import logging
from bisect import bisect_left
from dataclasses import dataclass
from typing import Iterable

from src.combination.mixture import weighted_average
from src.core.domain.curve import Curve, CurveError, DomainMismatch
from src.core.math.interpolation import bracket_index
from src.core.math.numerical_safeguards import is_valid_number

logger = logging.getLogger(__name__)


class InvalidCurveSet(CurveError):
    """Нарушение инварианта набора кривых (ключ не число, дубликат ключа)."""

    pass


@dataclass(frozen=True)
class CurveSet:
    """
    Immutable набор кривых с интерполяцией по ключу.

    Attributes:
        entries: Пары (key, Curve), ключи строго возрастают
    """

    entries: tuple[tuple[object, Curve], ...] = ()

    def __post_init__(self):
        entries = tuple((key, curve) for key, curve in self.entries)
        for key, curve in entries:
            if isinstance(key, bool) or not is_valid_number(key):
                raise InvalidCurveSet(f"key must be a finite number, got {key!r}")
            if not isinstance(curve, Curve):
                raise InvalidCurveSet(f"value for key {key} is not a Curve: {curve!r}")
        for (k1, _), (k2, _) in zip(entries, entries[1:]):
            if not k1 < k2:
                raise InvalidCurveSet(f"keys must be strictly increasing: {k1} >= {k2}")
        object.__setattr__(self, "entries", entries)

    @classmethod
    def from_pairs(cls, pairs: Iterable) -> "CurveSet":
        """Создание из пар в произвольном порядке (сортировка по ключу)."""
        return cls(tuple(sorted(pairs, key=lambda pair: pair[0])))

    def __len__(self) -> int:
        return len(self.entries)

    @property
    def keys(self) -> tuple:
        return tuple(key for key, _ in self.entries)

    @property
    def min_key(self):
        return self.entries[0][0]

    @property
    def max_key(self):
        return self.entries[-1][0]

    def with_curve(self, key, curve: Curve) -> "CurveSet":
        """
        Новый набор с добавленной кривой.

        Raises:
            InvalidCurveSet: Если key уже присутствует
        """
        keys = self.keys
        index = bisect_left(keys, key)
        if index < len(keys) and keys[index] == key:
            raise InvalidCurveSet(f"Duplicate key: {key}")
        return CurveSet(self.entries[:index] + ((key, curve),) + self.entries[index:])

    def curve_at(self, key, clamp: bool = True) -> Curve:
        """
        Кривая для ключа key.

        - key совпадает с сохранённым → сохранённая кривая
        - key между двумя ключами → weighted_average соседних кривых
        - key вне диапазона → граничная кривая (clamp=True) или DomainMismatch

        Raises:
            DomainMismatch: Пустой набор или key вне диапазона при clamp=False
        """
        if not self.entries:
            raise DomainMismatch("CurveSet is empty")

        keys = self.keys
        if key < keys[0] or key > keys[-1]:
            if not clamp:
                raise DomainMismatch(
                    f"key {key} outside curve set range [{keys[0]}, {keys[-1]}]"
                )
            return self.entries[0][1] if key < keys[0] else self.entries[-1][1]

        if key == keys[-1]:
            return self.entries[-1][1]

        i = bracket_index(keys, key)
        lower_key, lower = self.entries[i]
        upper_key, upper = self.entries[i + 1]
        if key == lower_key:
            return lower

        a = (float(key) - float(lower_key)) / (float(upper_key) - float(lower_key))
        logger.debug("Interpolating curves at key %s between %s and %s", key, lower_key, upper_key)
        return weighted_average([lower, upper], [1.0 - a, a])
