from typing import Iterable, Sequence

from daily_diet.schemas.meal import MealMetrics


class DietMetricsCalculator:
    """Метрики соблюдения диеты по истории приемов пищи.

    Все методы ожидают флаги in_diet в порядке datetime по убыванию.
    """

    @classmethod
    def best_diet_sequence(cls, flags: Iterable[bool]) -> int:
        best = 0
        current = 0

        for in_diet in flags:
            if in_diet:
                current += 1
            else:
                if current > best:
                    best = current
                current = 0

        # Серия, которой заканчивается история, тоже учитывается
        if current > best:
            best = current

        return best

    @classmethod
    def from_counts(cls, total: int, diet: int, not_diet: int, flags: Iterable[bool]) -> MealMetrics:
        return MealMetrics(
            total_meals=total,
            diet_meals=diet,
            not_diet_meals=not_diet,
            best_diet_sequence=cls.best_diet_sequence(flags),
        )

    @classmethod
    def summarize(cls, flags: Sequence[bool]) -> MealMetrics:
        diet = sum(1 for in_diet in flags if in_diet)
        return cls.from_counts(
            total=len(flags),
            diet=diet,
            not_diet=len(flags) - diet,
            flags=flags,
        )
