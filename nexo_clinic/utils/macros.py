# nexo_clinic/utils/macros.py
"""
Agregador de macronutrientes.

Cada instancia aporta sus valores por 100 g escalados por grams / 100.
Gramos ausentes o negativos cuentan como la ración por defecto (100 g).
"""
from typing import Dict, Iterable, Mapping

from nexo_clinic.services.diet_plan import DEFAULT_GRAMS, FoodInstance, Meal, WeeklyDietPlan

NUTRIENTS = ("kcal", "p", "c", "f")


def _zero() -> Dict[str, float]:
    return {k: 0.0 for k in NUTRIENTS}


def effective_grams(grams) -> float:
    if grams is None:
        return float(DEFAULT_GRAMS)
    g = float(grams)
    return float(DEFAULT_GRAMS) if g < 0 else g


def aggregate(items: Iterable[FoodInstance]) -> Dict[str, float]:
    """Suma kcal/p/c/f de una lista de FoodInstance. Lista vacía -> ceros."""
    t = _zero()
    for it in items:
        ratio = effective_grams(it.grams) / 100.0
        t["kcal"] += it.kcal * ratio
        t["p"] += it.p * ratio
        t["c"] += it.c * ratio
        t["f"] += it.f * ratio
    return t


def sum_totals(totals: Iterable[Mapping[str, float]]) -> Dict[str, float]:
    t = _zero()
    for row in totals:
        for k in NUTRIENTS:
            t[k] += float(row.get(k, 0.0))
    return t


def meal_totals(meal: Meal) -> Dict[str, float]:
    return aggregate(meal.items)


def day_totals(day_meals: Mapping[str, Meal]) -> Dict[str, float]:
    return sum_totals(meal_totals(m) for m in day_meals.values())


def week_totals(plan: WeeklyDietPlan) -> Dict[str, Dict[str, float]]:
    return {day: day_totals(meals) for day, meals in plan.days.items()}


def rounded(totals: Mapping[str, float], ndigits: int = 1) -> Dict[str, float]:
    return {k: round(float(v), ndigits) for k, v in totals.items()}
