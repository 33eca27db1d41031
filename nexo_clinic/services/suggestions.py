# nexo_clinic/services/suggestions.py
"""
Sugerencias de menú por plantillas.

Para cada comida se elige al azar (uniforme) una de tres combinaciones
predefinidas según el tipo de slot y se escalan los gramos para que sus kcal
igualen el reparto equitativo del objetivo diario entre las comidas del día.
La elección aleatoria solo aporta variedad; no optimiza nada.
"""
from __future__ import annotations

import logging
import math
import random
from typing import Dict, List, MutableMapping, Optional, Sequence, Tuple

from nexo_clinic.services.diet_plan import FoodInstance, Meal, WeeklyDietPlan, new_instance_id
from nexo_clinic.services.food_catalog import get_food
from nexo_clinic.utils.macros import aggregate

logger = logging.getLogger(__name__)

Template = Tuple[str, Sequence[Tuple[str, float]]]

# (nombre del plato, [(food_id, gramos base), ...])
MEAL_TEMPLATES: Dict[str, List[Template]] = {
    "breakfast": [
        ("Porridge de Avena y Plátano", [("avena", 60), ("leche", 250), ("platano", 100)]),
        ("Huevos revueltos con Avena", [("huevo", 150), ("avena", 50), ("aceite-oliva", 10)]),
        ("Yogur con Nueces y Plátano", [("yogur", 200), ("nueces", 20), ("platano", 120)]),
    ],
    "lunch": [
        ("Pollo con Arroz y Brócoli", [("pollo", 200), ("arroz", 100), ("brocoli", 150), ("aceite-oliva", 15)]),
        ("Salmón con Patatas", [("salmon", 180), ("patata", 300), ("aceite-oliva", 10)]),
        ("Pollo con Aguacate y Arroz", [("pollo", 200), ("aguacate", 80), ("arroz", 80)]),
    ],
    "dinner": [
        ("Salmón al horno con Patatas", [("salmon", 150), ("patata", 200), ("aceite-oliva", 10)]),
        ("Tortilla de Brócoli", [("huevo", 150), ("brocoli", 150), ("aceite-oliva", 15)]),
        ("Pollo ligero a la plancha", [("pollo", 180), ("aguacate", 50), ("aceite-oliva", 10)]),
    ],
    "other": [
        ("Snack Rápido", [("yogur", 200), ("nueces", 30), ("platano", 100)]),
        ("Tostada de Aguacate", [("pan-integral", 60), ("aguacate", 50)]),
        ("Fruta con Yogur y Almendras", [("yogur", 150), ("manzana", 150), ("almendras", 15)]),
    ],
}

_KEYWORDS = (
    ("breakfast", ("desayuno", "mañana", "breakfast")),
    ("lunch", ("comida", "almuerzo", "lunch")),
    ("dinner", ("cena", "dinner")),
)


def classify_slot(slot_name: str) -> str:
    """breakfast | lunch | dinner | other, por subcadena sin distinguir mayúsculas."""
    name = (slot_name or "").lower()
    for kind, words in _KEYWORDS:
        if any(w in name for w in words):
            return kind
    return "other"


def _round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


def _instances(combo: Sequence[Tuple[str, float]]) -> List[FoodInstance]:
    items = []
    for food_id, grams in combo:
        food = get_food(food_id)
        if food is None:
            logger.warning("[suggestions] alimento de plantilla no encontrado: %s", food_id)
            continue
        items.append(FoodInstance.from_item(food, grams=grams, instance_id=new_instance_id("ai")))
    return items


def scale_to_kcal(items: List[FoodInstance], target_kcal: float) -> List[FoodInstance]:
    """
    Escala los gramos para que el total de kcal se acerque a target_kcal.
    Redondeo a gramo entero con mínimo de 1 g. Sin kcal -> sin escalar.

    El error de redondeo acumulado se compensa en el alimento con menos
    kcal por gramo, que es el que admite el ajuste más fino.
    """
    current = aggregate(items)["kcal"]
    if current <= 0:
        return items
    factor = target_kcal / current
    for it in items:
        it.grams = max(1, _round_half_up(float(it.grams or 0) * factor))

    residual = target_kcal - aggregate(items)["kcal"]
    energetic = [it for it in items if it.kcal > 0]
    if energetic and residual:
        finest = min(energetic, key=lambda it: it.kcal)
        finest.grams = max(1, finest.grams + _round_half_up(residual / (finest.kcal / 100.0)))
    return items


def suggest(slot_name: str, daily_kcal_goal: float, meal_count: int,
            rng: Optional[random.Random] = None,
            templates: Optional[Dict[str, List[Template]]] = None) -> Meal:
    """Devuelve una Meal sugerida para el slot, ya escalada a su parte del objetivo."""
    if meal_count is None or meal_count < 1:
        raise ValueError("meal_count debe ser >= 1.")
    rng = rng or random
    templates = MEAL_TEMPLATES if templates is None else templates

    options = templates.get(classify_slot(slot_name)) or []
    if not options:
        return Meal(name=slot_name, items=[])

    dish, combo = rng.choice(options)
    items = _instances(combo)
    target = float(daily_kcal_goal) / meal_count
    return Meal(name=slot_name, items=scale_to_kcal(items, target), sub_name=dish)


def suggest_day(day_meals: MutableMapping[str, Meal], daily_kcal_goal: float,
                rng: Optional[random.Random] = None) -> MutableMapping[str, Meal]:
    """Sustituye cada comida del día por una sugerencia (conserva clave y nombre)."""
    count = len(day_meals)
    for key in list(day_meals):
        current = day_meals[key]
        suggested = suggest(current.name, daily_kcal_goal, count, rng=rng)
        suggested.name = current.name
        day_meals[key] = suggested
    return day_meals


def suggest_plan(plan: WeeklyDietPlan, daily_kcal_goal: float,
                 rng: Optional[random.Random] = None) -> WeeklyDietPlan:
    for meals in plan.days.values():
        if meals:
            suggest_day(meals, daily_kcal_goal, rng=rng)
    return plan
