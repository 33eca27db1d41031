# nexo_clinic/services/diet_plan.py
"""
Modelo en memoria del plan semanal de dieta y sus operaciones de edición.

El documento serializado es el que se guarda por paciente:
    {"weeklyDiet": {...}, "userGoals": {...}, "calcData": {...}}
con claves camelCase (instanceId, subName, protPercent...).
"""
from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)

DAYS_OF_WEEK = ("Lunes", "Martes", "Miércoles", "Jueves", "Viernes", "Sábado", "Domingo")

# (clave de slot, nombre visible)
DEFAULT_MEALS = (
    ("desayuno", "Desayuno"),
    ("comida", "Comida"),
    ("cena", "Cena"),
)

DEFAULT_GRAMS = 100


def new_instance_id(prefix: str = "item") -> str:
    return f"{prefix}-{uuid.uuid4().hex[:12]}"


def _num(value, default=0.0) -> float:
    try:
        return float(value) if value is not None else float(default)
    except (TypeError, ValueError):
        return float(default)


# ======================
# Tipos
# ======================

@dataclass(frozen=True)
class FoodItem:
    """Alimento de referencia; nutrientes por 100 g."""
    id: str
    name: str
    kcal: float
    p: float
    c: float
    f: float

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "name": self.name, "kcal": self.kcal, "p": self.p, "c": self.c, "f": self.f}

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "FoodItem":
        return cls(
            id=str(d["id"]),
            name=d.get("name") or "",
            kcal=_num(d.get("kcal")),
            p=_num(d.get("p")),
            c=_num(d.get("c")),
            f=_num(d.get("f")),
        )


@dataclass
class FoodInstance:
    """Un FoodItem colocado en una comida con su cantidad en gramos."""
    id: str
    name: str
    kcal: float
    p: float
    c: float
    f: float
    instance_id: str
    grams: Optional[float] = DEFAULT_GRAMS
    dish: Optional[str] = None

    @classmethod
    def from_item(cls, item: FoodItem, grams: float = DEFAULT_GRAMS,
                  instance_id: Optional[str] = None, dish: Optional[str] = None) -> "FoodInstance":
        return cls(
            id=item.id,
            name=item.name,
            kcal=item.kcal,
            p=item.p,
            c=item.c,
            f=item.f,
            instance_id=instance_id or new_instance_id(item.id),
            grams=grams,
            dish=dish,
        )

    def to_dict(self) -> Dict[str, Any]:
        d = {
            "id": self.id,
            "name": self.name,
            "kcal": self.kcal,
            "p": self.p,
            "c": self.c,
            "f": self.f,
            "instanceId": self.instance_id,
            "grams": self.grams,
        }
        if self.dish is not None:
            d["dish"] = self.dish
        return d

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "FoodInstance":
        food_id = str(d.get("id") or "")
        grams = d.get("grams")
        return cls(
            id=food_id,
            name=d.get("name") or "",
            kcal=_num(d.get("kcal")),
            p=_num(d.get("p")),
            c=_num(d.get("c")),
            f=_num(d.get("f")),
            instance_id=d.get("instanceId") or new_instance_id(food_id or "item"),
            grams=DEFAULT_GRAMS if grams is None else _num(grams, DEFAULT_GRAMS),
            dish=d.get("dish"),
        )


@dataclass
class Meal:
    name: str
    items: List[FoodInstance] = field(default_factory=list)
    sub_name: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {"name": self.name}
        if self.sub_name is not None:
            d["subName"] = self.sub_name
        d["items"] = [i.to_dict() for i in self.items]
        return d

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "Meal":
        return cls(
            name=d.get("name") or "",
            items=[FoodInstance.from_dict(i) for i in (d.get("items") or [])],
            sub_name=d.get("subName"),
        )


@dataclass
class NutrientGoals:
    kcal: float = 2000
    p: float = 150
    c: float = 200
    f: float = 65

    def to_dict(self) -> Dict[str, Any]:
        return {"kcal": self.kcal, "p": self.p, "c": self.c, "f": self.f}

    @classmethod
    def from_dict(cls, d: Optional[Dict[str, Any]]) -> "NutrientGoals":
        if not d:
            return cls()
        base = cls()
        return cls(
            kcal=_num(d.get("kcal"), base.kcal),
            p=_num(d.get("p"), base.p),
            c=_num(d.get("c"), base.c),
            f=_num(d.get("f"), base.f),
        )


@dataclass
class CalcData:
    """Entradas de la calculadora de objetivos que se guardan junto al plan."""
    age: float = 30
    gender: str = "Hombre"
    weight: float = 75
    height: float = 175
    activity: float = 1.2
    goal: float = 0            # ajuste relativo: -0.2 = déficit 20 %
    prot_percent: float = 30
    fat_percent: float = 35

    def to_dict(self) -> Dict[str, Any]:
        return {
            "age": self.age,
            "gender": self.gender,
            "weight": self.weight,
            "height": self.height,
            "activity": self.activity,
            "goal": self.goal,
            "protPercent": self.prot_percent,
            "fatPercent": self.fat_percent,
        }

    @classmethod
    def from_dict(cls, d: Optional[Dict[str, Any]]) -> "CalcData":
        if not d:
            return cls()
        base = cls()
        return cls(
            age=_num(d.get("age"), base.age),
            gender=d.get("gender") or base.gender,
            weight=_num(d.get("weight"), base.weight),
            height=_num(d.get("height"), base.height),
            activity=_num(d.get("activity"), base.activity),
            goal=_num(d.get("goal"), base.goal),
            prot_percent=_num(d.get("protPercent"), base.prot_percent),
            fat_percent=_num(d.get("fatPercent"), base.fat_percent),
        )


def default_day_meals() -> Dict[str, Meal]:
    return {key: Meal(name=label) for key, label in DEFAULT_MEALS}


@dataclass
class WeeklyDietPlan:
    """Siete días fijos; cada uno con su propio mapa slot -> Meal."""
    days: Dict[str, Dict[str, Meal]] = field(default_factory=dict)

    def __post_init__(self):
        unknown = [d for d in self.days if d not in DAYS_OF_WEEK]
        for d in unknown:
            logger.warning("[diet_plan] día desconocido descartado: %r", d)
            self.days.pop(d)
        # Orden fijo y siempre los siete días
        self.days = {d: self.days.get(d, default_day_meals()) for d in DAYS_OF_WEEK}

    def day(self, name: str) -> Dict[str, Meal]:
        if name not in self.days:
            raise KeyError(f"Día desconocido: {name!r}")
        return self.days[name]

    def meal(self, day: str, key: str) -> Meal:
        meals = self.day(day)
        if key not in meals:
            raise KeyError(f"Comida desconocida en {day}: {key!r}")
        return meals[key]

    def to_dict(self) -> Dict[str, Any]:
        return {
            day: {key: meal.to_dict() for key, meal in meals.items()}
            for day, meals in self.days.items()
        }

    @classmethod
    def from_dict(cls, d: Optional[Dict[str, Any]]) -> "WeeklyDietPlan":
        days = {}
        for day, meals in (d or {}).items():
            days[day] = {key: Meal.from_dict(m) for key, m in (meals or {}).items()}
        return cls(days=days)


@dataclass
class DietDocument:
    weekly_diet: WeeklyDietPlan = field(default_factory=WeeklyDietPlan)
    user_goals: NutrientGoals = field(default_factory=NutrientGoals)
    calc_data: CalcData = field(default_factory=CalcData)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "weeklyDiet": self.weekly_diet.to_dict(),
            "userGoals": self.user_goals.to_dict(),
            "calcData": self.calc_data.to_dict(),
        }

    @classmethod
    def from_dict(cls, d: Optional[Dict[str, Any]]) -> "DietDocument":
        d = d or {}
        return cls(
            weekly_diet=WeeklyDietPlan.from_dict(d.get("weeklyDiet")),
            user_goals=NutrientGoals.from_dict(d.get("userGoals")),
            calc_data=CalcData.from_dict(d.get("calcData")),
        )


# ======================
# Operaciones de edición
# ======================

def new_weekly_plan() -> WeeklyDietPlan:
    return WeeklyDietPlan()


def add_meal(plan: WeeklyDietPlan, day: str, name: str = "Nueva Comida") -> str:
    """Añade una comida vacía al día y devuelve su clave generada."""
    meals = plan.day(day)
    key = f"comida-{uuid.uuid4().hex[:10]}"
    meals[key] = Meal(name=name)
    return key


def remove_meal(plan: WeeklyDietPlan, day: str, key: str) -> Meal:
    plan.meal(day, key)
    return plan.day(day).pop(key)


def add_food(plan: WeeklyDietPlan, day: str, key: str, food: FoodItem,
             index: Optional[int] = None, grams: float = DEFAULT_GRAMS) -> FoodInstance:
    """Copia un alimento del catálogo dentro de la comida (al final o en `index`)."""
    meal = plan.meal(day, key)
    inst = FoodInstance.from_item(food, grams=grams)
    if index is None:
        meal.items.append(inst)
    else:
        meal.items.insert(index, inst)
    return inst


def move_food(plan: WeeklyDietPlan, day: str, src_key: str, src_index: int,
              dst_key: str, dst_index: int) -> FoodInstance:
    """Reordena dentro de una comida o mueve entre comidas del mismo día."""
    src = plan.meal(day, src_key)
    dst = plan.meal(day, dst_key)
    if not 0 <= src_index < len(src.items):
        raise IndexError(f"Posición fuera de rango: {src_index}")
    moved = src.items.pop(src_index)
    dst.items.insert(dst_index, moved)
    return moved


def remove_food(plan: WeeklyDietPlan, day: str, key: str, index: int) -> FoodInstance:
    return plan.meal(day, key).items.pop(index)


def update_grams(plan: WeeklyDietPlan, day: str, key: str, index: int, grams: float) -> FoodInstance:
    if grams is None or grams < 0:
        raise ValueError("Los gramos deben ser >= 0.")
    inst = plan.meal(day, key).items[index]
    inst.grams = grams
    return inst


def update_dish(plan: WeeklyDietPlan, day: str, key: str, index: int, dish: Optional[str]) -> FoodInstance:
    inst = plan.meal(day, key).items[index]
    inst.dish = dish
    return inst
