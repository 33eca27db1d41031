# nexo_clinic/services/energy.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from nexo_clinic.services.diet_plan import CalcData, NutrientGoals
from nexo_clinic.utils.calculos import calcular_bmr, calcular_tdee


def actividad_factor(nivel: Union[str, float, int, None]) -> float:
    """
    Acepta:
      - texto: 'sedentario', 'ligero', 'moderado', 'alto', 'muy_alto'
      - número (float/int): 1.2, 1.375, 1.55, etc. (se usa tal cual si es razonable)
      - None: usa 1.2 por defecto
    """
    if nivel is None:
        return 1.2

    if isinstance(nivel, (int, float)):
        x = float(nivel)
        if 1.0 <= x <= 2.5:
            return x
        return 1.2

    s = str(nivel).strip().lower()
    try:
        x = float(s.replace(",", "."))
        if 1.0 <= x <= 2.5:
            return x
    except ValueError:
        pass

    mapping = {
        "sedentario": 1.2,
        "ligero": 1.375,
        "moderado": 1.55,
        "alto": 1.725,
        "muy_alto": 1.9,
    }
    return mapping.get(s, 1.2)


@dataclass
class GoalsResult:
    bmr: float
    tdee: float
    daily_kcal: int
    goals: NutrientGoals

    def to_dict(self) -> dict:
        return {
            "bmr": round(self.bmr),
            "tdee": round(self.tdee),
            "dailyKcal": self.daily_kcal,
            "userGoals": self.goals.to_dict(),
        }


def compute_goals(calc: CalcData) -> GoalsResult:
    """
    Objetivos diarios a partir de la calculadora:
      BMR Mifflin -> TDEE (factor actividad) -> ajuste de objetivo (goal, p.ej. -0.2)
      y reparto de macros: proteína y grasa en %, el resto carbohidratos.
    """
    if calc.prot_percent < 0 or calc.fat_percent < 0:
        raise ValueError("Los porcentajes de macros no pueden ser negativos.")
    if calc.prot_percent + calc.fat_percent > 100:
        raise ValueError("Proteína + grasa no pueden superar el 100 %.")

    bmr = calcular_bmr(
        "mifflin",
        sexo=calc.gender,
        peso=calc.weight,
        altura=calc.height,
        edad=calc.age,
    )
    tdee = calcular_tdee(bmr, actividad_factor(calc.activity))
    daily = round(tdee * (1 + (calc.goal or 0)))

    carb_percent = 100 - calc.prot_percent - calc.fat_percent
    goals = NutrientGoals(
        kcal=daily,
        p=round(daily * (calc.prot_percent / 100) / 4),
        c=round(daily * (carb_percent / 100) / 4),
        f=round(daily * (calc.fat_percent / 100) / 9),
    )
    return GoalsResult(bmr=bmr, tdee=tdee, daily_kcal=daily, goals=goals)
