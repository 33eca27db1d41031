# nexo_clinic/services/ai.py
"""
Generación de menú semanal con LLM.

Sin OPENAI_API_KEY (o si la llamada falla) se devuelve un menú simulado
construido con las plantillas de sugerencias, para no bloquear al usuario.
"""
from __future__ import annotations

import json
import logging
import random
from typing import Any, Dict, Optional

from openai import OpenAI

from nexo_clinic.services.diet_plan import new_weekly_plan
from nexo_clinic.services.suggestions import suggest_plan
from nexo_clinic.utils.macros import meal_totals

logger = logging.getLogger(__name__)

PROMPT_TEMPLATE = (
    "Actúa como un nutricionista experto. Crea un menú semanal para un paciente "
    "con un objetivo de {kcal} kcal diarias, dadas sus preferencias: {prefs}. "
    "Responde solo con JSON con las claves 'message' y 'structuredMenu' "
    "(lista de días con 'day' y 'meals': [{{'type', 'food', 'kcal'}}])."
)


def _get_openai_client(api_key: Optional[str]):
    """Devuelve un cliente OpenAI si hay API key, si no None."""
    if not api_key:
        return None
    return OpenAI(api_key=api_key)


def build_prompt(anamnesis_data: Dict[str, Any], target_kcal: float) -> str:
    return PROMPT_TEMPLATE.format(
        kcal=round(target_kcal),
        prefs=json.dumps(anamnesis_data or {}, ensure_ascii=False),
    )


def mock_menu(target_kcal: float, rng: Optional[random.Random] = None) -> Dict[str, Any]:
    """Menú simulado: plan semanal por plantillas escalado a target_kcal."""
    plan = suggest_plan(new_weekly_plan(), target_kcal, rng=rng)
    structured = []
    for idx, (day, meals) in enumerate(plan.days.items(), start=1):
        structured.append({
            "day": idx,
            "dayName": day,
            "meals": [
                {
                    "type": meal.name,
                    "food": meal.sub_name,
                    "kcal": round(meal_totals(meal)["kcal"]),
                }
                for meal in meals.values()
            ],
        })
    return {
        "message": f"Menú simulado generado para {round(target_kcal)} kcal.",
        "source": "mock",
        "structuredMenu": structured,
        "weeklyDiet": plan.to_dict(),
    }


def generate_weekly_menu(anamnesis_data: Dict[str, Any], target_kcal: float,
                         api_key: Optional[str] = None, model: str = "gpt-4o") -> Dict[str, Any]:
    client = _get_openai_client(api_key)
    if client is None:
        logger.info("OPENAI_API_KEY no configurada; devolviendo menú simulado.")
        return mock_menu(target_kcal)

    try:
        response = client.chat.completions.create(
            model=model,
            messages=[{"role": "system", "content": build_prompt(anamnesis_data, target_kcal)}],
            response_format={"type": "json_object"},
        )
        content = (response.choices[0].message.content or "").strip()
        return json.loads(content or "{}")
    except Exception as e:
        # Degradación silenciosa: el nutricionista recibe igualmente una propuesta
        logger.warning("[ai] fallo generando menú (%s); usando menú simulado", e)
        return mock_menu(target_kcal)
