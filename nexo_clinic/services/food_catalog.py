# nexo_clinic/services/food_catalog.py
"""Catálogo estático de alimentos (valores por 100 g). Solo lectura."""
from typing import Dict, List, Optional

from nexo_clinic.services.diet_plan import FoodItem

FOOD_CATALOG = (
    FoodItem("avena", "Copos de avena", 389, 16.9, 66.3, 6.9),
    FoodItem("huevo", "Huevo entero", 155, 13.0, 1.1, 11.0),
    FoodItem("leche", "Leche semidesnatada", 46, 3.2, 4.8, 1.6),
    FoodItem("platano", "Plátano", 89, 1.1, 22.8, 0.3),
    FoodItem("pollo", "Pechuga de pollo", 165, 31.0, 0.0, 3.6),
    FoodItem("arroz", "Arroz blanco (cocido)", 130, 2.7, 28.0, 0.3),
    FoodItem("aceite-oliva", "Aceite de oliva virgen extra", 884, 0.0, 0.0, 100.0),
    FoodItem("aguacate", "Aguacate", 160, 2.0, 8.5, 14.7),
    FoodItem("brocoli", "Brócoli", 34, 2.8, 6.6, 0.4),
    FoodItem("salmon", "Salmón", 208, 20.0, 0.0, 13.0),
    FoodItem("patata", "Patata (cocida)", 77, 2.0, 17.0, 0.1),
    FoodItem("yogur", "Yogur natural", 61, 3.5, 4.7, 3.3),
    FoodItem("nueces", "Nueces", 654, 15.0, 14.0, 65.0),
    FoodItem("pan-integral", "Pan integral", 247, 13.0, 41.0, 3.4),
    FoodItem("manzana", "Manzana", 52, 0.3, 14.0, 0.2),
    FoodItem("almendras", "Almendras", 579, 21.0, 22.0, 50.0),
    FoodItem("lentejas", "Lentejas (cocidas)", 116, 9.0, 20.0, 0.4),
    FoodItem("garbanzos", "Garbanzos (cocidos)", 164, 8.9, 27.4, 2.6),
    FoodItem("atun", "Atún al natural", 116, 26.0, 0.0, 1.0),
    FoodItem("merluza", "Merluza", 71, 17.0, 0.0, 0.6),
    FoodItem("pavo", "Pechuga de pavo", 135, 29.0, 0.0, 1.5),
    FoodItem("ternera", "Ternera magra", 158, 26.0, 0.0, 6.0),
    FoodItem("pasta", "Pasta (cocida)", 158, 5.8, 30.9, 0.9),
    FoodItem("tomate", "Tomate", 18, 0.9, 3.9, 0.2),
    FoodItem("espinacas", "Espinacas", 23, 2.9, 3.6, 0.4),
    FoodItem("queso-fresco", "Queso fresco batido 0%", 46, 8.0, 3.5, 0.2),
    FoodItem("fresas", "Fresas", 32, 0.7, 7.7, 0.3),
    FoodItem("kiwi", "Kiwi", 61, 1.1, 14.7, 0.5),
)

_BY_ID: Dict[str, FoodItem] = {f.id: f for f in FOOD_CATALOG}


def get_food(food_id: str) -> Optional[FoodItem]:
    return _BY_ID.get(food_id)


def search_catalog(query: str, limit: int = 50) -> List[FoodItem]:
    q = (query or "").strip().lower()
    if not q:
        return list(FOOD_CATALOG[:limit])
    return [f for f in FOOD_CATALOG if q in f.name.lower()][:limit]


def catalog_rows() -> List[dict]:
    """Filas listas para la tabla `foods` (seed/export)."""
    return [
        {
            "id": f.id,
            "name": f.name,
            "kcal_per_100g": f.kcal,
            "protein_per_100g": f.p,
            "carbs_per_100g": f.c,
            "fat_per_100g": f.f,
        }
        for f in FOOD_CATALOG
    ]
