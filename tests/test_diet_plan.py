import pytest

from nexo_clinic.services.diet_plan import (
    DAYS_OF_WEEK, CalcData, DietDocument, FoodInstance, Meal, NutrientGoals, WeeklyDietPlan,
    add_food, add_meal, move_food, new_weekly_plan, remove_food, remove_meal,
    update_dish, update_grams,
)
from nexo_clinic.services.food_catalog import get_food


@pytest.fixture
def plan():
    return new_weekly_plan()


def test_plan_nuevo_tiene_siete_dias_con_comidas_por_defecto(plan):
    assert tuple(plan.days) == DAYS_OF_WEEK
    for meals in plan.days.values():
        assert list(meals) == ["desayuno", "comida", "cena"]
        assert [m.name for m in meals.values()] == ["Desayuno", "Comida", "Cena"]
        assert all(m.items == [] for m in meals.values())


def test_los_dias_no_comparten_comidas(plan):
    add_food(plan, "Lunes", "desayuno", get_food("avena"))
    assert plan.meal("Martes", "desayuno").items == []


def test_add_meal_genera_clave(plan):
    key = add_meal(plan, "Miércoles")
    assert key.startswith("comida-")
    assert plan.meal("Miércoles", key).name == "Nueva Comida"
    assert "comida-" not in "".join(plan.day("Jueves"))


def test_remove_meal(plan):
    add_food(plan, "Lunes", "cena", get_food("salmon"))
    removed = remove_meal(plan, "Lunes", "cena")
    assert removed.items[0].id == "salmon"
    assert "cena" not in plan.day("Lunes")


def test_add_food_copia_con_instance_id_unico(plan):
    a = add_food(plan, "Lunes", "comida", get_food("pollo"))
    b = add_food(plan, "Lunes", "comida", get_food("pollo"), grams=150)
    c = add_food(plan, "Lunes", "comida", get_food("arroz"), index=0)
    items = plan.meal("Lunes", "comida").items
    assert [i.id for i in items] == ["arroz", "pollo", "pollo"]
    assert len({a.instance_id, b.instance_id, c.instance_id}) == 3
    assert a.grams == 100 and b.grams == 150


def test_move_food_reordena_dentro_de_una_comida(plan):
    for fid in ("avena", "leche", "platano"):
        add_food(plan, "Lunes", "desayuno", get_food(fid))
    move_food(plan, "Lunes", "desayuno", 2, "desayuno", 0)
    assert [i.id for i in plan.meal("Lunes", "desayuno").items] == ["platano", "avena", "leche"]


def test_move_food_entre_comidas(plan):
    moved = add_food(plan, "Viernes", "desayuno", get_food("yogur"))
    move_food(plan, "Viernes", "desayuno", 0, "cena", 0)
    assert plan.meal("Viernes", "desayuno").items == []
    assert plan.meal("Viernes", "cena").items[0].instance_id == moved.instance_id


def test_move_food_fuera_de_rango(plan):
    with pytest.raises(IndexError):
        move_food(plan, "Lunes", "desayuno", 0, "cena", 0)


def test_remove_food_y_update_dish(plan):
    add_food(plan, "Sábado", "comida", get_food("lentejas"))
    update_dish(plan, "Sábado", "comida", 0, "Primer plato")
    assert plan.meal("Sábado", "comida").items[0].dish == "Primer plato"
    gone = remove_food(plan, "Sábado", "comida", 0)
    assert gone.id == "lentejas"
    assert plan.meal("Sábado", "comida").items == []


def test_update_grams(plan):
    add_food(plan, "Domingo", "cena", get_food("merluza"))
    assert update_grams(plan, "Domingo", "cena", 0, 0).grams == 0
    assert update_grams(plan, "Domingo", "cena", 0, 180).grams == 180
    with pytest.raises(ValueError):
        update_grams(plan, "Domingo", "cena", 0, -5)


def test_dia_o_comida_desconocidos(plan):
    with pytest.raises(KeyError):
        add_meal(plan, "Funday")
    with pytest.raises(KeyError):
        add_food(plan, "Lunes", "merienda", get_food("kiwi"))


def test_from_dict_descarta_dias_desconocidos_y_completa():
    plan = WeeklyDietPlan.from_dict({
        "Funday": {"x": {"name": "X", "items": []}},
        "Martes": {"snack": {"name": "Snack", "items": []}},
    })
    assert tuple(plan.days) == DAYS_OF_WEEK
    assert list(plan.day("Martes")) == ["snack"]
    assert list(plan.day("Lunes")) == ["desayuno", "comida", "cena"]


def test_serializacion_camel_case(plan):
    add_food(plan, "Lunes", "desayuno", get_food("avena"), grams=60)
    plan.meal("Lunes", "desayuno").sub_name = "Porridge"
    d = DietDocument(weekly_diet=plan).to_dict()

    assert set(d) == {"weeklyDiet", "userGoals", "calcData"}
    meal = d["weeklyDiet"]["Lunes"]["desayuno"]
    assert meal["subName"] == "Porridge"
    item = meal["items"][0]
    assert item["grams"] == 60 and item["instanceId"]
    assert "dish" not in item
    assert d["userGoals"] == {"kcal": 2000, "p": 150, "c": 200, "f": 65}
    assert d["calcData"]["protPercent"] == 30 and d["calcData"]["fatPercent"] == 35


def test_round_trip_documento(plan):
    add_food(plan, "Jueves", "comida", get_food("garbanzos"), grams=80)
    update_dish(plan, "Jueves", "comida", 0, "Guiso")
    doc = DietDocument(
        weekly_diet=plan,
        user_goals=NutrientGoals(kcal=1800, p=120, c=180, f=60),
        calc_data=CalcData(age=41, gender="Mujer", weight=62, height=164, goal=-0.1),
    )
    again = DietDocument.from_dict(doc.to_dict())
    assert again == doc
    assert again.to_dict() == doc.to_dict()


def test_instancia_sin_gramos_usa_100():
    i = FoodInstance.from_dict({"id": "kiwi", "name": "Kiwi", "kcal": 61, "p": 1.1, "c": 15, "f": 0.5})
    assert i.grams == 100
    assert i.instance_id.startswith("kiwi-")


def test_meal_sin_subname_no_lo_serializa():
    assert "subName" not in Meal(name="Cena").to_dict()
