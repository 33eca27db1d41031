from types import SimpleNamespace

import pytest

import nexo_clinic.services.ai as ai
from nexo_clinic.services.diet_plan import DAYS_OF_WEEK, add_food, new_weekly_plan
from nexo_clinic.services.diet_repository import DietPlanRepository
from nexo_clinic.services.food_catalog import get_food


def _weekly():
    plan = new_weekly_plan()
    add_food(plan, "Lunes", "desayuno", get_food("avena"), grams=60)
    add_food(plan, "Lunes", "desayuno", get_food("leche"), grams=250)
    return plan.to_dict()


def test_paciente_sin_plan_devuelve_plan_por_defecto(client, patient):
    resp = client.get(f"/diets/patient/{patient['id']}")
    assert resp.status_code == 200
    j = resp.get_json()
    assert j["version"] == 0
    assert resp.headers["ETag"] == '"0"'
    assert list(j["weeklyDiet"]) == list(DAYS_OF_WEEK)
    assert j["userGoals"] == {"kcal": 2000, "p": 150, "c": 200, "f": 65}
    assert j["totals"]["Lunes"]["kcal"] == 0


def test_guardar_y_recargar(client, patient):
    weekly = _weekly()
    resp = client.post("/diets", json={"patientId": patient["id"], "weeklyDiet": weekly})
    assert resp.status_code == 201
    assert resp.get_json()["version"] == 1
    assert resp.headers["ETag"] == '"1"'

    j = client.get(f"/diets/patient/{patient['id']}").get_json()
    assert j["weeklyDiet"] == weekly
    # 60 g avena (233.4) + 250 ml leche (115)
    assert j["totals"]["Lunes"]["kcal"] == pytest.approx(348.4)


def test_conflicto_de_version(client, patient):
    pid = patient["id"]
    client.post("/diets", json={"patientId": pid, "weeklyDiet": _weekly()})

    ok = client.post("/diets", json={"patientId": pid, "weeklyDiet": _weekly(), "version": 1})
    assert ok.status_code == 200
    assert ok.get_json()["version"] == 2

    stale = client.post("/diets", json={"patientId": pid, "weeklyDiet": _weekly(), "version": 1})
    assert stale.status_code == 409
    assert stale.get_json()["currentVersion"] == 2

    via_header = client.post(
        "/diets", json={"patientId": pid, "weeklyDiet": _weekly()}, headers={"If-Match": '"2"'}
    )
    assert via_header.status_code == 200
    assert via_header.get_json()["version"] == 3


def test_guardar_validacion(client, patient):
    assert client.post("/diets", json={"patientId": patient["id"]}).status_code == 422
    bad = client.post("/diets", json={"patientId": patient["id"], "weeklyDiet": {}, "version": "x"})
    assert bad.status_code == 422
    assert "version" in bad.get_json()["fields"]
    assert client.post("/diets", json={"patientId": 999, "weeklyDiet": {}}).status_code == 404


def test_borrar_paciente_borra_su_plan(app, client, patient):
    client.post("/diets", json={"patientId": patient["id"], "weeklyDiet": _weekly()})
    client.delete(f"/patients/{patient['id']}")
    with app.app_context():
        assert DietPlanRepository().get(patient["id"]) is None
    assert patient["id"] not in app.extensions["diet_plan_cache"]


def test_sugerir_dia_no_guarda(client, patient):
    pid = patient["id"]
    body = {"day": "Martes", "targetKcal": 2400, "seed": 3}
    resp = client.post(f"/diets/suggest/{pid}", json=body)
    assert resp.status_code == 200
    j = resp.get_json()
    assert list(j["meals"]) == ["desayuno", "comida", "cena"]
    assert all(m["subName"] for m in j["meals"].values())
    assert abs(j["totals"]["kcal"] - 2400) <= 24

    again = client.post(f"/diets/suggest/{pid}", json=body).get_json()
    assert [m["subName"] for m in again["meals"].values()] == [m["subName"] for m in j["meals"].values()]

    stored = client.get(f"/diets/patient/{pid}").get_json()
    assert stored["weeklyDiet"]["Martes"]["comida"]["items"] == []


def test_sugerir_usa_objetivo_guardado(client, patient):
    pid = patient["id"]
    client.post("/diets", json={
        "patientId": pid, "weeklyDiet": {}, "userGoals": {"kcal": 3000, "p": 180, "c": 350, "f": 90},
    })
    j = client.post(f"/diets/suggest/{pid}", json={"day": "Lunes"}).get_json()
    assert j["targetKcal"] == 3000
    assert abs(j["totals"]["kcal"] - 3000) <= 30


def test_sugerir_dia_invalido(client, patient):
    resp = client.post(f"/diets/suggest/{patient['id']}", json={"day": "Funday"})
    assert resp.status_code == 422
    assert "day" in resp.get_json()["fields"]


def test_menu_ia_simulado_sin_clave(client, patient):
    resp = client.post(f"/diets/generate-ai/{patient['id']}", json={"targetKcal": 2200})
    assert resp.status_code == 200
    j = resp.get_json()
    assert j["source"] == "mock"
    assert [d["dayName"] for d in j["structuredMenu"]] == list(DAYS_OF_WEEK)
    assert list(j["weeklyDiet"]) == list(DAYS_OF_WEEK)


class _FakeCompletions:
    def __init__(self, content=None, error=None):
        self.content, self.error, self.calls = content, error, []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error:
            raise self.error
        msg = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=msg)])


def _fake_client(completions):
    return SimpleNamespace(chat=SimpleNamespace(completions=completions))


def test_menu_ia_con_llm(app, client, patient, monkeypatch):
    client.post("/anamnesis", json={"patient_id": patient["id"], "data": {"alergias": "frutos secos"}})
    completions = _FakeCompletions(content='{"message": "Menú listo", "structuredMenu": []}')
    monkeypatch.setattr(ai, "_get_openai_client", lambda key: _fake_client(completions))
    app.config["OPENAI_API_KEY"] = "sk-test"

    resp = client.post(f"/diets/generate-ai/{patient['id']}", json={"targetKcal": 1800})
    assert resp.get_json() == {"message": "Menú listo", "structuredMenu": []}
    prompt = completions.calls[0]["messages"][0]["content"]
    assert "1800" in prompt and "frutos secos" in prompt


def test_menu_ia_fallo_degrada_a_simulado(app, client, patient, monkeypatch):
    completions = _FakeCompletions(error=RuntimeError("timeout"))
    monkeypatch.setattr(ai, "_get_openai_client", lambda key: _fake_client(completions))
    app.config["OPENAI_API_KEY"] = "sk-test"

    resp = client.post(f"/diets/generate-ai/{patient['id']}", json={"targetKcal": 1800})
    assert resp.status_code == 200
    assert resp.get_json()["source"] == "mock"


def test_menu_ia_objetivo_obligatorio(client, patient):
    assert client.post(f"/diets/generate-ai/{patient['id']}", json={}).status_code == 422


def test_calcular_objetivos(client, clinic):
    resp = client.post("/diets/goals/calculate", json={
        "age": 30, "gender": "Hombre", "weight": 75, "height": 175,
        "activity": 1.2, "goal": -0.2, "protPercent": 30, "fatPercent": 35,
    })
    assert resp.status_code == 200
    j = resp.get_json()
    assert j["bmr"] == 1699
    assert j["dailyKcal"] == 1631
    assert j["userGoals"] == {"kcal": 1631, "p": 122, "c": 143, "f": 63}

    bad = client.post("/diets/goals/calculate", json={
        "age": 30, "gender": "Hombre", "weight": 75, "height": 175,
        "protPercent": 60, "fatPercent": 50,
    })
    assert bad.status_code == 422
    assert "protPercent" in bad.get_json()["fields"]
