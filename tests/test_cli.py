import csv
import json

from nexo_clinic import db
from nexo_clinic.models.food import Food
from nexo_clinic.models.patient import Patient
from nexo_clinic.models.tenant import Tenant
from nexo_clinic.services.diet_plan import DietDocument
from nexo_clinic.services.diet_repository import DietPlanRepository


def test_seed_foods_idempotente(app):
    runner = app.test_cli_runner()
    first = runner.invoke(args=["seed", "foods"])
    assert first.exit_code == 0
    assert "Nuevos: 28" in first.output

    second = runner.invoke(args=["seed", "foods"])
    assert "Nuevos: 0, Actualizados: 28" in second.output
    with app.app_context():
        assert Food.query.count() == 28


def test_seed_foods_desde_csv(app, tmp_path):
    path = tmp_path / "foods.csv"
    path.write_text(
        "id,name,kcal_per_100g,protein_per_100g,carbs_per_100g,fat_per_100g\n"
        "quinoa,Quinoa,368,14,64,6\n"
        ",Sin id,1,1,1,1\n",
        encoding="utf-8",
    )
    result = app.test_cli_runner().invoke(args=["seed", "foods", "--from-csv", str(path)])
    assert "Nuevos: 1" in result.output and "Descartados: 1" in result.output
    with app.app_context():
        assert db.session.get(Food, "quinoa").kcal_per_100g == 368


def test_seed_foods_csv_inexistente(app, tmp_path):
    result = app.test_cli_runner().invoke(args=["seed", "foods", "--from-csv", str(tmp_path / "nope.csv")])
    assert result.exit_code != 0


def test_export_foods(app, tmp_path):
    runner = app.test_cli_runner()
    runner.invoke(args=["seed", "foods"])
    dest = tmp_path / "out" / "foods.csv"
    result = runner.invoke(args=["export", "foods", "--to", str(dest)])
    assert result.exit_code == 0
    with open(dest, encoding="utf-8") as fh:
        rows = list(csv.DictReader(fh))
    assert len(rows) == 28
    assert set(rows[0]) == {"id", "name", "kcal_per_100g", "protein_per_100g", "carbs_per_100g", "fat_per_100g"}


def test_export_diet(app, tmp_path):
    with app.app_context():
        t = Tenant(name="Clínica")
        p = Patient(tenant=t, name="Ana")
        db.session.add_all([t, p])
        db.session.commit()
        pid = p.id
        DietPlanRepository().upsert(pid, DietDocument())

    dest = tmp_path / "diet.json"
    runner = app.test_cli_runner()
    result = runner.invoke(args=["export", "diet", str(pid), "--to", str(dest)])
    assert result.exit_code == 0
    data = json.loads(dest.read_text(encoding="utf-8"))
    assert data["patientId"] == pid and data["version"] == 1
    assert len(data["weeklyDiet"]) == 7

    missing = runner.invoke(args=["export", "diet", "999"])
    assert missing.exit_code != 0
    assert "no tiene plan" in missing.output
