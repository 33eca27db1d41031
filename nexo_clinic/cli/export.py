# nexo_clinic/cli/export.py
import csv
import json
import os
from datetime import datetime
import click
from flask.cli import AppGroup
from nexo_clinic.models.food import Food
from nexo_clinic.services.diet_repository import DietPlanRepository

export_group = AppGroup("export", help="Comandos de exportación (CSV, JSON)")

FOOD_CSV_FIELDS = ["id", "name", "kcal_per_100g", "protein_per_100g", "carbs_per_100g", "fat_per_100g"]


def _ensure_parent(path: str) -> None:
    parent = os.path.dirname(path)
    if parent:
        os.makedirs(parent, exist_ok=True)


@export_group.command("foods")
@click.option("--to", "dest_path", default=None,
              help="Ruta destino del CSV (por defecto: instance/foods_export_YYYYMMDD.csv)")
def export_foods(dest_path):
    """
    Exporta todos los alimentos a un CSV con las cabeceras que acepta `seed foods`.
    """
    if not dest_path:
        ts = datetime.now().strftime("%Y%m%d")
        dest_path = os.path.join("instance", f"foods_export_{ts}.csv")
    _ensure_parent(dest_path)

    rows = Food.query.order_by(Food.name.asc()).all()
    with open(dest_path, "w", newline="", encoding="utf-8") as fh:
        writer = csv.DictWriter(fh, fieldnames=FOOD_CSV_FIELDS)
        writer.writeheader()
        for f in rows:
            writer.writerow({k: getattr(f, k) for k in FOOD_CSV_FIELDS})

    click.secho(f"Exportado {len(rows)} alimentos a: {dest_path}", fg="green")


@export_group.command("diet")
@click.argument("patient_id", type=int)
@click.option("--to", "dest_path", default=None,
              help="Ruta del JSON (por defecto: instance/diet_<paciente>.json)")
def export_diet(patient_id, dest_path):
    """Vuelca el plan guardado de un paciente (con versión) a JSON."""
    stored = DietPlanRepository().get(patient_id)
    if stored is None:
        raise click.ClickException(f"El paciente {patient_id} no tiene plan guardado.")

    if not dest_path:
        dest_path = os.path.join("instance", f"diet_{patient_id}.json")
    _ensure_parent(dest_path)

    with open(dest_path, "w", encoding="utf-8") as fh:
        json.dump(stored.to_dict(), fh, ensure_ascii=False, indent=2)

    click.secho(f"Plan v{stored.version} del paciente {patient_id} exportado a: {dest_path}", fg="green")
