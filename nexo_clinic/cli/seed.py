# nexo_clinic/cli/seed.py
import csv
import click
from flask.cli import AppGroup
from nexo_clinic import db
from nexo_clinic.models.food import Food
from nexo_clinic.services.food_catalog import catalog_rows

seed_group = AppGroup("seed", help="Comandos de seed (datos iniciales)")

FOOD_FIELDS = ("kcal_per_100g", "protein_per_100g", "carbs_per_100g", "fat_per_100g")


def _to_float(v, default=0.0):
    if v in (None, "", "None"):
        return default
    try:
        return float(v)
    except (ValueError, TypeError):
        return default


def upsert_foods(items):
    """Inserta o actualiza por id. Devuelve (nuevos, actualizados, descartados)."""
    created, updated, skipped = 0, 0, 0
    for f in items:
        food_id = (f.get("id") or "").strip()
        name = (f.get("name") or "").strip()
        if not food_id or not name:
            skipped += 1
            continue
        data = {"name": name}
        for k in FOOD_FIELDS:
            data[k] = _to_float(f.get(k))

        obj = db.session.get(Food, food_id)
        if obj:
            for k, v in data.items():
                setattr(obj, k, v)
            updated += 1
        else:
            db.session.add(Food(id=food_id, **data))
            created += 1
    db.session.commit()
    return created, updated, skipped


@seed_group.command("foods")
@click.option("--from-csv", "csv_path", default=None,
              help="Ruta a un CSV (ej.: instance/foods.csv) para cargar/actualizar alimentos.")
def seed_foods(csv_path):
    """
    Carga/actualiza alimentos base.
    - Sin opciones: usa el catálogo embebido.
    - Con --from-csv: carga desde CSV (idempotente por id).
    CSV esperado con cabeceras:
      id,name,kcal_per_100g,protein_per_100g,carbs_per_100g,fat_per_100g
    """
    if csv_path:
        try:
            with open(csv_path, "r", encoding="utf-8-sig") as fh:
                items = list(csv.DictReader(fh))
            click.secho(f"Leídos {len(items)} alimentos desde {csv_path}", fg="cyan")
        except FileNotFoundError:
            raise click.ClickException(f"No se encontró el CSV: {csv_path}")
    else:
        items = catalog_rows()

    created, updated, skipped = upsert_foods(items)
    click.secho(f"Hecho. Nuevos: {created}, Actualizados: {updated}, Descartados: {skipped}", fg="green")
