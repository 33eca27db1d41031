# nexo_clinic/routes/food.py
from flask import Blueprint, request, jsonify, current_app
from flask_login import login_required

from nexo_clinic import db
from nexo_clinic.models.food import Food
from nexo_clinic.services.food_catalog import get_food, search_catalog
from nexo_clinic.utils.off_api import search_off
from nexo_clinic.routes.common import json_error

food_bp = Blueprint("food", __name__, url_prefix="/food")


def _item_to_dict(item, source="local"):
    d = item.to_dict()
    d["source"] = source
    return d


def _like_pattern(q: str) -> str:
    """Subcadena literal para ILIKE: % y _ del usuario no son comodines."""
    escaped = q.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def _search_local(q: str, limit: int):
    # Tabla sin sembrar: se usa el catálogo embebido
    if not db.session.query(Food.id).first():
        return [_item_to_dict(f, "catalog") for f in search_catalog(q, limit)]
    rows = (
        Food.query.filter(Food.name.ilike(_like_pattern(q), escape="\\"))
        .order_by(Food.name.asc())
        .limit(limit)
        .all()
    )
    return [_item_to_dict(f.to_item()) for f in rows]


@food_bp.get("/search")
@login_required
def search_foods():
    """
    Busca por nombre en la tabla local; si no hay resultados y está activado,
    consulta OpenFoodFacts. q vacío -> [].
    """
    q = (request.args.get("q") or "").strip()
    if not q:
        return jsonify([]), 200
    limit = min(max(request.args.get("limit", 20, type=int), 1), 50)

    results = _search_local(q, limit)
    if not results and current_app.config.get("FOOD_LOOKUP_USE_OFF"):
        current_app.logger.info("[food] sin resultados locales para %r; consultando OFF", q)
        results = search_off(q, limit=limit, timeout=current_app.config.get("EXTERNAL_TIMEOUT", 5))
    return jsonify(results), 200


@food_bp.get("/<food_id>")
@login_required
def get_food_detail(food_id):
    row = db.session.get(Food, food_id)
    if row is not None:
        return jsonify(_item_to_dict(row.to_item())), 200
    item = get_food(food_id)
    if item is not None:
        return jsonify(_item_to_dict(item, "catalog")), 200
    return json_error("FoodNotFound", "Alimento no encontrado.", 404)
