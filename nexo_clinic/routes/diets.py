# nexo_clinic/routes/diets.py
"""
Plan semanal de dieta por paciente.

GET devuelve siempre un documento (el guardado o el vacío por defecto) con
sus totales; POST guarda con control optimista (`version` o `If-Match`).
"""
import random

from flask import Blueprint, request, jsonify, current_app
from flask_login import login_required

from nexo_clinic.models.patient import Anamnesis
from nexo_clinic.forms.calc_form import CalcDataForm, MenuRequestForm, SuggestDayForm
from nexo_clinic.services.ai import generate_weekly_menu
from nexo_clinic.services.diet_plan import CalcData, DietDocument, new_weekly_plan
from nexo_clinic.services.diet_repository import DietPlanConflict, get_repository
from nexo_clinic.services.energy import compute_goals
from nexo_clinic.services.suggestions import suggest_day
from nexo_clinic.utils.macros import day_totals, rounded, week_totals
from nexo_clinic.routes.common import (
    get_patient_for_user, patient_not_found, validation_error, json_error,
)

diets_bp = Blueprint("diets", __name__, url_prefix="/diets")


# -----------------------------------------------------------------------------#
# Helpers
# -----------------------------------------------------------------------------#
def _load_document(patient_id: int):
    """(documento, versión). Sin plan guardado -> plan vacío con versión 0."""
    stored = get_repository().get(patient_id)
    if stored is None:
        current_app.logger.info("[diets] paciente %s sin plan guardado; usando plan por defecto", patient_id)
        return DietDocument(weekly_diet=new_weekly_plan()), 0, None
    return stored.document, stored.version, stored.updated_at


def _totals(doc: DietDocument) -> dict:
    return {day: rounded(t) for day, t in week_totals(doc.weekly_diet).items()}


def _expected_version(body: dict):
    """
    Versión esperada desde el cuerpo (`version`) o la cabecera If-Match.
    Devuelve (versión | None, error | None).
    """
    raw = body.get("version")
    if raw is None:
        header = (request.headers.get("If-Match") or "").strip()
        if header and header != "*":
            raw = header.removeprefix("W/").strip('"')
    if raw is None:
        return None, None
    try:
        v = int(raw)
    except (TypeError, ValueError):
        return None, "La versión debe ser un entero."
    if v < 0:
        return None, "La versión debe ser >= 0."
    return v, None


def _with_etag(resp, version: int):
    resp.set_etag(str(version))
    return resp


def _document_errors(body: dict) -> dict:
    errors = {}
    for key in ("weeklyDiet", "userGoals", "calcData"):
        if key in body and body[key] is not None and not isinstance(body[key], dict):
            errors[key] = "Debe ser un objeto JSON."
    if "weeklyDiet" not in body:
        errors["weeklyDiet"] = "Obligatorio"
    return errors


# -----------------------------------------------------------------------------#
# Endpoints
# -----------------------------------------------------------------------------#
@diets_bp.get("/patient/<int:patient_id>")
@login_required
def get_diet(patient_id):
    if not get_patient_for_user(patient_id):
        return patient_not_found()

    doc, version, updated_at = _load_document(patient_id)
    payload = doc.to_dict()
    payload.update({
        "patientId": patient_id,
        "version": version,
        "updatedAt": updated_at.isoformat() + "Z" if updated_at else None,
        "totals": _totals(doc),
    })
    return _with_etag(jsonify(payload), version)


@diets_bp.post("")
@login_required
def save_diet():
    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        return validation_error(fields={"body": "Debe ser un objeto JSON."})

    p = get_patient_for_user(body.get("patientId"))
    if not p:
        return patient_not_found()

    errors = _document_errors(body)
    expected, version_error = _expected_version(body)
    if version_error:
        errors["version"] = version_error
    if errors:
        return validation_error(fields=errors)

    doc = DietDocument.from_dict(body)
    try:
        stored = get_repository().upsert(p.id, doc, expected_version=expected)
    except DietPlanConflict as e:
        current_app.logger.warning("[diets] %s", e)
        resp = jsonify({
            "error": "VersionConflict",
            "message": "El plan ha cambiado desde que lo cargaste. Recarga antes de guardar.",
            "currentVersion": e.current,
        })
        return _with_etag(resp, e.current), 409

    payload = stored.to_dict()
    payload["totals"] = _totals(stored.document)
    status = 201 if stored.version == 1 else 200
    return _with_etag(jsonify(payload), stored.version), status


@diets_bp.post("/generate-ai/<int:patient_id>")
@login_required
def generate_ai(patient_id):
    if not get_patient_for_user(patient_id):
        return patient_not_found()

    form = MenuRequestForm.from_json()
    if not form.validate():
        return validation_error(form)

    latest = (
        Anamnesis.query.filter_by(patient_id=patient_id)
        .order_by(Anamnesis.created_at.desc(), Anamnesis.id.desc())
        .first()
    )
    menu = generate_weekly_menu(
        latest.data if latest else {},
        form.targetKcal.data,
        api_key=current_app.config.get("OPENAI_API_KEY"),
        model=current_app.config.get("OPENAI_MODEL", "gpt-4o"),
    )
    return jsonify(menu), 200


@diets_bp.post("/suggest/<int:patient_id>")
@login_required
def suggest(patient_id):
    """Propuesta automática para un día (no se guarda)."""
    if not get_patient_for_user(patient_id):
        return patient_not_found()

    form = SuggestDayForm.from_json()
    if not form.validate():
        return validation_error(form)

    doc, _, _ = _load_document(patient_id)
    target = form.targetKcal.data or doc.user_goals.kcal
    rng = random.Random(form.seed.data) if form.seed.data is not None else None

    day = form.day.data
    meals = suggest_day(doc.weekly_diet.day(day), target, rng=rng)
    return jsonify({
        "patientId": patient_id,
        "day": day,
        "targetKcal": target,
        "meals": {key: meal.to_dict() for key, meal in meals.items()},
        "totals": rounded(day_totals(meals)),
    }), 200


@diets_bp.post("/goals/calculate")
@login_required
def calculate_goals():
    form = CalcDataForm.from_json()
    if not form.validate():
        return validation_error(form)

    calc = CalcData(
        age=form.age.data,
        gender=form.gender.data,
        weight=form.weight.data,
        height=form.height.data,
        activity=form.activity.data or 1.2,
        goal=form.goal.data or 0.0,
        prot_percent=form.protPercent.data,
        fat_percent=form.fatPercent.data,
    )
    try:
        result = compute_goals(calc)
    except ValueError as e:
        return validation_error(fields={"protPercent": str(e)})
    payload = result.to_dict()
    payload["calcData"] = calc.to_dict()
    return jsonify(payload), 200
