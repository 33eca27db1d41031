# nexo_clinic/routes/anamnesis.py
from flask import Blueprint, jsonify
from flask_login import login_required

from nexo_clinic import db
from nexo_clinic.models.patient import Anamnesis
from nexo_clinic.forms.base import json_body
from nexo_clinic.routes.common import (
    get_patient_for_user, patient_not_found, validation_error, json_error,
)

anamnesis_bp = Blueprint("anamnesis", __name__, url_prefix="/anamnesis")


def _get_anamnesis_for_user(anamnesis_id):
    a = db.session.get(Anamnesis, anamnesis_id)
    if a is None or not get_patient_for_user(a.patient_id):
        return None
    return a


def _payload_data(body: dict):
    data = body.get("data")
    if not isinstance(data, dict):
        return None
    return data


@anamnesis_bp.post("")
@login_required
def create_anamnesis():
    body = json_body()
    data = _payload_data(body)
    if data is None:
        return validation_error(fields={"data": "Debe ser un objeto JSON."})

    p = get_patient_for_user(body.get("patient_id"))
    if not p:
        return patient_not_found()

    a = Anamnesis(patient_id=p.id, data=data)
    db.session.add(a)
    db.session.commit()
    return jsonify(a.to_dict()), 201


@anamnesis_bp.get("/patient/<int:patient_id>")
@login_required
def list_for_patient(patient_id):
    if not get_patient_for_user(patient_id):
        return patient_not_found()
    rows = (
        Anamnesis.query.filter_by(patient_id=patient_id)
        .order_by(Anamnesis.created_at.desc(), Anamnesis.id.desc())
        .all()
    )
    return jsonify([a.to_dict() for a in rows]), 200


@anamnesis_bp.get("/<int:anamnesis_id>")
@login_required
def get_anamnesis(anamnesis_id):
    a = _get_anamnesis_for_user(anamnesis_id)
    if not a:
        return json_error("AnamnesisNotFound", "Anamnesis no encontrada.", 404)
    return jsonify(a.to_dict()), 200


@anamnesis_bp.patch("/<int:anamnesis_id>")
@login_required
def update_anamnesis(anamnesis_id):
    a = _get_anamnesis_for_user(anamnesis_id)
    if not a:
        return json_error("AnamnesisNotFound", "Anamnesis no encontrada.", 404)

    data = _payload_data(json_body())
    if data is None:
        return validation_error(fields={"data": "Debe ser un objeto JSON."})

    # Fusión superficial: las claves enviadas sustituyen a las guardadas
    merged = dict(a.data or {})
    merged.update(data)
    a.data = merged
    db.session.commit()
    return jsonify(a.to_dict()), 200
