# nexo_clinic/routes/patients.py
from flask import Blueprint, jsonify, current_app
from flask_login import login_required, current_user

from nexo_clinic import db
from nexo_clinic.models.patient import Patient
from nexo_clinic.models.appointment import Appointment
from nexo_clinic.forms.patient_form import PatientForm, PatientUpdateForm
from nexo_clinic.forms.base import json_body
from nexo_clinic.services.diet_repository import get_repository
from nexo_clinic.routes.common import (
    ensure_tenant, get_patient_for_user, patient_not_found, validation_error,
)

patients_bp = Blueprint("patients", __name__, url_prefix="/patients")


def _form_values(form, body: dict) -> dict:
    """Solo los campos editables presentes en el cuerpo (PATCH parcial)."""
    return {attr: getattr(form, attr).data for attr in Patient.EDITABLE if attr in body}


@patients_bp.post("")
@login_required
def create_patient():
    body = json_body()
    form = PatientForm.from_json(body)
    if not form.validate():
        return validation_error(form)

    p = Patient(tenant_id=current_user.tenant_id)
    p.update_from_dict(_form_values(form, body))
    db.session.add(p)
    db.session.commit()
    current_app.logger.info("[patients] alta %s en clínica %s", p.id, p.tenant_id)
    return jsonify(p.to_dict()), 201


@patients_bp.get("/tenant/<int:tenant_id>")
@login_required
def list_patients(tenant_id):
    ensure_tenant(tenant_id)
    rows = Patient.query.filter_by(tenant_id=tenant_id).order_by(Patient.name.asc()).all()
    return jsonify([p.to_dict() for p in rows]), 200


@patients_bp.get("/<int:patient_id>")
@login_required
def get_patient(patient_id):
    p = get_patient_for_user(patient_id)
    if not p:
        return patient_not_found()
    return jsonify(p.to_dict()), 200


@patients_bp.patch("/<int:patient_id>")
@login_required
def update_patient(patient_id):
    p = get_patient_for_user(patient_id)
    if not p:
        return patient_not_found()

    body = json_body()
    form = PatientUpdateForm.from_json(body)
    if not form.validate():
        return validation_error(form)

    values = _form_values(form, body)
    if "name" in values and not values["name"]:
        return validation_error(fields={"name": "Obligatorio"})

    p.update_from_dict(values)
    db.session.commit()
    return jsonify(p.to_dict()), 200


@patients_bp.delete("/<int:patient_id>")
@login_required
def delete_patient(patient_id):
    p = get_patient_for_user(patient_id)
    if not p:
        return patient_not_found()

    # SQLite no aplica las FK: borrado explícito de lo que cuelga del paciente
    get_repository().delete(p.id)
    Appointment.query.filter_by(patient_id=p.id).delete()
    db.session.delete(p)
    db.session.commit()
    return jsonify({"ok": True, "deleted_id": patient_id}), 200
