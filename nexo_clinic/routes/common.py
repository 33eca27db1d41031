# nexo_clinic/routes/common.py
"""Helpers compartidos por los blueprints de la API."""

from flask import jsonify, abort
from flask_login import current_user

from nexo_clinic import db
from nexo_clinic.forms.base import form_errors
from nexo_clinic.models.patient import Patient


def json_error(error: str, message: str, status: int):
    return jsonify({"error": error, "message": message}), status


def validation_error(form=None, fields=None):
    """422 con los mensajes por campo."""
    return jsonify({
        "error": "ValidationError",
        "fields": fields if fields is not None else form_errors(form),
    }), 422


def _tid() -> int:
    return current_user.tenant_id


def ensure_tenant(tenant_id: int) -> None:
    """Un tenantId ajeno en la ruta es 403."""
    if tenant_id != _tid():
        abort(403, description="No tienes acceso a esta clínica.")


def get_patient_for_user(patient_id):
    """Paciente de la clínica del usuario o None (otro tenant cuenta como inexistente)."""
    try:
        pid = int(patient_id)
    except (TypeError, ValueError):
        return None
    p = db.session.get(Patient, pid)
    if p is None or p.tenant_id != _tid():
        return None
    return p


def patient_not_found():
    return json_error("PatientNotFound", "Paciente no encontrado.", 404)
