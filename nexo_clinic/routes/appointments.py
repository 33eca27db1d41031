# nexo_clinic/routes/appointments.py
from flask import Blueprint, jsonify
from flask_login import login_required, current_user

from nexo_clinic import db
from nexo_clinic.models.appointment import Appointment
from nexo_clinic.forms.appointment_form import AppointmentForm, RescheduleForm, StatusForm
from nexo_clinic.forms.base import json_body
from nexo_clinic.routes.common import (
    ensure_tenant, get_patient_for_user, patient_not_found, validation_error, json_error,
)

appointments_bp = Blueprint("appointments", __name__, url_prefix="/appointments")


def _get_appointment_for_user(appointment_id):
    a = db.session.get(Appointment, appointment_id)
    if a is None or a.tenant_id != current_user.tenant_id:
        return None
    return a


def _not_found():
    return json_error("AppointmentNotFound", "Cita no encontrada.", 404)


@appointments_bp.post("")
@login_required
def create_appointment():
    form = AppointmentForm.from_json()
    if not form.validate():
        return validation_error(form)

    patient_id = form.patient_id.data
    if patient_id is not None and not get_patient_for_user(patient_id):
        return patient_not_found()

    a = Appointment(
        tenant_id=current_user.tenant_id,
        patient_id=patient_id,
        nutritionist_id=current_user.id,
        date=form.date.data,
        time=form.time.data,
        duration=form.duration.data or 1.0,
        type=form.type.data or "Revisión Online",
        status="pendiente",
        notes=form.notes.data or None,
    )
    db.session.add(a)
    db.session.commit()
    return jsonify(a.to_dict()), 201


@appointments_bp.get("/tenant/<int:tenant_id>")
@login_required
def list_by_tenant(tenant_id):
    ensure_tenant(tenant_id)
    rows = (
        Appointment.query.filter_by(tenant_id=tenant_id)
        .order_by(Appointment.date.asc(), Appointment.time.asc())
        .all()
    )
    return jsonify([a.to_dict() for a in rows]), 200


@appointments_bp.get("/patient/<int:patient_id>")
@login_required
def list_by_patient(patient_id):
    if not get_patient_for_user(patient_id):
        return patient_not_found()
    rows = (
        Appointment.query.filter_by(patient_id=patient_id)
        .order_by(Appointment.date.desc(), Appointment.time.desc())
        .all()
    )
    return jsonify([a.to_dict(include_patient=False) for a in rows]), 200


@appointments_bp.patch("/<int:appointment_id>/status")
@login_required
def update_status(appointment_id):
    a = _get_appointment_for_user(appointment_id)
    if not a:
        return _not_found()
    form = StatusForm.from_json()
    if not form.validate():
        return validation_error(form)
    a.status = form.status.data
    db.session.commit()
    return jsonify(a.to_dict()), 200


@appointments_bp.patch("/<int:appointment_id>")
@login_required
def reschedule(appointment_id):
    a = _get_appointment_for_user(appointment_id)
    if not a:
        return _not_found()

    body = json_body()
    form = RescheduleForm.from_json(body)
    if not form.validate():
        return validation_error(form)

    for attr in ("date", "time", "duration", "type", "notes"):
        if attr in body and getattr(form, attr).data is not None:
            setattr(a, attr, getattr(form, attr).data)
    db.session.commit()
    return jsonify(a.to_dict()), 200


@appointments_bp.delete("/<int:appointment_id>")
@login_required
def delete_appointment(appointment_id):
    a = _get_appointment_for_user(appointment_id)
    if not a:
        return _not_found()
    db.session.delete(a)
    db.session.commit()
    return jsonify({"ok": True, "deleted_id": appointment_id}), 200
