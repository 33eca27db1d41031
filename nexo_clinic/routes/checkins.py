# nexo_clinic/routes/checkins.py
from datetime import date

from flask import Blueprint, jsonify
from flask_login import login_required

from nexo_clinic import db
from nexo_clinic.models.patient import CheckIn
from nexo_clinic.forms.patient_form import CheckInForm
from nexo_clinic.routes.common import (
    get_patient_for_user, patient_not_found, validation_error, json_error,
)

checkins_bp = Blueprint("checkins", __name__, url_prefix="/checkins")


def _with_weight_diff(rows):
    """
    rows: más reciente primero. weightDiff compara con la revisión anterior
    (la siguiente en la lista); None si falta alguno de los dos pesos.
    """
    out = []
    for i, row in enumerate(rows):
        d = row.to_dict()
        prev = rows[i + 1] if i + 1 < len(rows) else None
        if prev is not None and row.weight is not None and prev.weight is not None:
            d["weightDiff"] = round(row.weight - prev.weight, 2)
        else:
            d["weightDiff"] = None
        out.append(d)
    return out


@checkins_bp.post("")
@login_required
def create_checkin():
    form = CheckInForm.from_json()
    if not form.validate():
        return validation_error(form)

    p = get_patient_for_user(form.patient_id.data)
    if not p:
        return patient_not_found()

    c = CheckIn(patient_id=p.id, date=form.date.data or date.today(), notes=form.notes.data or None)
    for m in CheckIn.MEASURES:
        setattr(c, m, getattr(form, m).data)
    if not c.has_data():
        return validation_error(fields={"weight": "Introduce al menos una medida o una nota."})

    db.session.add(c)
    db.session.commit()
    return jsonify(c.to_dict()), 201


@checkins_bp.get("/patient/<int:patient_id>")
@login_required
def list_checkins(patient_id):
    if not get_patient_for_user(patient_id):
        return patient_not_found()
    rows = (
        CheckIn.query.filter_by(patient_id=patient_id)
        .order_by(CheckIn.date.desc(), CheckIn.id.desc())
        .all()
    )
    return jsonify(_with_weight_diff(rows)), 200


@checkins_bp.delete("/<int:checkin_id>")
@login_required
def delete_checkin(checkin_id):
    c = db.session.get(CheckIn, checkin_id)
    if c is None or not get_patient_for_user(c.patient_id):
        return json_error("CheckInNotFound", "Revisión no encontrada.", 404)
    db.session.delete(c)
    db.session.commit()
    return jsonify({"ok": True, "deleted_id": checkin_id}), 200
