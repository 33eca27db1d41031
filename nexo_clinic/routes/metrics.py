# nexo_clinic/routes/metrics.py
from datetime import date

from flask import Blueprint, jsonify
from flask_login import login_required

from nexo_clinic import db
from nexo_clinic.models.patient import Metric
from nexo_clinic.forms.patient_form import MetricForm
from nexo_clinic.forms.calc_form import MetabolicQueryForm
from nexo_clinic.utils.calculos import calcular_bmr, calcular_tdee
from nexo_clinic.routes.common import get_patient_for_user, patient_not_found, validation_error

metrics_bp = Blueprint("metrics", __name__, url_prefix="/metrics")


@metrics_bp.post("")
@login_required
def create_metric():
    form = MetricForm.from_json()
    if not form.validate():
        return validation_error(form)

    p = get_patient_for_user(form.patient_id.data)
    if not p:
        return patient_not_found()

    m = Metric(
        patient_id=p.id,
        date=form.date.data or date.today(),
        weight_kg=form.weight_kg.data,
        height_cm=form.height_cm.data,
        body_fat_pct=form.body_fat_pct.data,
        waist_cm=form.waist_cm.data,
        notes=form.notes.data or None,
    )
    db.session.add(m)
    db.session.commit()
    return jsonify(m.to_dict()), 201


@metrics_bp.get("/patient/<int:patient_id>")
@login_required
def list_metrics(patient_id):
    if not get_patient_for_user(patient_id):
        return patient_not_found()
    rows = (
        Metric.query.filter_by(patient_id=patient_id)
        .order_by(Metric.date.desc(), Metric.id.desc())
        .all()
    )
    return jsonify([m.to_dict() for m in rows]), 200


@metrics_bp.get("/calculate/<int:patient_id>")
@login_required
def calculate(patient_id):
    """
    BMR y TDEE a partir de la query:
      ?weightKg=&heightCm=&ageYears=&gender=&activityMultiplier=1.2&formula=mifflin
    """
    if not get_patient_for_user(patient_id):
        return patient_not_found()

    form = MetabolicQueryForm.from_args()
    if not form.validate():
        return validation_error(form)

    formula = form.formula.data or "mifflin"
    bmr = calcular_bmr(
        formula,
        sexo=form.gender.data,
        peso=form.weightKg.data,
        altura=form.heightCm.data,
        edad=form.ageYears.data,
    )
    tdee = calcular_tdee(bmr, form.activityMultiplier.data or 1.2)
    return jsonify({
        "patientId": patient_id,
        "bmr": round(bmr, 2),
        "tdee": round(tdee, 2),
        "formula": formula,
    }), 200
