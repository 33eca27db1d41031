# nexo_clinic/forms/appointment_form.py

from wtforms import StringField, FloatField, DateField, TimeField, IntegerField, TextAreaField
from wtforms.validators import DataRequired, Optional, NumberRange, AnyOf

from nexo_clinic.forms.base import ApiForm
from nexo_clinic.models.appointment import APPOINTMENT_STATUSES, APPOINTMENT_TYPES


class AppointmentForm(ApiForm):
    patient_id = IntegerField("Paciente", validators=[Optional()])
    date = DateField("Fecha", format="%Y-%m-%d", validators=[DataRequired(message="Formato YYYY-MM-DD")])
    time = TimeField("Hora", format="%H:%M", validators=[DataRequired(message="Formato HH:MM")])
    duration = FloatField(
        "Duración (h)",
        default=1.0,
        validators=[Optional(), NumberRange(min=0.25, max=12, message="Duración inválida.")],
    )
    type = StringField(
        "Tipo",
        default="Revisión Online",
        validators=[Optional(), AnyOf(APPOINTMENT_TYPES, message="Tipo de cita inválido.")],
    )
    notes = TextAreaField("Notas", validators=[Optional()])


class RescheduleForm(ApiForm):
    date = DateField("Fecha", format="%Y-%m-%d", validators=[Optional()])
    time = TimeField("Hora", format="%H:%M", validators=[Optional()])
    duration = FloatField("Duración (h)", validators=[Optional(), NumberRange(min=0.25, max=12)])
    type = StringField("Tipo", validators=[Optional(), AnyOf(APPOINTMENT_TYPES, message="Tipo de cita inválido.")])
    notes = TextAreaField("Notas", validators=[Optional()])


class StatusForm(ApiForm):
    status = StringField(
        "Estado",
        validators=[
            DataRequired(message="Obligatorio"),
            AnyOf(APPOINTMENT_STATUSES, message="Estado inválido. Permitidos: " + ", ".join(APPOINTMENT_STATUSES)),
        ],
    )
