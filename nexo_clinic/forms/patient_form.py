# nexo_clinic/forms/patient_form.py

from wtforms import StringField, FloatField, DateField, IntegerField, TextAreaField
from wtforms.validators import DataRequired, Optional, NumberRange, Length, AnyOf, Email

from nexo_clinic.forms.base import ApiForm


class PatientForm(ApiForm):
    name = StringField(
        "Nombre",
        validators=[DataRequired(message="Obligatorio"), Length(max=160)],
    )
    email = StringField("Email", validators=[Optional(), Email(message="Email inválido")])
    phone = StringField("Teléfono", validators=[Optional(), Length(max=40)])
    birth_date = DateField(
        "Fecha de nacimiento",
        format="%Y-%m-%d",
        validators=[Optional()],
    )
    gender = StringField(
        "Sexo",
        validators=[Optional(), AnyOf(["M", "F"], message="Use 'M' o 'F'.")],
    )
    height_cm = FloatField(
        "Altura (cm)",
        validators=[Optional(), NumberRange(min=30, max=260, message="Altura fuera de rango.")],
    )
    goal = StringField("Objetivo", validators=[Optional(), Length(max=200)])
    notes = TextAreaField("Notas", validators=[Optional()])


class PatientUpdateForm(PatientForm):
    name = StringField("Nombre", validators=[Optional(), Length(max=160)])


class MetricForm(ApiForm):
    patient_id = IntegerField("Paciente", validators=[DataRequired(message="Obligatorio")])
    date = DateField("Fecha", format="%Y-%m-%d", validators=[Optional()])
    weight_kg = FloatField(
        "Peso (kg)",
        validators=[
            DataRequired(message="Introduce el peso."),
            NumberRange(min=0.1, message="El peso debe ser un número positivo."),
        ],
    )
    height_cm = FloatField("Altura (cm)", validators=[Optional(), NumberRange(min=0.1)])
    body_fat_pct = FloatField(
        "Grasa corporal (%)",
        validators=[Optional(), NumberRange(min=0, max=100, message="Introduce un porcentaje entre 0 y 100.")],
    )
    waist_cm = FloatField("Cintura (cm)", validators=[Optional(), NumberRange(min=0.1)])
    notes = TextAreaField("Notas", validators=[Optional()])


class CheckInForm(ApiForm):
    patient_id = IntegerField("Paciente", validators=[DataRequired(message="Obligatorio")])
    date = DateField("Fecha", format="%Y-%m-%d", validators=[Optional()])
    weight = FloatField("Peso (kg)", validators=[Optional(), NumberRange(min=0.1)])
    chest = FloatField("Pecho", validators=[Optional(), NumberRange(min=0)])
    waist = FloatField("Cintura", validators=[Optional(), NumberRange(min=0)])
    hip = FloatField("Cadera", validators=[Optional(), NumberRange(min=0)])
    clavicle = FloatField("Clavícula", validators=[Optional(), NumberRange(min=0)])
    quadriceps = FloatField("Cuádriceps", validators=[Optional(), NumberRange(min=0)])
    biceps = FloatField("Bíceps", validators=[Optional(), NumberRange(min=0)])
    notes = TextAreaField("Notas", validators=[Optional()])
