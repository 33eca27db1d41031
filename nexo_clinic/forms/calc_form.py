# nexo_clinic/forms/calc_form.py

from wtforms import StringField, FloatField, IntegerField
from wtforms.validators import DataRequired, InputRequired, Optional, NumberRange, AnyOf

from nexo_clinic.forms.base import ApiForm
from nexo_clinic.services.diet_plan import DAYS_OF_WEEK

GENDERS = ["M", "F", "H", "Hombre", "Mujer", "male", "female"]


class MetabolicQueryForm(ApiForm):
    """Query string de /metrics/calculate."""
    weightKg = FloatField("Peso (kg)", validators=[DataRequired(message="Obligatorio"), NumberRange(min=0.1)])
    heightCm = FloatField("Altura (cm)", validators=[DataRequired(message="Obligatorio"), NumberRange(min=0.1)])
    ageYears = FloatField("Edad", validators=[DataRequired(message="Obligatorio"), NumberRange(min=1, max=120)])
    gender = StringField("Sexo", validators=[DataRequired(message="Obligatorio"), AnyOf(GENDERS)])
    activityMultiplier = FloatField(
        "Factor de actividad",
        default=1.2,
        validators=[Optional(), NumberRange(min=1.0, max=2.5, message="Factor entre 1.0 y 2.5")],
    )
    formula = StringField(
        "Fórmula",
        default="mifflin",
        validators=[Optional(), AnyOf(["mifflin", "harris"], message="Use 'mifflin' o 'harris'.")],
    )


class CalcDataForm(ApiForm):
    """Calculadora de objetivos (calcData)."""
    age = FloatField("Edad", validators=[DataRequired(message="Obligatorio"), NumberRange(min=1, max=120)])
    gender = StringField("Sexo", validators=[DataRequired(message="Obligatorio"), AnyOf(GENDERS)])
    weight = FloatField("Peso (kg)", validators=[DataRequired(message="Obligatorio"), NumberRange(min=0.1)])
    height = FloatField("Altura (cm)", validators=[DataRequired(message="Obligatorio"), NumberRange(min=0.1)])
    activity = FloatField("Actividad", default=1.2, validators=[Optional(), NumberRange(min=1.0, max=2.5)])
    goal = FloatField("Objetivo", default=0.0, validators=[Optional(), NumberRange(min=-0.5, max=0.5)])
    protPercent = FloatField("Proteína (%)", validators=[InputRequired(message="Obligatorio"), NumberRange(min=0, max=100)])
    fatPercent = FloatField("Grasa (%)", validators=[InputRequired(message="Obligatorio"), NumberRange(min=0, max=100)])


class MenuRequestForm(ApiForm):
    targetKcal = FloatField(
        "Objetivo (kcal)",
        validators=[DataRequired(message="Obligatorio"), NumberRange(min=800, max=6000, message="Entre 800 y 6000 kcal")],
    )


class SuggestDayForm(ApiForm):
    day = StringField("Día", validators=[DataRequired(message="Obligatorio"), AnyOf(DAYS_OF_WEEK, message="Día desconocido.")])
    targetKcal = FloatField("Objetivo (kcal)", validators=[Optional(), NumberRange(min=1)])
    seed = IntegerField("Semilla", validators=[Optional()])
