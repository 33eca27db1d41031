# nexo_clinic/forms/payment_form.py

from wtforms import StringField, FloatField
from wtforms.validators import DataRequired, Optional, NumberRange, Length

from nexo_clinic.forms.base import ApiForm


class PaymentIntentForm(ApiForm):
    amount = FloatField(
        "Importe",
        validators=[DataRequired(message="Obligatorio"), NumberRange(min=0.5, message="Importe mínimo 0.50")],
    )
    currency = StringField("Moneda", default="eur", validators=[Optional(), Length(min=3, max=3)])


class SubscriptionForm(ApiForm):
    customerId = StringField("Cliente", validators=[DataRequired(message="Obligatorio")])
    priceId = StringField("Precio", validators=[DataRequired(message="Obligatorio")])
