# nexo_clinic/routes/stripe.py
from flask import Blueprint, jsonify, current_app
from flask_login import login_required

from nexo_clinic.forms.payment_form import PaymentIntentForm, SubscriptionForm
from nexo_clinic.services.payments import PaymentProviderError, StripeGateway
from nexo_clinic.routes.common import json_error, validation_error

stripe_bp = Blueprint("stripe", __name__, url_prefix="/stripe")


def _gateway() -> StripeGateway:
    cfg = current_app.config
    return StripeGateway(
        cfg.get("STRIPE_SECRET_KEY"),
        api_base=cfg.get("STRIPE_API_BASE", "https://api.stripe.com/v1"),
        timeout=cfg.get("EXTERNAL_TIMEOUT", 5),
    )


def _provider_error(e: PaymentProviderError):
    return json_error("PaymentProviderError", f"Error con el proveedor de pagos: {e}", 502)


@stripe_bp.post("/payment-intent")
@login_required
def payment_intent():
    form = PaymentIntentForm.from_json()
    if not form.validate():
        return validation_error(form)

    try:
        intent = _gateway().create_payment_intent(
            form.amount.data, currency=(form.currency.data or "eur").lower()
        )
    except PaymentProviderError as e:
        return _provider_error(e)
    return jsonify({"clientSecret": intent.get("client_secret")}), 200


@stripe_bp.post("/subscription")
@login_required
def subscription():
    form = SubscriptionForm.from_json()
    if not form.validate():
        return validation_error(form)

    try:
        sub = _gateway().create_subscription(form.customerId.data, form.priceId.data)
    except PaymentProviderError as e:
        return _provider_error(e)
    return jsonify({"subscriptionId": sub.get("id"), "status": sub.get("status")}), 200
