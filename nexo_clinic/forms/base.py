# nexo_clinic/forms/base.py

from flask import request
from flask_wtf import FlaskForm
from werkzeug.datastructures import ImmutableMultiDict


def json_body() -> dict:
    """Cuerpo JSON de la petición; cualquier cosa que no sea un objeto cuenta como {}."""
    body = request.get_json(silent=True)
    return body if isinstance(body, dict) else {}


def json_formdata(body=None) -> ImmutableMultiDict:
    """
    Convierte un cuerpo JSON plano en formdata (strings) para WTForms.
    Omite nulos y valores anidados.
    """
    if not isinstance(body, dict):
        body = json_body()
    flat = {
        k: str(v)
        for k, v in body.items()
        if v is not None and not isinstance(v, (dict, list))
    }
    return ImmutableMultiDict(flat)


class ApiForm(FlaskForm):
    """Formulario para la API JSON (sin CSRF: la sesión es de API)."""

    class Meta:
        csrf = False

    @classmethod
    def from_json(cls, body=None):
        return cls(formdata=json_formdata(body))

    @classmethod
    def from_args(cls):
        return cls(formdata=request.args)


def form_errors(form) -> dict:
    """{campo: primer mensaje} para respuestas 422."""
    return {name: msgs[0] for name, msgs in form.errors.items() if msgs}
