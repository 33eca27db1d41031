# nexo_clinic/forms/auth_form.py

from wtforms import StringField, PasswordField
from wtforms.validators import DataRequired, Email, EqualTo, Length

from nexo_clinic.forms.base import ApiForm


class LoginForm(ApiForm):
    email = StringField(
        'Email',
        validators=[DataRequired(message="El email es obligatorio"), Email(message="Email inválido")]
    )
    password = PasswordField(
        'Contraseña',
        validators=[DataRequired(message="La contraseña es obligatoria")]
    )


class RegisterForm(ApiForm):
    email = StringField(
        'Email',
        validators=[DataRequired(message="El email es obligatorio"), Email(message="Email inválido")]
    )
    password = PasswordField(
        'Contraseña',
        validators=[
            DataRequired(message="La contraseña es obligatoria"),
            Length(min=8, message="Mínimo 8 caracteres"),
        ]
    )
    password_confirm = PasswordField(
        'Repite la contraseña',
        validators=[
            DataRequired(message="Confirma la contraseña"),
            EqualTo("password", message="Las contraseñas no coinciden"),
        ]
    )
    clinic_name = StringField(
        'Clínica',
        validators=[DataRequired(message="El nombre de la clínica es obligatorio"), Length(max=160)]
    )
    name = StringField('Nombre', validators=[Length(max=150)])
