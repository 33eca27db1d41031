# nexo_clinic/routes/auth.py
from flask import Blueprint, jsonify, current_app
from werkzeug.security import generate_password_hash, check_password_hash
from flask_login import login_user, logout_user, login_required, current_user

from nexo_clinic import db, login_manager
from nexo_clinic.models.tenant import Tenant, User
from nexo_clinic.forms.auth_form import LoginForm, RegisterForm
from nexo_clinic.routes.common import json_error, validation_error

auth_routes = Blueprint("auth", __name__, url_prefix="/auth")


@login_manager.unauthorized_handler
def _unauthorized():
    # API pura: nada de redirecciones a /login
    return json_error("Unauthorized", "Debes iniciar sesión.", 401)


@auth_routes.post("/register")
def register():
    form = RegisterForm.from_json()
    if not form.validate():
        return validation_error(form)

    email = form.email.data.strip().lower()
    if User.query.filter_by(email=email).first():
        return json_error("EmailAlreadyRegistered", "El usuario ya existe. Inicia sesión.", 409)

    tenant = Tenant(name=form.clinic_name.data.strip())
    user = User(
        tenant=tenant,
        email=email,
        password=generate_password_hash(form.password.data),
        name=(form.name.data or "").strip() or None,
    )
    db.session.add_all([tenant, user])
    db.session.commit()
    current_app.logger.info("[auth] alta de clínica %s (usuario %s)", tenant.id, user.id)

    login_user(user)
    return jsonify({"user": user.to_dict(), "tenant": tenant.to_dict()}), 201


@auth_routes.post("/login")
def login():
    form = LoginForm.from_json()
    if not form.validate():
        return validation_error(form)

    user = User.query.filter_by(email=form.email.data.strip().lower()).first()
    if not user or not check_password_hash(user.password, form.password.data):
        return json_error("InvalidCredentials", "Credenciales inválidas.", 401)

    login_user(user)
    return jsonify({"user": user.to_dict()}), 200


@auth_routes.post("/logout")
@login_required
def logout():
    logout_user()
    return jsonify({"ok": True}), 200


@auth_routes.get("/me")
@login_required
def me():
    return jsonify({"user": current_user.to_dict(), "tenant": current_user.tenant.to_dict()}), 200
