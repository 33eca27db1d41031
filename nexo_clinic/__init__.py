# nexo_clinic/__init__.py

import os
import logging

from dotenv import load_dotenv
from flask import Flask, jsonify
from flask_sqlalchemy import SQLAlchemy
from flask_login import LoginManager
from flask_migrate import Migrate

# Carga variables de entorno (.env)
load_dotenv()

# Extensiones compartidas
db = SQLAlchemy()
migrate = Migrate()
login_manager = LoginManager()


def _require_secret_key() -> str:
    """Lee SECRET_KEY de entorno y exige mínimo 32 bytes."""
    secret = os.getenv("SECRET_KEY", "")
    if not secret or len(secret) < 32:
        raise RuntimeError(
            "SECRET_KEY no configurado o demasiado corto. "
            "Añade una clave segura al .env (mínimo 32 caracteres)."
        )
    return secret


def _env_flag(name: str, default: str = "1") -> bool:
    return os.getenv(name, default) not in ("0", "false", "False", "")


def _configure_logging(app: Flask) -> None:
    """Logging simple y consistente."""
    level = logging.DEBUG if app.debug else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    app.logger.setLevel(level)


def create_app(test_config=None) -> Flask:
    """Factory principal de la aplicación."""
    app = Flask(__name__, instance_relative_config=True)

    # Asegura carpeta instance/
    os.makedirs(app.instance_path, exist_ok=True)

    db_path = os.path.join(app.instance_path, "nexo_clinic.db")
    default_db_uri = f"sqlite:///{db_path}"

    test_config = dict(test_config or {})
    secret = test_config.pop("SECRET_KEY", None) or _require_secret_key()

    app.config.from_mapping(
        SECRET_KEY=secret,
        SQLALCHEMY_DATABASE_URI=os.getenv("SQLALCHEMY_DATABASE_URI", default_db_uri),
        SQLALCHEMY_TRACK_MODIFICATIONS=False,
        SESSION_COOKIE_HTTPONLY=True,
        SESSION_COOKIE_SAMESITE="Lax",
        SESSION_COOKIE_SECURE=os.getenv("FLASK_ENV", "").lower() != "development",
        MAX_CONTENT_LENGTH=8 * 1024 * 1024,
        # Colaboradores externos
        OPENAI_API_KEY=os.getenv("OPENAI_API_KEY") or None,
        OPENAI_MODEL=os.getenv("OPENAI_MODEL", "gpt-4o"),
        STRIPE_SECRET_KEY=os.getenv("STRIPE_SECRET_KEY") or None,
        STRIPE_API_BASE=os.getenv("STRIPE_API_BASE", "https://api.stripe.com/v1"),
        FOOD_LOOKUP_USE_OFF=_env_flag("FOOD_LOOKUP_USE_OFF"),
        EXTERNAL_TIMEOUT=float(os.getenv("EXTERNAL_TIMEOUT", "5")),
        DIET_CACHE_SIZE=int(os.getenv("DIET_CACHE_SIZE", "256")),
    )
    # Overrides (tests) antes de inicializar extensiones
    app.config.update(test_config)

    # Días y comidas conservan su orden en las respuestas
    app.json.sort_keys = False

    db.init_app(app)
    migrate.init_app(app, db)
    login_manager.init_app(app)

    _configure_logging(app)

    # ---------------------------------------------------------
    # MODELOS (importar para que Flask-Migrate los detecte)
    # ---------------------------------------------------------
    from nexo_clinic.models.tenant import Tenant, User  # noqa: F401
    from nexo_clinic.models.patient import Patient, Anamnesis, Metric, CheckIn  # noqa: F401
    from nexo_clinic.models.appointment import Appointment  # noqa: F401
    from nexo_clinic.models.food import Food  # noqa: F401
    from nexo_clinic.models.diet import DietPlanRecord  # noqa: F401

    # ---------------------------------------------------------
    # BLUEPRINTS
    # ---------------------------------------------------------
    from nexo_clinic.routes.auth import auth_routes
    from nexo_clinic.routes.patients import patients_bp
    from nexo_clinic.routes.appointments import appointments_bp
    from nexo_clinic.routes.anamnesis import anamnesis_bp
    from nexo_clinic.routes.metrics import metrics_bp
    from nexo_clinic.routes.checkins import checkins_bp
    from nexo_clinic.routes.diets import diets_bp
    from nexo_clinic.routes.food import food_bp
    from nexo_clinic.routes.stripe import stripe_bp

    for bp in (
        auth_routes,
        patients_bp,
        appointments_bp,
        anamnesis_bp,
        metrics_bp,
        checkins_bp,
        diets_bp,
        food_bp,
        stripe_bp,
    ):
        app.register_blueprint(bp)

    # Caché de planes (read-through / write-through) por aplicación
    from nexo_clinic.services.diet_repository import DietPlanCache
    app.extensions["diet_plan_cache"] = DietPlanCache(app.config["DIET_CACHE_SIZE"])

    # ---------------------------------------------------------
    # CLI (seed, export)
    # ---------------------------------------------------------
    from nexo_clinic.cli import register_cli
    register_cli(app)

    # ---------------------------------------------------------
    # Healthcheck y manejo de errores JSON
    # ---------------------------------------------------------
    @app.get("/healthz")
    def _healthz():
        return {"status": "ok"}, 200

    @app.errorhandler(400)
    @app.errorhandler(401)
    @app.errorhandler(403)
    @app.errorhandler(404)
    @app.errorhandler(405)
    @app.errorhandler(409)
    @app.errorhandler(500)
    def _http_errors(err):
        # API pura: siempre JSON consistente
        code = getattr(err, "code", 500) or 500
        name = getattr(err, "name", "Error").replace(" ", "")
        return jsonify(error=name, message=getattr(err, "description", str(err))), code

    return app
