# tests/conftest.py

import pytest
from nexo_clinic import create_app, db

TEST_SECRET = "test-secret-key-0123456789-abcdefghijkl"


@pytest.fixture
def app():
    app = create_app({
        "TESTING": True,
        "SECRET_KEY": TEST_SECRET,
        "SQLALCHEMY_DATABASE_URI": "sqlite:///:memory:",
        "SESSION_COOKIE_SECURE": False,
        "OPENAI_API_KEY": None,
        "STRIPE_SECRET_KEY": None,
        "FOOD_LOOKUP_USE_OFF": False,
    })
    with app.app_context():
        db.create_all()
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


def register(client, email="nutri@nexoclinic.es", clinic="Clínica Norte", password="supersecreta"):
    return client.post("/auth/register", json={
        "email": email,
        "password": password,
        "password_confirm": password,
        "clinic_name": clinic,
    })


@pytest.fixture
def clinic(client):
    """Registra (y deja logueada) una nutricionista; devuelve el JSON de alta."""
    resp = register(client)
    assert resp.status_code == 201
    return resp.get_json()


@pytest.fixture
def patient(client, clinic):
    resp = client.post("/patients", json={"name": "Ana Pérez", "gender": "F", "height_cm": 165})
    assert resp.status_code == 201
    return resp.get_json()


@pytest.fixture
def signup():
    return register
