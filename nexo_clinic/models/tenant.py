# nexo_clinic/models/tenant.py

from datetime import datetime
from flask_login import UserMixin
from nexo_clinic import db, login_manager


class Tenant(db.Model):
    """Clínica / organización: ámbito de pacientes y citas."""
    __tablename__ = "tenants"

    id         = db.Column(db.Integer, primary_key=True)
    name       = db.Column(db.String(160), nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    users    = db.relationship("User", back_populates="tenant", cascade="all, delete-orphan")
    patients = db.relationship("Patient", back_populates="tenant", cascade="all, delete-orphan")

    def to_dict(self) -> dict:
        return {"id": self.id, "name": self.name, "created_at": self.created_at.isoformat()}

    def __repr__(self) -> str:
        return f"<Tenant {self.id} {self.name}>"


class User(UserMixin, db.Model):
    """Nutricionista con acceso al panel de su clínica."""
    __tablename__ = "users"

    id        = db.Column(db.Integer, primary_key=True)
    tenant_id = db.Column(db.Integer, db.ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False)
    email     = db.Column(db.String(150), unique=True, nullable=False)
    password  = db.Column(db.String(255), nullable=False)
    name      = db.Column(db.String(150), nullable=True)

    tenant = db.relationship("Tenant", back_populates="users")

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "tenant_id": self.tenant_id,
            "email": self.email,
            "name": self.name,
        }

    def __repr__(self) -> str:
        return f"<User {self.id} {self.email}>"


# Loader para Flask-Login
@login_manager.user_loader
def load_user(user_id):
    return db.session.get(User, int(user_id))
