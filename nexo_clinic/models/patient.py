# nexo_clinic/models/patient.py

from datetime import date, datetime
from sqlalchemy import CheckConstraint
from nexo_clinic import db


def _iso(value):
    return value.isoformat() if value else None


class Patient(db.Model):
    __tablename__ = "patients"

    id         = db.Column(db.Integer, primary_key=True)
    tenant_id  = db.Column(db.Integer, db.ForeignKey("tenants.id", ondelete="CASCADE"), index=True, nullable=False)
    name       = db.Column(db.String(160), nullable=False)
    email      = db.Column(db.String(150), nullable=True)
    phone      = db.Column(db.String(40), nullable=True)
    birth_date = db.Column(db.Date, nullable=True)
    gender     = db.Column(db.String(1), nullable=True)  # 'M' | 'F'
    height_cm  = db.Column(db.Float, nullable=True)
    goal       = db.Column(db.String(200), nullable=True)
    notes      = db.Column(db.Text, nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    tenant     = db.relationship("Tenant", back_populates="patients")
    anamneses  = db.relationship("Anamnesis", back_populates="patient", cascade="all, delete-orphan")
    metrics    = db.relationship("Metric", back_populates="patient", cascade="all, delete-orphan")
    check_ins  = db.relationship("CheckIn", back_populates="patient", cascade="all, delete-orphan")

    EDITABLE = ("name", "email", "phone", "birth_date", "gender", "height_cm", "goal", "notes")

    def update_from_dict(self, data: dict):
        for attr in self.EDITABLE:
            if attr in data:
                setattr(self, attr, data[attr])

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "tenant_id": self.tenant_id,
            "name": self.name,
            "email": self.email,
            "phone": self.phone,
            "birth_date": _iso(self.birth_date),
            "gender": self.gender,
            "height_cm": self.height_cm,
            "goal": self.goal,
            "notes": self.notes,
            "created_at": _iso(self.created_at),
        }

    def __repr__(self) -> str:
        return f"<Patient {self.id} {self.name}>"


class Anamnesis(db.Model):
    """Historia clínica/nutricional libre (JSON) de un paciente."""
    __tablename__ = "anamnesis"

    id         = db.Column(db.Integer, primary_key=True)
    patient_id = db.Column(db.Integer, db.ForeignKey("patients.id", ondelete="CASCADE"), index=True, nullable=False)
    data       = db.Column(db.JSON, nullable=False, default=dict)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    patient = db.relationship("Patient", back_populates="anamneses")

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "patient_id": self.patient_id,
            "data": self.data or {},
            "created_at": _iso(self.created_at),
            "updated_at": _iso(self.updated_at),
        }


class Metric(db.Model):
    __tablename__ = "metrics"

    id           = db.Column(db.Integer, primary_key=True)
    patient_id   = db.Column(db.Integer, db.ForeignKey("patients.id", ondelete="CASCADE"), index=True, nullable=False)
    date         = db.Column(db.Date, nullable=False, default=date.today)
    weight_kg    = db.Column(db.Float, nullable=False)
    height_cm    = db.Column(db.Float, nullable=True)
    body_fat_pct = db.Column(db.Float, nullable=True)
    waist_cm     = db.Column(db.Float, nullable=True)
    notes        = db.Column(db.Text, nullable=True)

    __table_args__ = (
        CheckConstraint("weight_kg > 0", name="ck_metrics_weight_positive"),
    )

    patient = db.relationship("Patient", back_populates="metrics")

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "patient_id": self.patient_id,
            "date": _iso(self.date),
            "weight_kg": self.weight_kg,
            "height_cm": self.height_cm,
            "body_fat_pct": self.body_fat_pct,
            "waist_cm": self.waist_cm,
            "notes": self.notes,
        }


class CheckIn(db.Model):
    """Revisión de progreso: peso y perímetros (cm)."""
    __tablename__ = "patient_check_ins"

    id         = db.Column(db.Integer, primary_key=True)
    patient_id = db.Column(db.Integer, db.ForeignKey("patients.id", ondelete="CASCADE"), index=True, nullable=False)
    date       = db.Column(db.Date, nullable=False, default=date.today)
    weight     = db.Column(db.Float, nullable=True)
    chest      = db.Column(db.Float, nullable=True)
    waist      = db.Column(db.Float, nullable=True)
    hip        = db.Column(db.Float, nullable=True)
    clavicle   = db.Column(db.Float, nullable=True)
    quadriceps = db.Column(db.Float, nullable=True)
    biceps     = db.Column(db.Float, nullable=True)
    notes      = db.Column(db.Text, nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    patient = db.relationship("Patient", back_populates="check_ins")

    MEASURES = ("weight", "chest", "waist", "hip", "clavicle", "quadriceps", "biceps")

    def has_data(self) -> bool:
        return any(getattr(self, m) is not None for m in self.MEASURES) or bool(self.notes)

    def to_dict(self) -> dict:
        d = {"id": self.id, "patient_id": self.patient_id, "date": _iso(self.date), "notes": self.notes}
        for m in self.MEASURES:
            d[m] = getattr(self, m)
        return d
