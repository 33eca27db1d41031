# nexo_clinic/models/appointment.py

from datetime import datetime
from sqlalchemy import CheckConstraint
from nexo_clinic import db

APPOINTMENT_STATUSES = ("pendiente", "confirmada", "completada", "cancelada")
APPOINTMENT_TYPES = ("Primera Visita", "Revisión Online", "Seguimiento", "Interno")


class Appointment(db.Model):
    __tablename__ = "appointments"

    id              = db.Column(db.Integer, primary_key=True)
    tenant_id       = db.Column(db.Integer, db.ForeignKey("tenants.id", ondelete="CASCADE"), index=True, nullable=False)
    patient_id      = db.Column(db.Integer, db.ForeignKey("patients.id", ondelete="CASCADE"), index=True, nullable=True)
    nutritionist_id = db.Column(db.Integer, db.ForeignKey("users.id", ondelete="SET NULL"), nullable=True)

    date     = db.Column(db.Date, nullable=False)
    time     = db.Column(db.Time, nullable=False)
    duration = db.Column(db.Float, nullable=False, default=1.0)  # horas
    type     = db.Column(db.String(40), nullable=False, default="Revisión Online")
    status   = db.Column(db.String(20), nullable=False, default="pendiente")
    notes    = db.Column(db.Text, nullable=True)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    __table_args__ = (
        CheckConstraint("duration > 0", name="ck_appointments_duration_positive"),
    )

    patient      = db.relationship("Patient")
    nutritionist = db.relationship("User")

    def to_dict(self, include_patient: bool = True) -> dict:
        d = {
            "id": self.id,
            "tenant_id": self.tenant_id,
            "patient_id": self.patient_id,
            "nutritionist_id": self.nutritionist_id,
            "date": self.date.isoformat(),
            "time": self.time.strftime("%H:%M"),
            "duration": self.duration,
            "type": self.type,
            "status": self.status,
            "notes": self.notes,
        }
        if include_patient:
            d["patient"] = self.patient.to_dict() if self.patient else None
        return d

    def __repr__(self) -> str:
        return f"<Appointment {self.id} {self.date} {self.time} {self.status}>"
