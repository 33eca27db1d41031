# nexo_clinic/models/diet.py
from datetime import datetime
from nexo_clinic import db


class DietPlanRecord(db.Model):
    """
    Un documento JSON por paciente: {weeklyDiet, userGoals, calcData}.
    `version` se incrementa en cada escritura (control optimista).
    """
    __tablename__ = "diets"

    id = db.Column(db.Integer, primary_key=True)
    patient_id = db.Column(
        db.Integer,
        db.ForeignKey("patients.id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
    )
    data = db.Column(db.JSON, nullable=False)
    version = db.Column(db.Integer, nullable=False, default=1)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    def __repr__(self) -> str:
        return f"<DietPlanRecord patient={self.patient_id} v{self.version}>"
