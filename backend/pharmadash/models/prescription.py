from datetime import datetime

from sqlalchemy import Column, Integer, String, ForeignKey, Numeric, DateTime
from sqlalchemy.orm import relationship
from pharmadash.db.base import Base


class Prescription(Base):
    __tablename__ = "Prescriptions"

    prescription_id = Column(Integer, primary_key=True, index=True)
    patient_id = Column(Integer, nullable=False)
    physician_id = Column(Integer, nullable=True)
    date_prescribed = Column(DateTime, nullable=False, default=datetime.now)
    status = Column(String(32), default="pending")  # pending, dispensed, cancelled


class PrescriptionItem(Base):
    __tablename__ = "PrescriptionItems"

    prescription_item_id = Column(Integer, primary_key=True, index=True)
    prescription_id = Column(Integer, ForeignKey("Prescriptions.prescription_id", ondelete="CASCADE"), nullable=True)
    medication_id = Column(Integer, ForeignKey("Medications.medication_id", ondelete="CASCADE"), nullable=True)
    quantity_dispensed = Column(String(64), nullable=True)  # free text, e.g. "30 tablets"
    dosage_instructions = Column(String(512), nullable=True)
    cost = Column(Numeric(12, 2), default=0)

    prescription = relationship("Prescription", backref="items")
    medication = relationship("Medication")
