from sqlalchemy import Column, Integer, String, Numeric, Text
from pharmadash.db.base import Base


class Medication(Base):
    """Catalog entry. Referenced by inventory, prescription and purchase order lines."""
    __tablename__ = "Medications"

    medication_id = Column(Integer, primary_key=True, index=True)
    medication_name = Column(String(255), nullable=False)
    generic_name = Column(String(255), nullable=True)
    manufacturer = Column(String(255), nullable=True)
    dosage = Column(String(128), nullable=True)
    formulation = Column(String(128), nullable=True)
    description = Column(Text, nullable=True)
    price_per_unit = Column(Numeric(10, 2), default=0)
