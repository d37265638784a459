from datetime import datetime

from sqlalchemy import Column, Integer, String, ForeignKey, Date, DateTime
from sqlalchemy.orm import relationship
from pharmadash.db.base import Base


class InventoryItem(Base):
    """
    One stocked batch of a medication.

    Low stock: quantity_in_stock < reorder_level.
    """
    __tablename__ = "Inventory"

    inventory_id = Column(Integer, primary_key=True, index=True)
    medication_id = Column(Integer, ForeignKey("Medications.medication_id", ondelete="CASCADE"), nullable=True)
    batch_number = Column(String(64), nullable=True)
    expiry_date = Column(Date, nullable=True)
    quantity_in_stock = Column(Integer, nullable=False, default=0)
    reorder_level = Column(Integer, nullable=False, default=0)
    last_updated = Column(DateTime, nullable=False, default=datetime.now, onupdate=datetime.now)

    medication = relationship("Medication", backref="inventory_items")
