from datetime import datetime

from sqlalchemy import Column, Integer, String, ForeignKey, Numeric, DateTime
from sqlalchemy.orm import relationship
from pharmadash.db.base import Base


class PurchaseOrder(Base):
    __tablename__ = "PurchaseOrders"

    purchase_order_id = Column(Integer, primary_key=True, index=True)
    supplier_id = Column(Integer, ForeignKey("Suppliers.supplier_id", ondelete="CASCADE"), nullable=True)
    order_date = Column(DateTime, nullable=False, default=datetime.now)
    delivery_date = Column(DateTime, nullable=True)
    status = Column(String(32), default="ordered")  # ordered, delivered, cancelled

    supplier = relationship("Supplier", backref="purchase_orders")


class PurchaseOrderItem(Base):
    # Singular table name matches the hosted schema
    __tablename__ = "PurchaseOrderItem"

    purchase_order_item_id = Column(Integer, primary_key=True, index=True)
    purchase_order_id = Column(Integer, ForeignKey("PurchaseOrders.purchase_order_id", ondelete="CASCADE"), nullable=True)
    medication_id = Column(Integer, ForeignKey("Medications.medication_id", ondelete="CASCADE"), nullable=True)
    quantity_ordered = Column(Integer, nullable=False, default=0)
    cost_per_unit = Column(Numeric(10, 2), default=0)

    purchase_order = relationship("PurchaseOrder", backref="items")
    medication = relationship("Medication")
