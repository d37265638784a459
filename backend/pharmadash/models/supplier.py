from sqlalchemy import Column, Integer, String
from pharmadash.db.base import Base


class Supplier(Base):
    __tablename__ = "Suppliers"

    supplier_id = Column(Integer, primary_key=True, index=True)
    supplier_name = Column(String(255), nullable=False)
    contact_person = Column(String(255), nullable=True)
    phone_number = Column(String(64), nullable=True)
    email = Column(String(255), nullable=True)
