from pydantic import BaseModel
from typing import Optional
from datetime import date, datetime


class MedicationRecord(BaseModel):
    medication_id: int
    medication_name: str
    generic_name: Optional[str] = None
    manufacturer: Optional[str] = None
    dosage: Optional[str] = None
    formulation: Optional[str] = None
    description: Optional[str] = None
    price_per_unit: Optional[float] = None

    class Config:
        from_attributes = True


class MedicationSummary(BaseModel):
    medication_name: str
    generic_name: Optional[str] = None
    manufacturer: Optional[str] = None

    class Config:
        from_attributes = True


class InventoryRecord(BaseModel):
    inventory_id: int
    medication_id: Optional[int] = None
    batch_number: Optional[str] = None
    expiry_date: Optional[date] = None
    quantity_in_stock: int
    reorder_level: int
    last_updated: Optional[datetime] = None
    medication: Optional[MedicationSummary] = None

    class Config:
        from_attributes = True


class PrescriptionRecord(BaseModel):
    prescription_id: int
    patient_id: int
    physician_id: Optional[int] = None
    date_prescribed: datetime
    status: Optional[str] = None

    class Config:
        from_attributes = True


class PrescriptionSummary(BaseModel):
    date_prescribed: datetime
    status: Optional[str] = None

    class Config:
        from_attributes = True


class PrescriptionItemRecord(BaseModel):
    prescription_item_id: int
    prescription_id: Optional[int] = None
    medication_id: Optional[int] = None
    quantity_dispensed: Optional[str] = None
    dosage_instructions: Optional[str] = None
    cost: Optional[float] = None
    medication: Optional[MedicationSummary] = None
    prescription: Optional[PrescriptionSummary] = None

    class Config:
        from_attributes = True


class SupplierRecord(BaseModel):
    supplier_id: int
    supplier_name: str
    contact_person: Optional[str] = None
    phone_number: Optional[str] = None
    email: Optional[str] = None

    class Config:
        from_attributes = True


class SupplierSummary(BaseModel):
    supplier_name: str
    contact_person: Optional[str] = None

    class Config:
        from_attributes = True


class PurchaseOrderRecord(BaseModel):
    purchase_order_id: int
    supplier_id: Optional[int] = None
    order_date: datetime
    delivery_date: Optional[datetime] = None
    status: Optional[str] = None
    supplier: Optional[SupplierSummary] = None

    class Config:
        from_attributes = True


class PurchaseOrderSummary(BaseModel):
    order_date: datetime
    status: Optional[str] = None

    class Config:
        from_attributes = True


class PurchaseOrderItemRecord(BaseModel):
    purchase_order_item_id: int
    purchase_order_id: Optional[int] = None
    medication_id: Optional[int] = None
    quantity_ordered: int
    cost_per_unit: Optional[float] = None
    medication: Optional[MedicationSummary] = None
    purchase_order: Optional[PurchaseOrderSummary] = None

    class Config:
        from_attributes = True
