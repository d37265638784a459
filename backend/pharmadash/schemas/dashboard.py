from pydantic import BaseModel, Field
from typing import Dict, List
from datetime import datetime

from pharmadash.schemas.records import (
    MedicationRecord,
    InventoryRecord,
    PrescriptionRecord,
    PrescriptionItemRecord,
    SupplierRecord,
    PurchaseOrderRecord,
    PurchaseOrderItemRecord,
)


class TableCount(BaseModel):
    name: str
    count: int
    color: str


class TableDistribution(BaseModel):
    tables: List[TableCount]
    total: int


class MonthlyBucket(BaseModel):
    month: str  # "Mar 2025"
    prescriptions: int
    revenue: float


class TrendingMedication(BaseModel):
    medication_id: int
    medication_name: str
    prescription_count: int
    average_daily: int


class ActivityEntry(BaseModel):
    id: str
    type: str  # prescription | inventory | purchase
    message: str
    time: str
    timestamp: datetime


class StatCard(BaseModel):
    title: str
    value: str
    change: str
    change_type: str  # positive | negative


class DashboardSnapshot(BaseModel):
    """Everything the dashboard page renders after the initial load."""
    medications: List[MedicationRecord] = Field(default_factory=list)
    inventory: List[InventoryRecord] = Field(default_factory=list)
    top6_inventory: List[InventoryRecord] = Field(default_factory=list)
    prescriptions: List[PrescriptionRecord] = Field(default_factory=list)
    prescription_items: List[PrescriptionItemRecord] = Field(default_factory=list)
    suppliers: List[SupplierRecord] = Field(default_factory=list)
    purchase_orders: List[PurchaseOrderRecord] = Field(default_factory=list)
    purchase_order_items: List[PurchaseOrderItemRecord] = Field(default_factory=list)
    table_counts: Dict[str, int] = Field(default_factory=dict)
    recent_activity: List[ActivityEntry] = Field(default_factory=list)
