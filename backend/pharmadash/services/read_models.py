"""
Read models: one query function per relation or joined view.

Each function takes only the store handle, asks for a fixed ordering, and
maps rows to Pydantic records. A failed query is logged and yields an empty
list; callers never see the error.
"""
import logging
from typing import Callable, List, Type, TypeVar

from pydantic import BaseModel
from sqlalchemy.orm import Query, Session, joinedload

from pharmadash.core.exceptions import StoreQueryError
from pharmadash.db.store import PharmacyStore
from pharmadash.models.medication import Medication
from pharmadash.models.inventory import InventoryItem
from pharmadash.models.prescription import Prescription, PrescriptionItem
from pharmadash.models.supplier import Supplier
from pharmadash.models.purchase_order import PurchaseOrder, PurchaseOrderItem
from pharmadash.schemas.records import (
    MedicationRecord,
    InventoryRecord,
    PrescriptionRecord,
    PrescriptionItemRecord,
    SupplierRecord,
    PurchaseOrderRecord,
    PurchaseOrderItemRecord,
)

logger = logging.getLogger(__name__)

R = TypeVar("R", bound=BaseModel)

# Fixed id set behind the "top 6" inventory chart
TOP6_INVENTORY_IDS = (1, 2, 3, 4, 5, 6)


def fetch_records(
    store: PharmacyStore,
    relation: str,
    build_query: Callable[[Session], Query],
    record_cls: Type[R],
) -> List[R]:
    """Run one query and map its rows, degrading to [] on store failure."""
    try:
        with store.session(relation) as db:
            rows = build_query(db).all()
            return [record_cls.model_validate(row) for row in rows]
    except StoreQueryError as e:
        logger.error(f"Error fetching {relation}: {e}")
        return []


def get_medications(store: PharmacyStore) -> List[MedicationRecord]:
    return fetch_records(
        store,
        "Medications",
        lambda db: db.query(Medication).order_by(Medication.medication_name),
        MedicationRecord,
    )


def _inventory_with_medication(db: Session) -> Query:
    return db.query(InventoryItem).options(joinedload(InventoryItem.medication))


def get_inventory(store: PharmacyStore) -> List[InventoryRecord]:
    """Inventory with medication names, most recently updated first."""
    return fetch_records(
        store,
        "Inventory",
        lambda db: _inventory_with_medication(db).order_by(InventoryItem.last_updated.desc()),
        InventoryRecord,
    )


def get_top6_inventory(store: PharmacyStore) -> List[InventoryRecord]:
    """Inventory rows 1-6, which feed the stock-level bar chart."""
    return fetch_records(
        store,
        "Inventory",
        lambda db: _inventory_with_medication(db)
        .filter(InventoryItem.inventory_id.in_(TOP6_INVENTORY_IDS))
        .order_by(InventoryItem.inventory_id),
        InventoryRecord,
    )


def get_inventory_by_stock_level(store: PharmacyStore) -> List[InventoryRecord]:
    return fetch_records(
        store,
        "Inventory",
        lambda db: _inventory_with_medication(db).order_by(InventoryItem.quantity_in_stock),
        InventoryRecord,
    )


def get_prescriptions(store: PharmacyStore) -> List[PrescriptionRecord]:
    return fetch_records(
        store,
        "Prescriptions",
        lambda db: db.query(Prescription).order_by(Prescription.date_prescribed.desc()),
        PrescriptionRecord,
    )


def get_prescription_items(store: PharmacyStore) -> List[PrescriptionItemRecord]:
    """Prescription lines with medication and prescription date, newest line first."""
    return fetch_records(
        store,
        "PrescriptionItems",
        lambda db: db.query(PrescriptionItem)
        .options(joinedload(PrescriptionItem.medication), joinedload(PrescriptionItem.prescription))
        .order_by(PrescriptionItem.prescription_item_id.desc()),
        PrescriptionItemRecord,
    )


def get_suppliers(store: PharmacyStore) -> List[SupplierRecord]:
    return fetch_records(
        store,
        "Suppliers",
        lambda db: db.query(Supplier).order_by(Supplier.supplier_name),
        SupplierRecord,
    )


def get_purchase_orders(store: PharmacyStore) -> List[PurchaseOrderRecord]:
    return fetch_records(
        store,
        "PurchaseOrders",
        lambda db: db.query(PurchaseOrder)
        .options(joinedload(PurchaseOrder.supplier))
        .order_by(PurchaseOrder.order_date.desc()),
        PurchaseOrderRecord,
    )


def get_purchase_order_items(store: PharmacyStore) -> List[PurchaseOrderItemRecord]:
    return fetch_records(
        store,
        "PurchaseOrderItem",
        lambda db: db.query(PurchaseOrderItem)
        .options(joinedload(PurchaseOrderItem.medication), joinedload(PurchaseOrderItem.purchase_order))
        .order_by(PurchaseOrderItem.purchase_order_item_id.desc()),
        PurchaseOrderItemRecord,
    )
