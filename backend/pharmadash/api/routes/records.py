"""Records: read-only lists backing the dashboard tables. Empty on store failure."""
from typing import List

from fastapi import APIRouter, Depends

from pharmadash.api.deps import get_store, get_current_identity
from pharmadash.db.store import PharmacyStore
from pharmadash.schemas.records import (
    MedicationRecord,
    InventoryRecord,
    PrescriptionRecord,
    PrescriptionItemRecord,
    SupplierRecord,
    PurchaseOrderRecord,
    PurchaseOrderItemRecord,
)
from pharmadash.services import read_models
from pharmadash.services.aggregation import get_low_stock_items

router = APIRouter(dependencies=[Depends(get_current_identity)])


@router.get("/medications", response_model=List[MedicationRecord])
def list_medications(store: PharmacyStore = Depends(get_store)):
    return read_models.get_medications(store)


@router.get("/inventory", response_model=List[InventoryRecord])
def list_inventory(store: PharmacyStore = Depends(get_store)):
    return read_models.get_inventory(store)


@router.get("/inventory/top6", response_model=List[InventoryRecord])
def list_top6_inventory(store: PharmacyStore = Depends(get_store)):
    return read_models.get_top6_inventory(store)


@router.get("/inventory/low-stock", response_model=List[InventoryRecord])
def list_low_stock(store: PharmacyStore = Depends(get_store)):
    return get_low_stock_items(store)


@router.get("/prescriptions", response_model=List[PrescriptionRecord])
def list_prescriptions(store: PharmacyStore = Depends(get_store)):
    return read_models.get_prescriptions(store)


@router.get("/prescription-items", response_model=List[PrescriptionItemRecord])
def list_prescription_items(store: PharmacyStore = Depends(get_store)):
    return read_models.get_prescription_items(store)


@router.get("/suppliers", response_model=List[SupplierRecord])
def list_suppliers(store: PharmacyStore = Depends(get_store)):
    return read_models.get_suppliers(store)


@router.get("/purchase-orders", response_model=List[PurchaseOrderRecord])
def list_purchase_orders(store: PharmacyStore = Depends(get_store)):
    return read_models.get_purchase_orders(store)


@router.get("/purchase-order-items", response_model=List[PurchaseOrderItemRecord])
def list_purchase_order_items(store: PharmacyStore = Depends(get_store)):
    return read_models.get_purchase_order_items(store)
