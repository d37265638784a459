"""Recent activity: latest prescriptions, newest low-stock alert, latest purchase order."""
from datetime import datetime
from typing import List

from sqlalchemy.orm import joinedload

from pharmadash.db.store import PharmacyStore
from pharmadash.models.prescription import Prescription
from pharmadash.models.purchase_order import PurchaseOrder
from pharmadash.schemas.dashboard import ActivityEntry
from pharmadash.schemas.records import PrescriptionRecord, PurchaseOrderRecord
from pharmadash.services.aggregation import filter_low_stock
from pharmadash.services.read_models import fetch_records, get_inventory

FEED_LIMIT = 4
RECENT_PRESCRIPTIONS = 2


def format_time(value: datetime) -> str:
    return value.strftime("%d %b %Y, %H:%M")


def _recent_prescriptions(store: PharmacyStore) -> List[ActivityEntry]:
    rows = fetch_records(
        store,
        "Prescriptions",
        lambda db: db.query(Prescription)
        .order_by(Prescription.date_prescribed.desc())
        .limit(RECENT_PRESCRIPTIONS),
        PrescriptionRecord,
    )
    return [
        ActivityEntry(
            id=f"prescription-{p.prescription_id}",
            type="prescription",
            message=f"New prescription created for Patient #{p.patient_id}",
            time=format_time(p.date_prescribed),
            timestamp=p.date_prescribed,
        )
        for p in rows
    ]


def _latest_low_stock(store: PharmacyStore) -> List[ActivityEntry]:
    # get_inventory is ordered by last_updated desc
    rows = filter_low_stock(get_inventory(store))
    if not rows:
        return []
    item = rows[0]
    name = item.medication.medication_name if item.medication else "Unknown medication"
    return [
        ActivityEntry(
            id=f"low-stock-{item.inventory_id}",
            type="inventory",
            message=f"Low stock alert: {name}",
            time="Recently",
            timestamp=item.last_updated or datetime.min,
        )
    ]


def _latest_purchase_order(store: PharmacyStore) -> List[ActivityEntry]:
    rows = fetch_records(
        store,
        "PurchaseOrders",
        lambda db: db.query(PurchaseOrder)
        .options(joinedload(PurchaseOrder.supplier))
        .order_by(PurchaseOrder.order_date.desc())
        .limit(1),
        PurchaseOrderRecord,
    )
    if not rows:
        return []
    order = rows[0]
    supplier = order.supplier.supplier_name if order.supplier else "Unknown supplier"
    return [
        ActivityEntry(
            id=f"purchase-{order.purchase_order_id}",
            type="purchase",
            message=f"Purchase order #{order.purchase_order_id} from {supplier}",
            time=format_time(order.order_date),
            timestamp=order.order_date,
        )
    ]


def merge_activity(*slices: List[ActivityEntry]) -> List[ActivityEntry]:
    """Newest first, at most FEED_LIMIT entries."""
    entries = [entry for entries in slices for entry in entries]
    entries.sort(key=lambda e: e.timestamp, reverse=True)
    return entries[:FEED_LIMIT]


def get_recent_activity(store: PharmacyStore) -> List[ActivityEntry]:
    return merge_activity(
        _recent_prescriptions(store),
        _latest_low_stock(store),
        _latest_purchase_order(store),
    )
