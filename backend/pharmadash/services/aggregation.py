"""
Aggregates derived from read models: table counts, low stock, monthly
prescription trend, today's trending medications.

Nothing here is cached. Every value is recomputed from the query result it
is handed (or fetches).
"""
import logging
import math
from collections import OrderedDict
from datetime import date, datetime, time, timedelta
from typing import Dict, Iterable, List, Optional

from sqlalchemy.orm import joinedload

from pharmadash.core.exceptions import StoreQueryError
from pharmadash.db.store import PharmacyStore
from pharmadash.models.medication import Medication
from pharmadash.models.inventory import InventoryItem
from pharmadash.models.prescription import Prescription, PrescriptionItem
from pharmadash.models.supplier import Supplier
from pharmadash.models.purchase_order import PurchaseOrder, PurchaseOrderItem
from pharmadash.models.user import User
from pharmadash.schemas.dashboard import MonthlyBucket, TableCount, TableDistribution, TrendingMedication
from pharmadash.schemas.records import InventoryRecord, PrescriptionItemRecord
from pharmadash.services.read_models import fetch_records, get_inventory_by_stock_level

logger = logging.getLogger(__name__)

# Stat-card counts
COUNTED_RELATIONS = {
    "medications": Medication,
    "inventory": InventoryItem,
    "prescriptions": Prescription,
    "suppliers": Supplier,
}

# Pie chart: (label, model, color)
DISTRIBUTION_TABLES = [
    ("Inventory", InventoryItem, "#2563eb"),
    ("Medications", Medication, "#059669"),
    ("PrescriptionItems", PrescriptionItem, "#ea580c"),
    ("Prescriptions", Prescription, "#7c3aed"),
    ("PurchaseOrderItem", PurchaseOrderItem, "#dc2626"),
    ("PurchaseOrders", PurchaseOrder, "#0891b2"),
    ("Suppliers", Supplier, "#ca8a04"),
    ("Users", User, "#db2777"),
]

TREND_WINDOW = 6
FALLBACK_MONTHS = ["Mar 2025", "Apr 2025", "May 2025", "Jun 2025", "Jul 2025", "Aug 2025"]
FALLBACK_PRESCRIPTIONS = 100
FALLBACK_REVENUE = 12000

TRENDING_LIMIT = 6
# Displayed "average daily" is a fixed share of today's count, not a real average
AVERAGE_DAILY_RATIO = 0.85


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positive values (what the charts display), not to even."""
    return int(math.floor(value + 0.5))


# ---------------------------------------------------------------------------
# Table counts
# ---------------------------------------------------------------------------

def _count_or_zero(store: PharmacyStore, model) -> int:
    try:
        return store.count(model) or 0
    except StoreQueryError as e:
        logger.error(f"Error counting {model.__tablename__}: {e}")
        return 0


def get_table_counts(store: PharmacyStore) -> Dict[str, int]:
    return {name: _count_or_zero(store, model) for name, model in COUNTED_RELATIONS.items()}


def get_all_table_counts(store: PharmacyStore) -> TableDistribution:
    tables = [
        TableCount(name=name, count=_count_or_zero(store, model), color=color)
        for name, model, color in DISTRIBUTION_TABLES
    ]
    return TableDistribution(tables=tables, total=sum(t.count for t in tables))


# ---------------------------------------------------------------------------
# Low stock
# ---------------------------------------------------------------------------

def is_low_stock(item: InventoryRecord) -> bool:
    return item.quantity_in_stock < item.reorder_level


def filter_low_stock(items: Iterable[InventoryRecord]) -> List[InventoryRecord]:
    return [item for item in items if is_low_stock(item)]


def get_low_stock_items(store: PharmacyStore) -> List[InventoryRecord]:
    """Low-stock inventory, lowest quantity first."""
    return filter_low_stock(get_inventory_by_stock_level(store))


def stock_efficiency(items: List[InventoryRecord]) -> str:
    """Share of inventory rows not below their reorder level, e.g. "83.3%"."""
    if not items:
        return "0%"
    healthy = len(items) - len(filter_low_stock(items))
    return f"{healthy / len(items) * 100:.1f}%"


# ---------------------------------------------------------------------------
# Monthly prescription trend
# ---------------------------------------------------------------------------

def bucket_by_month(items: Iterable[PrescriptionItemRecord]) -> List[MonthlyBucket]:
    """
    Group prescription lines by (month, year) of their prescription date.

    Lines without a joined prescription are skipped. Buckets come back in
    chronological order.
    """
    buckets: Dict[tuple, dict] = {}
    for item in items:
        if item.prescription is None or item.prescription.date_prescribed is None:
            continue
        prescribed = item.prescription.date_prescribed
        key = (prescribed.year, prescribed.month)
        bucket = buckets.setdefault(
            key, {"month": prescribed.strftime("%b %Y"), "prescriptions": 0, "revenue": 0.0}
        )
        bucket["prescriptions"] += 1
        bucket["revenue"] += item.cost or 0

    return [MonthlyBucket(**buckets[key]) for key in sorted(buckets)]


def trend_variation(index: int) -> float:
    progress = (index + 1) / len(FALLBACK_MONTHS)
    return 0.8 + math.sin(index) * 0.15 + progress * 0.4


def _base_bucket(items: List[PrescriptionItemRecord], buckets: List[MonthlyBucket]) -> MonthlyBucket:
    """Month of the first dated line in the order the lines were queried (newest line first)."""
    by_label = {b.month: b for b in buckets}
    for item in items:
        if item.prescription is not None and item.prescription.date_prescribed is not None:
            return by_label[item.prescription.date_prescribed.strftime("%b %Y")]
    return MonthlyBucket(month="", prescriptions=FALLBACK_PRESCRIPTIONS, revenue=FALLBACK_REVENUE)


def prescription_trend(items: Iterable[PrescriptionItemRecord]) -> List[MonthlyBucket]:
    """
    Series for the prescription line chart.

    With six or more real months, the six most recent. Otherwise a smoothed
    placeholder series scaled from the month of the first dated line as
    given (or 100 prescriptions / 12000 revenue when there is none).
    """
    items = list(items)
    buckets = bucket_by_month(items)
    if len(buckets) >= TREND_WINDOW:
        return buckets[-TREND_WINDOW:]

    base = _base_bucket(items, buckets)
    series = []
    for index, month in enumerate(FALLBACK_MONTHS):
        variation = trend_variation(index)
        series.append(
            MonthlyBucket(
                month=month,
                prescriptions=round_half_up(base.prescriptions * variation),
                revenue=round_half_up(base.revenue * variation),
            )
        )
    return series


# ---------------------------------------------------------------------------
# Trending medications
# ---------------------------------------------------------------------------

def _todays_prescription_items(store: PharmacyStore, today: date) -> List[PrescriptionItemRecord]:
    start = datetime.combine(today, time.min)
    end = start + timedelta(days=1)
    return fetch_records(
        store,
        "PrescriptionItems",
        lambda db: db.query(PrescriptionItem)
        .join(Prescription, PrescriptionItem.prescription_id == Prescription.prescription_id)
        .options(joinedload(PrescriptionItem.medication), joinedload(PrescriptionItem.prescription))
        .filter(Prescription.date_prescribed >= start, Prescription.date_prescribed < end)
        .order_by(PrescriptionItem.prescription_item_id),
        PrescriptionItemRecord,
    )


def rank_medications(items: Iterable[PrescriptionItemRecord]) -> List[TrendingMedication]:
    """Count lines per medication, most prescribed first, top six."""
    counts: "OrderedDict[int, dict]" = OrderedDict()
    for item in items:
        if item.medication_id is None:
            continue
        name = item.medication.medication_name if item.medication else "Unknown"
        entry = counts.setdefault(item.medication_id, {"name": name, "count": 0})
        entry["name"] = name
        entry["count"] += 1

    trending = [
        TrendingMedication(
            medication_id=medication_id,
            medication_name=entry["name"],
            prescription_count=entry["count"],
            average_daily=round_half_up(entry["count"] * AVERAGE_DAILY_RATIO),
        )
        for medication_id, entry in counts.items()
    ]
    # sorted() is stable: ties keep first-seen order
    trending = sorted(trending, key=lambda t: t.prescription_count, reverse=True)
    return trending[:TRENDING_LIMIT]


def get_trending_medications(store: PharmacyStore, today: Optional[date] = None) -> List[TrendingMedication]:
    """Medications on today's prescriptions (local calendar day)."""
    return rank_medications(_todays_prescription_items(store, today or date.today()))
