"""
Analytics API: chart and card data for the dashboard page.

Provides:
- Full dashboard load (all views fetched concurrently) with stat cards
- Table counts and the per-table record distribution (pie chart)
- Top-6 inventory stock vs reorder levels (bar chart)
- Monthly prescription trend (line chart)
- Today's trending medications
- Recent activity feed
"""
from typing import List

from fastapi import APIRouter, Depends

from pharmadash.api.deps import get_store, get_current_identity
from pharmadash.db.store import PharmacyStore
from pharmadash.schemas.dashboard import (
    ActivityEntry,
    DashboardSnapshot,
    MonthlyBucket,
    StatCard,
    TableDistribution,
    TrendingMedication,
)
from pharmadash.schemas.records import InventoryRecord
from pharmadash.services import aggregation
from pharmadash.services.activity_feed import get_recent_activity
from pharmadash.services.dashboard_loader import load_dashboard
from pharmadash.services.read_models import get_prescription_items, get_top6_inventory

router = APIRouter(dependencies=[Depends(get_current_identity)])


def inventory_chart(items: List[InventoryRecord]) -> List[dict]:
    """Bar chart rows: current stock next to reorder level."""
    return [
        {
            "name": item.medication.medication_name if item.medication else "Unknown",
            "current": item.quantity_in_stock,
            "reorder": item.reorder_level,
        }
        for item in items
    ]


def distribution_chart(distribution: TableDistribution) -> dict:
    return {
        "tables": [{"name": t.name, "value": t.count, "color": t.color} for t in distribution.tables],
        "total": distribution.total,
    }


def build_stat_cards(snapshot: DashboardSnapshot) -> List[StatCard]:
    counts = snapshot.table_counts
    low_stock = len(aggregation.filter_low_stock(snapshot.inventory))
    return [
        StatCard(
            title="Total Medications",
            value=f"{counts.get('medications', 0):,}",
            change=f"{len(snapshot.medications)} active medications",
            change_type="positive",
        ),
        StatCard(
            title="Active Prescriptions",
            value=f"{counts.get('prescriptions', 0):,}",
            change=f"{len(snapshot.prescription_items)} items dispensed",
            change_type="positive",
        ),
        StatCard(
            title="Inventory Items",
            value=f"{counts.get('inventory', 0):,}",
            change=f"{low_stock} low stock alerts",
            change_type="negative" if low_stock > 0 else "positive",
        ),
        StatCard(
            title="Active Suppliers",
            value=f"{counts.get('suppliers', 0):,}",
            change=f"{len(snapshot.purchase_orders)} purchase orders",
            change_type="positive",
        ),
    ]


def build_facts(snapshot: DashboardSnapshot) -> dict:
    revenue = sum(item.cost or 0 for item in snapshot.prescription_items)
    return {
        "total_prescription_revenue": round(revenue, 2),
        "stock_efficiency": aggregation.stock_efficiency(snapshot.inventory),
        "supplier_network": snapshot.table_counts.get("suppliers", 0),
    }


def build_schema_overview(snapshot: DashboardSnapshot) -> List[dict]:
    counts = snapshot.table_counts
    return [
        {"name": "Inventory", "records": counts.get("inventory", 0)},
        {"name": "Medications", "records": counts.get("medications", 0)},
        {"name": "Prescriptions", "records": counts.get("prescriptions", 0)},
        {"name": "PrescriptionItems", "records": len(snapshot.prescription_items)},
        {"name": "PurchaseOrders", "records": len(snapshot.purchase_orders)},
        {"name": "PurchaseOrderItems", "records": len(snapshot.purchase_order_items)},
        {"name": "Suppliers", "records": counts.get("suppliers", 0)},
    ]


@router.get("/dashboard")
async def get_dashboard(store: PharmacyStore = Depends(get_store)):
    """
    Everything the dashboard page needs in one call.
    Views whose query failed are empty; the rest still render.
    """
    snapshot = await load_dashboard(store)
    return {
        "stat_cards": [card.model_dump() for card in build_stat_cards(snapshot)],
        "inventory_chart": inventory_chart(snapshot.top6_inventory),
        "prescription_trend": [
            b.model_dump() for b in aggregation.prescription_trend(snapshot.prescription_items)
        ],
        "recent_activity": [e.model_dump(mode="json") for e in snapshot.recent_activity],
        "schema_overview": build_schema_overview(snapshot),
        "facts": build_facts(snapshot),
        "table_counts": snapshot.table_counts,
    }


@router.get("/table-counts")
def get_table_counts(store: PharmacyStore = Depends(get_store)):
    """Returns: {medications, inventory, prescriptions, suppliers}"""
    return aggregation.get_table_counts(store)


@router.get("/table-distribution")
def get_table_distribution(store: PharmacyStore = Depends(get_store)):
    """Record count per table for the pie chart, with colors and total."""
    return distribution_chart(aggregation.get_all_table_counts(store))


@router.get("/inventory-chart")
def get_inventory_chart(store: PharmacyStore = Depends(get_store)):
    """Returns: [{name: "Amoxicillin", current: 40, reorder: 50}, ...]"""
    return inventory_chart(get_top6_inventory(store))


@router.get("/prescription-trends", response_model=List[MonthlyBucket])
def get_prescription_trends(store: PharmacyStore = Depends(get_store)):
    return aggregation.prescription_trend(get_prescription_items(store))


@router.get("/trending-medications", response_model=List[TrendingMedication])
def get_trending_medications(store: PharmacyStore = Depends(get_store)):
    return aggregation.get_trending_medications(store)


@router.get("/recent-activity", response_model=List[ActivityEntry])
def get_activity(store: PharmacyStore = Depends(get_store)):
    return get_recent_activity(store)
