"""
Initial dashboard load: every view fetched concurrently.

Each query runs in a worker thread with its own session. The batch waits for
all of them; a view whose query fails comes back empty without affecting the
others.
"""
import asyncio
import logging
from typing import Callable, Dict, Optional

from pharmadash.db.store import PharmacyStore
from pharmadash.schemas.dashboard import DashboardSnapshot
from pharmadash.services import read_models
from pharmadash.services.activity_feed import get_recent_activity
from pharmadash.services.aggregation import get_table_counts

logger = logging.getLogger(__name__)

DASHBOARD_QUERIES: Dict[str, Callable[[PharmacyStore], object]] = {
    "medications": read_models.get_medications,
    "inventory": read_models.get_inventory,
    "top6_inventory": read_models.get_top6_inventory,
    "prescriptions": read_models.get_prescriptions,
    "prescription_items": read_models.get_prescription_items,
    "suppliers": read_models.get_suppliers,
    "purchase_orders": read_models.get_purchase_orders,
    "purchase_order_items": read_models.get_purchase_order_items,
    "table_counts": get_table_counts,
    "recent_activity": get_recent_activity,
}


async def load_dashboard(
    store: PharmacyStore,
    queries: Optional[Dict[str, Callable[[PharmacyStore], object]]] = None,
) -> DashboardSnapshot:
    queries = queries or DASHBOARD_QUERIES
    names = list(queries)
    results = await asyncio.gather(
        *(asyncio.to_thread(queries[name], store) for name in names),
        return_exceptions=True,
    )

    loaded = {}
    for name, result in zip(names, results):
        if isinstance(result, Exception):
            # Read models already degrade on store errors; this is anything else
            logger.error(f"Dashboard view {name} failed: {type(result).__name__}: {result}")
            continue
        loaded[name] = result

    logger.info(f"Dashboard loaded ({len(loaded)}/{len(names)} views)")
    return DashboardSnapshot(**loaded)
