"""Concurrent dashboard load and per-view degradation."""
import asyncio

from pharmadash.models import PurchaseOrderItem
from pharmadash.services.dashboard_loader import DASHBOARD_QUERIES, load_dashboard


def test_loads_every_view(store):
    snapshot = asyncio.run(load_dashboard(store))

    assert len(DASHBOARD_QUERIES) == 10
    assert len(snapshot.medications) == 4
    assert len(snapshot.inventory) == 6
    assert [i.inventory_id for i in snapshot.top6_inventory] == [1, 2, 3, 4]
    assert len(snapshot.prescriptions) == 4
    assert len(snapshot.prescription_items) == 6
    assert len(snapshot.suppliers) == 2
    assert len(snapshot.purchase_orders) == 3
    assert len(snapshot.purchase_order_items) == 2
    assert snapshot.table_counts["inventory"] == 6
    assert snapshot.recent_activity[0].id == "prescription-2"


def test_one_failing_query_leaves_the_other_nine(store):
    PurchaseOrderItem.__table__.drop(store.engine)

    snapshot = asyncio.run(load_dashboard(store))

    assert snapshot.purchase_order_items == []
    assert len(snapshot.medications) == 4
    assert len(snapshot.inventory) == 6
    assert len(snapshot.top6_inventory) == 4
    assert len(snapshot.prescriptions) == 4
    assert len(snapshot.prescription_items) == 6
    assert len(snapshot.suppliers) == 2
    assert len(snapshot.purchase_orders) == 3
    assert snapshot.table_counts == {"medications": 4, "inventory": 6, "prescriptions": 4, "suppliers": 2}
    assert len(snapshot.recent_activity) == 4


def test_unexpected_error_in_one_view_does_not_abort_the_batch(store):
    def broken(_store):
        raise RuntimeError("renderer bug")

    queries = dict(DASHBOARD_QUERIES, suppliers=broken)
    snapshot = asyncio.run(load_dashboard(store, queries))

    assert snapshot.suppliers == []
    assert len(snapshot.medications) == 4
