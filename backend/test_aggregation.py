"""Aggregates: low stock, table counts, monthly trend, trending medications."""
from datetime import date, datetime

import pytest

from conftest import REFERENCE_DAY
from pharmadash.models import PrescriptionItem, Supplier, User
from pharmadash.schemas.records import InventoryRecord, PrescriptionItemRecord, PrescriptionSummary, MedicationSummary
from pharmadash.services import aggregation
from pharmadash.services.read_models import get_inventory, get_prescription_items


def inventory(qty, reorder, inventory_id=1):
    return InventoryRecord(inventory_id=inventory_id, quantity_in_stock=qty, reorder_level=reorder)


def line(prescribed, cost, medication_id=1, name="Amoxil"):
    return PrescriptionItemRecord(
        prescription_item_id=1,
        medication_id=medication_id,
        cost=cost,
        medication=MedicationSummary(medication_name=name) if name else None,
        prescription=PrescriptionSummary(date_prescribed=prescribed) if prescribed else None,
    )


# ---------------------------------------------------------------------------
# Low stock
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("qty, reorder, expected", [
    (0, 1, True),
    (49, 50, True),
    (50, 50, False),
    (51, 50, False),
    (0, 0, False),
])
def test_low_stock_is_strictly_below_reorder_level(qty, reorder, expected):
    assert aggregation.is_low_stock(inventory(qty, reorder)) is expected


def test_filter_low_stock_matches_predicate_for_every_item(store):
    items = get_inventory(store)
    low = aggregation.filter_low_stock(items)

    assert {i.inventory_id for i in low} == {1, 3, 7}
    for item in items:
        assert aggregation.is_low_stock(item) == (item.quantity_in_stock < item.reorder_level)


def test_low_stock_items_come_lowest_quantity_first(store):
    low = aggregation.get_low_stock_items(store)
    assert [i.inventory_id for i in low] == [7, 3, 1]


def test_stock_efficiency():
    items = [inventory(1, 5), inventory(10, 5), inventory(10, 5)]
    assert aggregation.stock_efficiency(items) == "66.7%"
    assert aggregation.stock_efficiency([]) == "0%"


# ---------------------------------------------------------------------------
# Table counts
# ---------------------------------------------------------------------------

def test_table_counts_match_store(store):
    assert aggregation.get_table_counts(store) == {
        "medications": 4,
        "inventory": 6,
        "prescriptions": 4,
        "suppliers": 2,
    }


def test_missing_table_counts_as_zero(store):
    Supplier.__table__.drop(store.engine)

    counts = aggregation.get_table_counts(store)

    assert counts["suppliers"] == 0
    assert counts["medications"] == 4


def test_all_table_counts_cover_every_relation_with_colors(store):
    distribution = aggregation.get_all_table_counts(store)
    by_name = {t.name: t for t in distribution.tables}

    assert list(by_name) == [
        "Inventory", "Medications", "PrescriptionItems", "Prescriptions",
        "PurchaseOrderItem", "PurchaseOrders", "Suppliers", "Users",
    ]
    assert by_name["PrescriptionItems"].count == 6
    assert by_name["PurchaseOrders"].count == 3
    assert by_name["Users"].count == 0
    assert by_name["Inventory"].color == "#2563eb"
    assert distribution.total == 6 + 4 + 6 + 4 + 2 + 3 + 2 + 0


def test_all_table_counts_zero_for_dropped_table(store):
    User.__table__.drop(store.engine)
    distribution = aggregation.get_all_table_counts(store)
    assert {t.name: t.count for t in distribution.tables}["Users"] == 0


# ---------------------------------------------------------------------------
# Monthly trend
# ---------------------------------------------------------------------------

def test_bucket_by_month_groups_and_sums(store):
    buckets = aggregation.bucket_by_month(get_prescription_items(store))

    # Line 6 has no prescription and is skipped
    assert [(b.month, b.prescriptions, b.revenue) for b in buckets] == [
        ("Apr 2025", 1, 3.0),
        ("May 2025", 1, 7.0),
        ("Jun 2025", 3, 35.5),
    ]


def test_bucket_by_month_separates_same_month_of_different_years():
    buckets = aggregation.bucket_by_month([
        line(datetime(2024, 3, 1), 1),
        line(datetime(2025, 3, 1), 2),
    ])
    assert [b.month for b in buckets] == ["Mar 2024", "Mar 2025"]


def test_trend_fallback_without_data_uses_default_base_point():
    series = aggregation.prescription_trend([])

    assert len(series) == 6
    assert [b.month for b in series] == aggregation.FALLBACK_MONTHS
    # index 0: 0.8 + 0 + 0.4/6
    assert series[0].prescriptions == 87
    assert series[0].revenue == 10400
    for index, bucket in enumerate(series):
        variation = aggregation.trend_variation(index)
        assert bucket.prescriptions == aggregation.round_half_up(100 * variation)
        assert bucket.revenue == aggregation.round_half_up(12000 * variation)


def test_trend_fallback_scales_first_real_month():
    items = [line(datetime(2025, 6, 1), 50.0) for _ in range(10)]
    series = aggregation.prescription_trend(items)

    assert len(series) == 6
    assert series[0].prescriptions == aggregation.round_half_up(10 * aggregation.trend_variation(0))
    assert series[-1].revenue == aggregation.round_half_up(500 * aggregation.trend_variation(5))


def test_trend_fallback_scales_month_of_first_line_as_queried():
    # Newest line first, as get_prescription_items returns them
    items = [line(datetime(2025, 6, 3), 500.0)] + [line(datetime(2025, 5, 10), 10.0) for _ in range(3)]
    series = aggregation.prescription_trend(items)

    assert (series[0].prescriptions, series[0].revenue) == (1, 433)
    assert series[-1].revenue == aggregation.round_half_up(500 * aggregation.trend_variation(5))


def test_trend_fallback_base_skips_undated_lines(store):
    # Line 6 has no prescription; line 5 (April) is the first dated one
    series = aggregation.prescription_trend(get_prescription_items(store))

    assert series[0].revenue == aggregation.round_half_up(3.0 * aggregation.trend_variation(0))
    assert series[0].prescriptions == aggregation.round_half_up(1 * aggregation.trend_variation(0))


def test_trend_uses_real_data_once_six_months_exist():
    items = [line(datetime(2025, month, 10), 10.0 * month) for month in range(1, 9)]
    series = aggregation.prescription_trend(items)

    assert [b.month for b in series] == ["Mar 2025", "Apr 2025", "May 2025", "Jun 2025", "Jul 2025", "Aug 2025"]
    assert series[-1].revenue == 80.0
    assert all(b.prescriptions == 1 for b in series)


def test_trend_fallback_triggers_only_below_six_months():
    five = [line(datetime(2025, m, 1), 1.0) for m in range(1, 6)]
    six = [line(datetime(2025, m, 1), 1.0) for m in range(1, 7)]

    assert [b.month for b in aggregation.prescription_trend(five)] == aggregation.FALLBACK_MONTHS
    assert [b.month for b in aggregation.prescription_trend(six)][0] == "Jan 2025"


@pytest.mark.parametrize("value, expected", [(0.5, 1), (1.5, 2), (2.5, 3), (8.5, 9), (1.49, 1)])
def test_round_half_up(value, expected):
    assert aggregation.round_half_up(value) == expected


# ---------------------------------------------------------------------------
# Trending medications
# ---------------------------------------------------------------------------

def test_trending_medications_only_count_today(store):
    trending = aggregation.get_trending_medications(store, today=REFERENCE_DAY)

    assert [(t.medication_name, t.prescription_count, t.average_daily) for t in trending] == [
        ("Amoxil", 2, 2),
        ("Lipitor", 1, 1),
    ]


def test_trending_medications_empty_on_quiet_day(store):
    assert aggregation.get_trending_medications(store, today=date(2025, 6, 16)) == []


def test_trending_medications_degrade_when_table_missing(store):
    PrescriptionItem.__table__.drop(store.engine)
    assert aggregation.get_trending_medications(store, today=REFERENCE_DAY) == []


def test_rank_medications_caps_at_six_and_keeps_first_seen_order_on_ties():
    today = datetime(2025, 6, 15, 9)
    items = []
    for medication_id in range(1, 9):
        items.extend(line(today, 1, medication_id=medication_id, name=f"Med {medication_id}") for _ in range(medication_id % 3 + 1))

    ranked = aggregation.rank_medications(items)

    assert len(ranked) == 6
    counts = [t.prescription_count for t in ranked]
    assert counts == sorted(counts, reverse=True)
    # ids 2, 5, 8 have three lines each, in that order
    assert [t.medication_id for t in ranked[:3]] == [2, 5, 8]
    assert ranked[0].average_daily == aggregation.round_half_up(3 * 0.85)


def test_rank_medications_names_unknown_when_medication_missing():
    ranked = aggregation.rank_medications([line(datetime(2025, 6, 15), 1, name=None)])
    assert ranked[0].medication_name == "Unknown"
