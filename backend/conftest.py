"""
Shared fixtures: a throwaway SQLite database per test, seeded with a small
pharmacy whose numbers every test can reason about.

Reference day is 2025-06-15.
  Inventory (id: stock/reorder, last_updated)
    1 Amoxil      40/50   10:00   low
    2 Lipitor    220/80   11:30
    3 Glucophage  35/60   10:30   low (most recently updated low item)
    4 Ventolin    90/90   08:00   (equal is not low)
    7 Amoxil       5/10   06-14   low, outside the top-6 id set
    8 (no medication) 1/0 06-13
  Prescriptions: 1 @ 06-15 09:00, 2 @ 06-15 11:00, 3 @ 05-20, 4 @ 04-02
  Prescription items: (rx, med, cost) 1:(1,1,10) 2:(1,2,20) 3:(2,1,5.5)
    4:(3,3,7) 5:(4,2,3) 6:(none,4,100)
  Purchase orders: 1 MedLine @ 06-10, 2 PharmaSource @ 06-14 15:00, 3 no supplier @ 01-01
"""
from datetime import date, datetime
from decimal import Decimal

import pytest

from pharmadash.core.security import get_password_hash
from pharmadash.db.base import Base
from pharmadash.db.store import PharmacyStore
from pharmadash.models import (
    InventoryItem,
    Medication,
    Prescription,
    PrescriptionItem,
    PurchaseOrder,
    PurchaseOrderItem,
    Supplier,
    User,
)
from pharmadash.services.identity_cache import IdentityCache

REFERENCE_DAY = date(2025, 6, 15)
TEST_ROUNDS = 4  # bcrypt minimum; keeps hashing fast


def at(month, day, hour=0, minute=0):
    return datetime(2025, month, day, hour, minute)


def setup_test_db(path) -> PharmacyStore:
    """File-backed SQLite so worker threads each get a real connection."""
    store = PharmacyStore.from_url(f"sqlite:///{path}")
    Base.metadata.create_all(store.engine)
    return store


def seed_pharmacy(store: PharmacyStore) -> None:
    with store.session("seed") as db:
        db.add_all([
            Medication(medication_id=1, medication_name="Amoxil", generic_name="Amoxicillin", manufacturer="GSK", price_per_unit=Decimal("0.45")),
            Medication(medication_id=2, medication_name="Lipitor", generic_name="Atorvastatin", manufacturer="Pfizer", price_per_unit=Decimal("1.20")),
            Medication(medication_id=3, medication_name="Glucophage", generic_name="Metformin", manufacturer="Merck", price_per_unit=Decimal("0.30")),
            Medication(medication_id=4, medication_name="Ventolin", generic_name="Salbutamol", manufacturer="GSK", price_per_unit=Decimal("6.50")),
        ])
        db.add_all([
            InventoryItem(inventory_id=1, medication_id=1, quantity_in_stock=40, reorder_level=50, last_updated=at(6, 15, 10)),
            InventoryItem(inventory_id=2, medication_id=2, quantity_in_stock=220, reorder_level=80, last_updated=at(6, 15, 11, 30)),
            InventoryItem(inventory_id=3, medication_id=3, quantity_in_stock=35, reorder_level=60, last_updated=at(6, 15, 10, 30)),
            InventoryItem(inventory_id=4, medication_id=4, quantity_in_stock=90, reorder_level=90, last_updated=at(6, 15, 8)),
            InventoryItem(inventory_id=7, medication_id=1, quantity_in_stock=5, reorder_level=10, last_updated=at(6, 14)),
            InventoryItem(inventory_id=8, medication_id=None, quantity_in_stock=1, reorder_level=0, last_updated=at(6, 13)),
        ])
        db.add_all([
            Prescription(prescription_id=1, patient_id=1001, physician_id=1, date_prescribed=at(6, 15, 9), status="dispensed"),
            Prescription(prescription_id=2, patient_id=1002, physician_id=1, date_prescribed=at(6, 15, 11), status="pending"),
            Prescription(prescription_id=3, patient_id=1003, physician_id=2, date_prescribed=at(5, 20, 10), status="dispensed"),
            Prescription(prescription_id=4, patient_id=1004, physician_id=2, date_prescribed=at(4, 2, 10), status="dispensed"),
        ])
        db.add_all([
            PrescriptionItem(prescription_item_id=1, prescription_id=1, medication_id=1, cost=Decimal("10")),
            PrescriptionItem(prescription_item_id=2, prescription_id=1, medication_id=2, cost=Decimal("20")),
            PrescriptionItem(prescription_item_id=3, prescription_id=2, medication_id=1, cost=Decimal("5.5")),
            PrescriptionItem(prescription_item_id=4, prescription_id=3, medication_id=3, cost=Decimal("7")),
            PrescriptionItem(prescription_item_id=5, prescription_id=4, medication_id=2, cost=Decimal("3")),
            PrescriptionItem(prescription_item_id=6, prescription_id=None, medication_id=4, cost=Decimal("100")),
        ])
        db.add_all([
            Supplier(supplier_id=1, supplier_name="MedLine Distribution", contact_person="Sarah Okafor"),
            Supplier(supplier_id=2, supplier_name="PharmaSource Ltd", contact_person="Daniel Reyes"),
        ])
        db.add_all([
            PurchaseOrder(purchase_order_id=1, supplier_id=1, order_date=at(6, 10), status="delivered"),
            PurchaseOrder(purchase_order_id=2, supplier_id=2, order_date=at(6, 14, 15), status="ordered"),
            PurchaseOrder(purchase_order_id=3, supplier_id=None, order_date=at(1, 1), status="cancelled"),
        ])
        db.add_all([
            PurchaseOrderItem(purchase_order_item_id=1, purchase_order_id=2, medication_id=1, quantity_ordered=100, cost_per_unit=Decimal("0.25")),
            PurchaseOrderItem(purchase_order_item_id=2, purchase_order_id=1, medication_id=2, quantity_ordered=50, cost_per_unit=Decimal("0.70")),
        ])
        db.commit()


def add_user(store: PharmacyStore, email: str, password: str) -> int:
    with store.session("users") as db:
        user = User(email=email, hashed_password=get_password_hash(password, rounds=TEST_ROUNDS))
        db.add(user)
        db.commit()
        return user.id


@pytest.fixture
def empty_store(tmp_path):
    store = setup_test_db(tmp_path / "pharmacy.db")
    yield store
    store.dispose()


@pytest.fixture
def store(empty_store):
    seed_pharmacy(empty_store)
    return empty_store


@pytest.fixture
def identity_cache(tmp_path):
    return IdentityCache(tmp_path / "session.json")
