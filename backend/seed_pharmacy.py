"""Seed the pharmacy database with demo medications, stock, prescriptions and orders."""
import random
from datetime import date, datetime, timedelta
from decimal import Decimal

from pharmadash.core.config import settings
from pharmadash.db.init_db import init_db
from pharmadash.db.store import PharmacyStore
from pharmadash.models import (
    InventoryItem,
    Medication,
    Prescription,
    PrescriptionItem,
    PurchaseOrder,
    PurchaseOrderItem,
    Supplier,
)

MEDICATIONS = [
    # name, generic, manufacturer, dosage, formulation, price, stock, reorder
    ("Amoxil", "Amoxicillin", "GSK", "500mg", "Capsule", "0.45", 40, 50),
    ("Lipitor", "Atorvastatin", "Pfizer", "20mg", "Tablet", "1.20", 220, 80),
    ("Glucophage", "Metformin", "Merck", "850mg", "Tablet", "0.30", 35, 60),
    ("Ventolin", "Salbutamol", "GSK", "100mcg", "Inhaler", "6.50", 90, 30),
    ("Zestril", "Lisinopril", "AstraZeneca", "10mg", "Tablet", "0.55", 150, 70),
    ("Nexium", "Esomeprazole", "AstraZeneca", "40mg", "Capsule", "1.80", 18, 25),
    ("Panadol", "Paracetamol", "Haleon", "500mg", "Tablet", "0.10", 600, 200),
    ("Zyrtec", "Cetirizine", "UCB", "10mg", "Tablet", "0.25", 120, 40),
]

SUPPLIERS = [
    ("MedLine Distribution", "Sarah Okafor", "+1-555-0101", "orders@medline.example"),
    ("PharmaSource Ltd", "Daniel Reyes", "+1-555-0102", "sales@pharmasource.example"),
    ("CarePoint Wholesale", "Amina Yusuf", "+1-555-0103", "supply@carepoint.example"),
]


def seed_pharmacy():
    store = PharmacyStore.from_url(settings.DATABASE_URL)
    init_db(store)
    rng = random.Random(42)
    now = datetime.now()

    with store.session("seed") as db:
        if db.query(Medication).count() > 0:
            print("Database already seeded, nothing to do.")
            return

        medications = []
        for name, generic, maker, dosage, form, price, stock, reorder in MEDICATIONS:
            med = Medication(
                medication_name=name,
                generic_name=generic,
                manufacturer=maker,
                dosage=dosage,
                formulation=form,
                price_per_unit=Decimal(price),
            )
            db.add(med)
            db.flush()
            medications.append(med)
            db.add(InventoryItem(
                medication_id=med.medication_id,
                batch_number=f"B{med.medication_id:04d}",
                expiry_date=date.today() + timedelta(days=rng.randint(90, 720)),
                quantity_in_stock=stock,
                reorder_level=reorder,
                last_updated=now - timedelta(hours=rng.randint(1, 96)),
            ))

        suppliers = [
            Supplier(supplier_name=n, contact_person=c, phone_number=p, email=e)
            for n, c, p, e in SUPPLIERS
        ]
        db.add_all(suppliers)
        db.flush()

        # Eight months of prescriptions, a handful dated today
        for day_offset in range(0, 240, 3):
            prescribed = now - timedelta(days=day_offset, hours=rng.randint(0, 8))
            rx = Prescription(
                patient_id=rng.randint(1000, 1200),
                physician_id=rng.randint(1, 12),
                date_prescribed=prescribed,
                status="dispensed" if day_offset else "pending",
            )
            db.add(rx)
            db.flush()
            for med in rng.sample(medications, k=rng.randint(1, 3)):
                qty = rng.randint(10, 60)
                db.add(PrescriptionItem(
                    prescription_id=rx.prescription_id,
                    medication_id=med.medication_id,
                    quantity_dispensed=f"{qty} units",
                    dosage_instructions="As directed",
                    cost=med.price_per_unit * qty,
                ))

        for i in range(12):
            ordered = now - timedelta(days=i * 14)
            po = PurchaseOrder(
                supplier_id=suppliers[i % len(suppliers)].supplier_id,
                order_date=ordered,
                delivery_date=ordered + timedelta(days=5) if i else None,
                status="delivered" if i else "ordered",
            )
            db.add(po)
            db.flush()
            for med in rng.sample(medications, k=2):
                db.add(PurchaseOrderItem(
                    purchase_order_id=po.purchase_order_id,
                    medication_id=med.medication_id,
                    quantity_ordered=rng.choice([100, 200, 500]),
                    cost_per_unit=med.price_per_unit * Decimal("0.6"),
                ))

        db.commit()

    print(f"Seeded {len(MEDICATIONS)} medications, {len(SUPPLIERS)} suppliers, prescriptions and purchase orders.")
    store.dispose()


if __name__ == "__main__":
    seed_pharmacy()
