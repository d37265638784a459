from pharmadash.models.user import User
from pharmadash.models.medication import Medication
from pharmadash.models.inventory import InventoryItem
from pharmadash.models.prescription import Prescription, PrescriptionItem
from pharmadash.models.supplier import Supplier
from pharmadash.models.purchase_order import PurchaseOrder, PurchaseOrderItem

__all__ = [
    "User",
    "Medication",
    "InventoryItem",
    "Prescription",
    "PrescriptionItem",
    "Supplier",
    "PurchaseOrder",
    "PurchaseOrderItem",
]
