"""
Migrador para la colección 'payments' → tabla payments.

Ejemplo:
    {studentEmail: 'a@x.com', amount: 500}
    → (student_id, 500, 'Fee', 'pending', NULL, NULL, now)
"""

from .base import StudentLinkedMigrator
from .mapping import FieldMapping, NOW


FIELD_MAP = (
    FieldMapping("amount", ("amount",), 0),
    # En Firebase el propósito se guardaba como 'type'
    FieldMapping("purpose", ("type", "purpose"), "Fee"),
    FieldMapping("status", ("status",), "pending"),
    FieldMapping("due_date", ("dueDate",), None, kind="timestamp"),
    FieldMapping("paid_at", ("paidAt",), None, kind="timestamp"),
    FieldMapping("created_at", ("createdAt",), NOW, kind="timestamp"),
)


class PaymentsMigrator(StudentLinkedMigrator):
    collection_name = "payments"
    target_table = "payments"
    FIELD_MAP = FIELD_MAP
    STUDENT_EMAIL_KEYS = ("studentEmail", "email")
