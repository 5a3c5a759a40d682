"""Migrador para la colección 'laundry' → tabla laundry_requests."""

from .base import StudentLinkedMigrator
from .mapping import FieldMapping, NOW


FIELD_MAP = (
    FieldMapping("pickup_date", ("pickupDate",), NOW, kind="timestamp"),
    FieldMapping("delivery_date", ("deliveryDate",), None, kind="timestamp"),
    FieldMapping("items_count", ("clothesCount", "itemsCount"), 0),
    FieldMapping("status", ("status",), "pending"),
    FieldMapping("created_at", ("date", "createdAt"), NOW, kind="timestamp"),
)


class LaundryMigrator(StudentLinkedMigrator):
    collection_name = "laundry"
    target_table = "laundry_requests"
    FIELD_MAP = FIELD_MAP
    STUDENT_EMAIL_KEYS = ("email", "studentEmail")
