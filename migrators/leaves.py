"""
Migrador para la colección 'leaves' → tabla leave_requests.

start_date y end_date son obligatorias en destino: sin dato → now.
"""

from .base import StudentLinkedMigrator
from .mapping import FieldMapping, NOW


FIELD_MAP = (
    FieldMapping("start_date", ("startDate",), NOW, kind="timestamp"),
    FieldMapping("end_date", ("endDate",), NOW, kind="timestamp"),
    FieldMapping("reason", ("reason",), ""),
    FieldMapping("status", ("status",), "pending"),
    FieldMapping("admin_response", ("adminComment", "adminResponse"), None),
    FieldMapping("created_at", ("appliedAt", "createdAt"), NOW, kind="timestamp"),
)


class LeavesMigrator(StudentLinkedMigrator):
    collection_name = "leaves"
    target_table = "leave_requests"
    FIELD_MAP = FIELD_MAP
    STUDENT_EMAIL_KEYS = ("email", "studentEmail")
