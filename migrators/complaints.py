"""
Migrador para la colección 'complaints' → tabla complaints.

Cada reclamo referencia al estudiante por studentEmail. Si el email no
resuelve a un estudiante migrado, el documento se omite.

DECISIONES DE DISEÑO:
- Siempre INSERT (sin guarda de duplicados): re-ejecutar duplica filas
- created_at sin dato → instante de inserción
- resolved_at sin dato → NULL (reclamo abierto)
"""

from .base import StudentLinkedMigrator
from .mapping import FieldMapping, NOW


FIELD_MAP = (
    FieldMapping("title", ("title",), "Complaint"),
    FieldMapping("description", ("description",), ""),
    FieldMapping("category", ("category",), "General"),
    FieldMapping("status", ("status",), "pending"),
    FieldMapping("admin_response", ("adminReply", "adminResponse"), None),
    FieldMapping("created_at", ("timestamp", "createdAt"), NOW, kind="timestamp"),
    FieldMapping("resolved_at", ("resolvedAt",), None, kind="timestamp"),
)


class ComplaintsMigrator(StudentLinkedMigrator):
    collection_name = "complaints"
    target_table = "complaints"
    FIELD_MAP = FIELD_MAP
    STUDENT_EMAIL_KEYS = ("studentEmail", "email")
