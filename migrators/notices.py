"""
Migrador para la colección 'notices' → tabla notices.

Datos de referencia: sin FK a students. La prioridad no existe en Firebase,
todas las filas quedan con 'normal'.
"""

from .base import MappedMigrator
from .mapping import FieldMapping, NOW


FIELD_MAP = (
    FieldMapping("title", ("title",), "Notice"),
    FieldMapping("content", ("content",), ""),
    FieldMapping("category", ("type", "category"), "General"),
    # Sin source_keys: constante
    FieldMapping("priority", (), "normal"),
    FieldMapping("created_at", ("date", "createdAt"), NOW, kind="timestamp"),
)


class NoticesMigrator(MappedMigrator):
    collection_name = "notices"
    target_table = "notices"
    FIELD_MAP = FIELD_MAP
