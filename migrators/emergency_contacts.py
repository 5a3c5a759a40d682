"""Migrador para la colección 'emergencyContacts' → tabla emergency_contacts."""

from .base import MappedMigrator
from .mapping import FieldMapping


FIELD_MAP = (
    FieldMapping("name", ("name",), None),
    FieldMapping("designation", ("role", "designation"), "Staff"),
    # phone es NOT NULL en destino
    FieldMapping("phone", ("phone",), "0000000000", kind="text"),
    FieldMapping("category", ("type", "category"), "General"),
)


class EmergencyContactsMigrator(MappedMigrator):
    collection_name = "emergencyContacts"
    target_table = "emergency_contacts"
    FIELD_MAP = FIELD_MAP
