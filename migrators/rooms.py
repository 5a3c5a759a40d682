"""
Migrador para la colección 'rooms' → tabla rooms.

RESPONSABILIDAD:
Metadatos de habitaciones. El ID del documento ES el número de habitación.

DECISIONES DE DISEÑO:
- UPSERT (DO UPDATE) por room_number: re-ejecutar sobrescribe capacity,
  status y WiFi con los valores de la última corrida (last write wins)
- Corre ANTES de allocations: las asignaciones encuentran la habitación
  completa en vez de crear una mínima

Uso (desde firemigra.py):
    migrator = RoomsMigrator(schema='public')
    written = migrator.migrate_document(doc, cursor, caches)
"""

from .base import MappedMigrator
from .mapping import FieldMapping


FIELD_MAP = (
    FieldMapping("capacity", ("capacity",), 2),
    FieldMapping("status", ("status",), "vacant"),
    FieldMapping("wifi_ssid", ("wifiSSID", "wifiSsid"), None, kind="text"),
    FieldMapping("wifi_password", ("wifiPassword",), None, kind="text"),
)


class RoomsMigrator(MappedMigrator):
    collection_name = "rooms"
    target_table = "rooms"
    FIELD_MAP = FIELD_MAP
    SHARED_COLUMNS = ("room_number",)

    def extract_shared_entities(self, doc, cursor, caches):
        return {"room_number": self.get_primary_key_from_doc(doc)}

    def insert_batches(self, batches, cursor, caches=None):
        if not batches["main"]:
            return 0
        updates = ", ".join(
            f"{column} = EXCLUDED.{column}" for column, *_ in self.FIELD_MAP
        )
        return self._insert_rows(
            cursor,
            self.table(),
            self.columns(),
            batches["main"],
            suffix=f" ON CONFLICT (room_number) DO UPDATE SET {updates}",
        )
