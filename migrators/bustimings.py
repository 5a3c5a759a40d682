"""Migrador para la colección 'bustimings' → tabla bus_timings."""

from .base import MappedMigrator
from .mapping import FieldMapping


FIELD_MAP = (
    FieldMapping("route_name", ("route", "routeName"), "Route"),
    # Hora como string ('08:30'), se conserva el formato de origen
    FieldMapping("departure_time", ("time", "departureTime"), "00:00", kind="text"),
    FieldMapping("destination", ("destination",), ""),
)


class BustimingsMigrator(MappedMigrator):
    collection_name = "bustimings"
    target_table = "bus_timings"
    FIELD_MAP = FIELD_MAP
