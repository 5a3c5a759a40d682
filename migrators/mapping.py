"""
Tablas de mapeo campo Firestore → columna PostgreSQL.

Los documentos de origen son heterogéneos (mayúsculas mezcladas, sinónimos
entre colecciones). Cada migrador declara una tupla de FieldMapping en vez de
lookups condicionales sueltos, así el mapeo se puede auditar y testear
de forma aislada.

Semántica de valores por defecto:
- Se toma la PRIMERA source_key con valor truthy (mismo criterio que el
  script de Firebase con `||`: 0, "" y None caen al default)
- NOW como default se resuelve al instante de inserción
- kind='timestamp' convierte Timestamp de Firestore / ISO string / dict
  exportado a datetime
- kind='text' convierte a string lo que no lo es (ej: dob, teléfonos
  numéricos); los strings pasan sin tocar

Ejemplo:
    FIELD_MAP = (
        FieldMapping('amount', ('amount',), 0),
        FieldMapping('created_at', ('createdAt',), NOW, kind='timestamp'),
    )
    row = map_fields(doc, FIELD_MAP, now=datetime.now(timezone.utc))
"""

from collections import namedtuple
from datetime import datetime, date, timezone


class _Now:
    """Sentinel: default resuelto al instante de inserción."""

    def __repr__(self):
        return "NOW"


NOW = _Now()

FieldMapping = namedtuple("FieldMapping", ["column", "source_keys", "default", "kind"])
FieldMapping.__new__.__defaults__ = ("value",)

KINDS = ("value", "timestamp", "text")


def columns_of(field_map):
    """Nombres de columna en el orden de la tabla de mapeo."""
    return [mapping.column for mapping in field_map]


def map_fields(doc: dict, field_map, now: datetime) -> tuple:
    """
    Convierte un documento en una tupla de valores en el orden de field_map.

    Args:
        doc: Documento de Firestore (dict con '_id')
        field_map: Tupla de FieldMapping
        now: Instante usado para los defaults NOW

    Returns:
        tuple: Valores listos para los placeholders del INSERT
    """
    return tuple(map_field(doc, mapping, now) for mapping in field_map)


def map_field(doc: dict, mapping: FieldMapping, now: datetime):
    for key in mapping.source_keys:
        value = _convert(doc.get(key), mapping.kind)
        if value:
            return value
    if mapping.default is NOW:
        return now
    return mapping.default


def _convert(value, kind):
    if not value:
        return None
    if kind == "timestamp":
        return extract_timestamp(value)
    if kind == "text":
        return extract_text(value)
    return value


def extract_timestamp(value):
    """
    Normaliza valores temporales de Firestore a datetime.

    Acepta:
    - DatetimeWithNanoseconds (subclase de datetime) del SDK
    - date sin hora
    - dict exportado {'_seconds': ..} / {'seconds': ..}
    - string ISO 8601 (con o sin 'Z')
    - epoch en milisegundos (int/float)

    Retorna None si no se puede interpretar.
    """
    if not value:
        return None
    try:
        if isinstance(value, datetime):
            return value
        if isinstance(value, date):
            return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)
        if isinstance(value, dict):
            seconds = value.get("_seconds", value.get("seconds"))
            if seconds is None:
                return None
            nanos = value.get("_nanoseconds", value.get("nanoseconds")) or 0
            return datetime.fromtimestamp(seconds + nanos / 1e9, tz=timezone.utc)
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
        if isinstance(value, str):
            text = value.strip()
            if text.endswith("Z"):
                text = text[:-1] + "+00:00"
            return datetime.fromisoformat(text)
    except (ValueError, TypeError, OverflowError, OSError):
        return None
    return None


def extract_text(value):
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, str):
        return value
    return str(value)
