"""
Configuración centralizada para la migración Firestore → PostgreSQL.

ARQUITECTURA:
Dos corridas batch independientes, cada una una lista plana de pasos
"migrar colección X":
- core: rooms → allocations (usuarios, perfiles de estudiante y asignaciones)
- full: colecciones auxiliares que referencian estudiantes ya migrados

FLUJO DE MIGRACIÓN:
1. Ejecutar migradores en orden de CORE_MIGRATION_ORDER
2. Ejecutar migradores en orden de FULL_MIGRATION_ORDER
3. Las FKs se resuelven por clave natural (email, número de habitación),
   nunca arrastrando IDs de Firestore

USO DE LAS FUNCIONES HELPER:
    config = get_collection_config('payments')
    table = config['target_table']  # 'payments'

    deps = validate_migration_order('payments')
    if deps:
        print(f"Primero migrar: {deps}")
"""

import os
from pathlib import Path
from dotenv import load_dotenv

# Carga las variables del archivo .env en las variables de entorno del sistema
load_dotenv(override=True)

PROJECT_ROOT = Path(__file__).resolve().parent

# --- Configuración de Firebase (Origen) ---
# Clave de cuenta de servicio: Firebase Console → Project Settings →
# Service Accounts → Generate New Private Key
FIREBASE_SERVICE_ACCOUNT_PATH = os.getenv("FIREBASE_SERVICE_ACCOUNT_PATH") or str(
    PROJECT_ROOT / "keys" / "serviceAccountKey.json"
)

# --- Configuración de PostgreSQL (Destino) ---
# DATABASE_URL tiene prioridad sobre las variables sueltas
DATABASE_URL = os.getenv("DATABASE_URL") or ""

POSTGRES_CONFIG = {
    "dbname": os.getenv("POSTGRES_DB") or "",
    "user": os.getenv("POSTGRES_USER") or "",
    "password": os.getenv("POSTGRES_PASSWORD") or "",
    "host": os.getenv("POSTGRES_HOST") or "localhost",
    "port": os.getenv("POSTGRES_PORT") or "5432",
}

# Schema destino (las tablas viven sin prefijo en public)
POSTGRES_SCHEMA = os.getenv("POSTGRES_SCHEMA") or "public"

# --- Configuración Multi-Colección ---
# Cada colección de Firestore define:
# - target_table: Tabla destino en PostgreSQL
# - migration: 'core' o 'full' (corrida a la que pertenece)
# - depends_on: Tablas que DEBEN tener datos antes (por FKs)
# - description: Descripción de negocio de la colección

COLLECTIONS = {
    # === CORE ===
    "rooms": {
        "target_table": "rooms",
        "migration": "core",
        "depends_on": [],
        "description": "Habitaciones: capacidad, estado y credenciales WiFi (upsert)",
    },
    "allocations": {
        "target_table": "students",
        "migration": "core",
        "depends_on": [],
        "description": "Usuarios, perfiles de estudiante y asignación de habitación (doc ID = email)",
    },
    # === FULL (referencian students por email) ===
    "complaints": {
        "target_table": "complaints",
        "migration": "full",
        "depends_on": ["students"],
        "description": "Reclamos de estudiantes",
    },
    "payments": {
        "target_table": "payments",
        "migration": "full",
        "depends_on": ["students"],
        "description": "Pagos y cuotas de estudiantes",
    },
    "laundry": {
        "target_table": "laundry_requests",
        "migration": "full",
        "depends_on": ["students"],
        "description": "Pedidos de lavandería",
    },
    "leaves": {
        "target_table": "leave_requests",
        "migration": "full",
        "depends_on": ["students"],
        "description": "Solicitudes de permiso de salida",
    },
    # === FULL (datos de referencia, sin FK a students) ===
    "notices": {
        "target_table": "notices",
        "migration": "full",
        "depends_on": [],
        "description": "Avisos del hostel",
    },
    "bustimings": {
        "target_table": "bus_timings",
        "migration": "full",
        "depends_on": [],
        "description": "Horarios de bus",
    },
    "mess": {
        "target_table": "mess_schedule",
        "migration": "full",
        "depends_on": [],
        "description": "Menú del comedor (un documento → hasta 4 filas por día)",
    },
    "emergencyContacts": {
        "target_table": "emergency_contacts",
        "migration": "full",
        "depends_on": [],
        "description": "Contactos de emergencia",
    },
}

# --- Orden de Migración ---
# rooms primero para que las asignaciones encuentren la habitación completa
CORE_MIGRATION_ORDER = [
    "rooms",
    "allocations",
]

FULL_MIGRATION_ORDER = [
    "complaints",
    "payments",
    "laundry",
    "leaves",
    "notices",
    "bustimings",
    "mess",
    "emergencyContacts",
]

MIGRATION_ORDERS = {
    "core": CORE_MIGRATION_ORDER,
    "full": FULL_MIGRATION_ORDER,
}


# --- Funciones Helper ---


def get_collection_config(collection_name: str) -> dict:
    """
    Obtiene la configuración de una colección por nombre.

    Args:
        collection_name: Nombre de la colección en Firestore (ej: 'payments')

    Returns:
        dict: Configuración con keys target_table, migration, depends_on,
              description

    Raises:
        KeyError: Si la colección no está configurada
    """
    if collection_name not in COLLECTIONS:
        available = ", ".join(COLLECTIONS.keys())
        raise KeyError(
            f"Colección '{collection_name}' no está configurada.\n"
            f"Colecciones disponibles: {available}"
        )
    return COLLECTIONS[collection_name]


def validate_migration_order(collection_name: str) -> list:
    """
    Retorna las tablas que deben tener datos antes de migrar la colección.

    Ejemplo:
        >>> validate_migration_order('payments')
        ['students']
        >>> validate_migration_order('rooms')
        []
    """
    config = get_collection_config(collection_name)
    return config.get("depends_on", [])


def get_table_for_collection(collection_name: str) -> str:
    """Nombre de la tabla PostgreSQL destino de una colección."""
    return get_collection_config(collection_name)["target_table"]


def get_migration_order(migration: str) -> list:
    """
    Lista ordenada de colecciones de una corrida ('core' o 'full').

    Raises:
        KeyError: Si la corrida no existe
    """
    if migration not in MIGRATION_ORDERS:
        raise KeyError(
            f"Migración '{migration}' desconocida. "
            f"Opciones: {', '.join(MIGRATION_ORDERS)}"
        )
    return MIGRATION_ORDERS[migration]
