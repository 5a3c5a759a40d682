r"""
Infraestructura de migración Firestore → PostgreSQL.

Arquitectura con carga dinámica de migradores:
- firemigra.py: Infraestructura genérica (conexiones, transacciones, progreso)
- migrators/*.py: Lógica específica por colección (implementan BaseMigrator)
- config.py: Configuración centralizada de colecciones y orden de corrida

Flujo de ejecución:
1. Cargar clave de cuenta de servicio (aborta si no se puede leer)
2. Conectar a Firestore y PostgreSQL
3. Para cada colección de la corrida (core o full), en orden:
   a. Advertir si las tablas de las que depende están vacías
   b. Leer la colección completa de Firestore
   c. Migrar documento por documento, cada uno en su propia transacción
   d. Reportar procesados / filas escritas / omitidos

Errores:
- Cualquier error de lectura/escritura aborta la corrida completa (exit 1)
- Una referencia que no resuelve NO es error: el documento se omite

Uso:
    python migrate_core.py
    python migrate_full.py
"""

import importlib
import json
import re
import sys
import traceback

import firebase_admin
import psycopg2
from firebase_admin import credentials, firestore
from psycopg2 import OperationalError

import config
from migrators.base import BaseMigrator


def _force_utf8():
    """Forzar UTF-8 en stdout/stderr para emojis en Windows."""
    for stream in (sys.stdout, sys.stderr):
        if hasattr(stream, "reconfigure"):
            stream.reconfigure(encoding="utf-8")


def load_service_account(path):
    """
    Lee y parsea la clave JSON de la cuenta de servicio de Firebase.

    Raises:
        SystemExit: Si el archivo no existe o no es JSON válido
    """
    print(f"🔑 Leyendo clave de cuenta de servicio: {path}")
    try:
        with open(path, encoding="utf-8") as fh:
            return json.load(fh)
    except (OSError, ValueError) as e:
        print(f"❌ Error leyendo la clave de cuenta de servicio", file=sys.stderr)
        print(f"   Detalle: {e}", file=sys.stderr)
        sys.exit(1)


def connect_to_firestore(service_account_path=None):
    """
    Inicializa firebase_admin (una sola vez) y retorna el cliente Firestore.
    """
    service_account = load_service_account(
        service_account_path or config.FIREBASE_SERVICE_ACCOUNT_PATH
    )
    print("🔌 Conectando a Firestore...")
    try:
        firebase_admin.get_app()
    except ValueError:
        firebase_admin.initialize_app(credentials.Certificate(service_account))
    db = firestore.client()
    print("✅ Cliente de Firestore listo")
    return db


def connect_to_postgres():
    """
    Establece conexión a PostgreSQL usando credenciales de config.py.

    Returns:
        tuple: (conexión, cursor) de psycopg2

    Raises:
        SystemExit: Si no puede conectar
    """
    try:
        print("🔌 Conectando a PostgreSQL...")
        if config.DATABASE_URL:
            conn = psycopg2.connect(config.DATABASE_URL)
        else:
            conn = psycopg2.connect(**config.POSTGRES_CONFIG)
        cursor = conn.cursor()
        print("✅ Conexión a PostgreSQL exitosa")
        return conn, cursor
    except OperationalError as e:
        print(f"❌ Error de conexión a PostgreSQL", file=sys.stderr)
        print(f"   Detalle: {e}", file=sys.stderr)
        sys.exit(1)


def fetch_collection(fs_db, collection_name):
    """
    Lee la colección completa (orden de Firestore).

    Returns:
        list: Documentos como dict, con el ID del documento en '_id'
    """
    snapshots = fs_db.collection(collection_name).get()
    docs = []
    for snapshot in snapshots:
        doc = dict(snapshot.to_dict() or {})
        doc["_id"] = snapshot.id
        docs.append(doc)
    return docs


def migrator_names_for(collection_name):
    """
    Convención de nombres:
        rooms → migrators.rooms → RoomsMigrator
        emergencyContacts → migrators.emergency_contacts → EmergencyContactsMigrator

    Returns:
        tuple: (nombre de módulo, nombre de clase)
    """
    module_name = re.sub(r"(?<!^)(?=[A-Z])", "_", collection_name).lower()
    class_name = (
        "".join(word.capitalize() for word in module_name.split("_")) + "Migrator"
    )
    return module_name, class_name


def load_migrator_for_collection(collection_name, schema=None):
    """
    Carga dinámicamente el migrador correspondiente a una colección.

    Returns:
        BaseMigrator: Instancia del migrador específico

    Raises:
        SystemExit: Si no existe el módulo o la clase
    """
    config.get_collection_config(collection_name)
    module_name, class_name = migrator_names_for(collection_name)

    try:
        module = importlib.import_module(f"migrators.{module_name}")
        migrator_class = getattr(module, class_name)
    except ModuleNotFoundError:
        print(f"❌ No existe migrador para '{collection_name}'", file=sys.stderr)
        print(f"   Se esperaba: migrators/{module_name}.py", file=sys.stderr)
        sys.exit(1)
    except AttributeError:
        print(
            f"❌ El módulo migrators.{module_name} no tiene la clase '{class_name}'",
            file=sys.stderr,
        )
        sys.exit(1)

    if not issubclass(migrator_class, BaseMigrator):
        print(f"❌ {class_name} no hereda de BaseMigrator", file=sys.stderr)
        sys.exit(1)

    return migrator_class(schema=schema or config.POSTGRES_SCHEMA)


def validate_dependencies(collection_name, pg_cursor, schema=None):
    """
    Advierte (sin interrumpir) si las tablas requeridas están vacías.

    Correr la migración full contra students vacía es válido: simplemente
    todos los documentos con FK a students se omiten.

    Returns:
        list: Tablas requeridas que están vacías
    """
    schema = schema or config.POSTGRES_SCHEMA
    empty = []
    for table in config.validate_migration_order(collection_name):
        pg_cursor.execute(f"SELECT COUNT(*) FROM {schema}.{table}")
        count = pg_cursor.fetchone()[0]
        if count == 0:
            empty.append(table)
            print(f"   ⚠️  {schema}.{table} está vacía: los documentos se omitirán")
    return empty


def migrate_collection(fs_db, pg_conn, pg_cursor, collection_name, migrator=None):
    """
    Migra una colección documento por documento.

    Cada documento corre en su propia transacción (with pg_conn: commit si
    termina bien, rollback si lanza). Las excepciones NO se capturan.

    Returns:
        dict: {'processed': int, 'written': int, 'skipped': int}
    """
    collection_config = config.get_collection_config(collection_name)
    print(f"\n🚚 Migrando colección '{collection_name}'...")
    print(f"   └─ {collection_config['description']}")

    migrator = migrator or load_migrator_for_collection(collection_name)
    validate_dependencies(collection_name, pg_cursor, migrator.schema)

    docs = fetch_collection(fs_db, collection_name)
    print(f"   📊 Documentos en origen: {len(docs):,}")
    target_table = config.get_table_for_collection(collection_name)
    print(f"   🎯 Tabla destino: {migrator.table(target_table)}")

    stats = {"processed": 0, "written": 0, "skipped": 0}
    caches = {}

    for doc in docs:
        stats["processed"] += 1
        with pg_conn:
            written = migrator.migrate_document(doc, pg_cursor, caches)
        stats["written"] += written
        if written == 0:
            stats["skipped"] += 1

    print(
        f"✅ {collection_name}: {stats['processed']:,} documentos procesados, "
        f"{stats['written']:,} filas escritas, {stats['skipped']:,} omitidos"
    )
    return stats


def run_migration(fs_db, pg_conn, pg_cursor, migration):
    """
    Ejecuta todos los pasos de una corrida ('core' o 'full') en orden.

    Returns:
        dict: {collection_name: stats}
    """
    results = {}
    for collection_name in config.get_migration_order(migration):
        results[collection_name] = migrate_collection(
            fs_db, pg_conn, pg_cursor, collection_name
        )
    return results


def print_summary(results):
    print("\n📊 RESUMEN")
    for collection_name, stats in results.items():
        print(
            f"   • {collection_name}: {stats['processed']:,} procesados | "
            f"{stats['written']:,} escritas | {stats['skipped']:,} omitidos"
        )


def main(migration):
    """
    Punto de entrada de una corrida completa.

    Exit Codes:
        0: Éxito
        1: Error de credenciales, conexión o migración
    """
    _force_utf8()
    title = "CORE" if migration == "core" else "FULL"
    print("=" * 70)
    print(f"🚀 MIGRACIÓN {title} FIRESTORE → POSTGRESQL")
    print("=" * 70)

    fs_db = connect_to_firestore()
    pg_conn, pg_cursor = connect_to_postgres()

    try:
        results = run_migration(fs_db, pg_conn, pg_cursor, migration)
        print_summary(results)

        print("\n" + "=" * 70)
        print(f"✅ MIGRACIÓN {title} COMPLETADA EXITOSAMENTE")
        print("=" * 70)

    except Exception as e:
        print(f"\n❌ Error durante la migración: {e}", file=sys.stderr)
        traceback.print_exc()
        pg_conn.rollback()
        sys.exit(1)

    finally:
        print("\n🔒 Cerrando conexiones...")
        pg_cursor.close()
        pg_conn.close()
        print("✅ Conexiones cerradas correctamente")

    sys.exit(0)


def main_core():
    main("core")


def main_full():
    main("full")
