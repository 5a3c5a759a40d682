# dbsetup.py
"""
Script de configuración de base de datos PostgreSQL.
Crea las tablas destino de la migración desde Firestore.

ARQUITECTURA:
- users / students: 1:1 (students.user_id UNIQUE)
- rooms: room_number UNIQUE (clave natural del upsert)
- room_allocations: FK a students y rooms, UNIQUE(student_id, room_id)
- complaints, payments, laundry_requests, leave_requests: FK a students
- notices, bus_timings, mess_schedule, emergency_contacts: referencia, sin FK

CONVENCIÓN DE NAMING:
Colección Firestore       Tabla PostgreSQL
--------------------      -------------------
rooms                 →   rooms
allocations           →   users + students + room_allocations
complaints            →   complaints
payments              →   payments
laundry               →   laundry_requests
leaves                →   leave_requests
notices               →   notices
bustimings            →   bus_timings
mess                  →   mess_schedule
emergencyContacts     →   emergency_contacts

Las restricciones UNIQUE son las que sostienen los ON CONFLICT de los
migradores: sin ellas re-ejecutar la migración core duplicaría filas.
"""

import sys

import psycopg2

import config


# Orden crítico: tablas referenciadas primero
TABLES = {
    "users": """
        CREATE TABLE IF NOT EXISTS {schema}.users (
            id SERIAL PRIMARY KEY,
            email VARCHAR(255) NOT NULL UNIQUE,
            full_name VARCHAR(255) NOT NULL,
            role VARCHAR(50) NOT NULL DEFAULT 'student',
            created_at TIMESTAMPTZ DEFAULT NOW()
        )
    """,
    "students": """
        CREATE TABLE IF NOT EXISTS {schema}.students (
            id SERIAL PRIMARY KEY,
            user_id INTEGER NOT NULL UNIQUE REFERENCES {schema}.users(id),
            roll_no VARCHAR(100) UNIQUE,
            college_name VARCHAR(255),
            hostel_name VARCHAR(255),
            dob VARCHAR(50),
            phone VARCHAR(50),
            personal_email VARCHAR(255),
            address TEXT,
            father_name VARCHAR(255),
            father_phone VARCHAR(50),
            mother_name VARCHAR(255),
            mother_phone VARCHAR(50),
            blood_group VARCHAR(10),
            medical_history TEXT,
            emergency_contact_name VARCHAR(255),
            emergency_contact_phone VARCHAR(50),
            status VARCHAR(50) NOT NULL DEFAULT 'active',
            dues NUMERIC(12, 2) NOT NULL DEFAULT 0
        )
    """,
    "rooms": """
        CREATE TABLE IF NOT EXISTS {schema}.rooms (
            id SERIAL PRIMARY KEY,
            room_number VARCHAR(50) NOT NULL UNIQUE,
            capacity INTEGER NOT NULL DEFAULT 2,
            status VARCHAR(50) NOT NULL DEFAULT 'vacant',
            wifi_ssid VARCHAR(255),
            wifi_password VARCHAR(255)
        )
    """,
    "room_allocations": """
        CREATE TABLE IF NOT EXISTS {schema}.room_allocations (
            id SERIAL PRIMARY KEY,
            student_id INTEGER NOT NULL REFERENCES {schema}.students(id),
            room_id INTEGER NOT NULL REFERENCES {schema}.rooms(id),
            is_active BOOLEAN NOT NULL DEFAULT TRUE,
            allocated_at TIMESTAMPTZ DEFAULT NOW(),
            UNIQUE(student_id, room_id)
        )
    """,
    "complaints": """
        CREATE TABLE IF NOT EXISTS {schema}.complaints (
            id SERIAL PRIMARY KEY,
            student_id INTEGER NOT NULL REFERENCES {schema}.students(id),
            title VARCHAR(255) NOT NULL,
            description TEXT NOT NULL DEFAULT '',
            category VARCHAR(100) NOT NULL DEFAULT 'General',
            status VARCHAR(50) NOT NULL DEFAULT 'pending',
            admin_response TEXT,
            created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            resolved_at TIMESTAMPTZ
        )
    """,
    "payments": """
        CREATE TABLE IF NOT EXISTS {schema}.payments (
            id SERIAL PRIMARY KEY,
            student_id INTEGER NOT NULL REFERENCES {schema}.students(id),
            amount NUMERIC(12, 2) NOT NULL DEFAULT 0,
            purpose VARCHAR(255) NOT NULL DEFAULT 'Fee',
            status VARCHAR(50) NOT NULL DEFAULT 'pending',
            due_date TIMESTAMPTZ,
            paid_at TIMESTAMPTZ,
            created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
        )
    """,
    "laundry_requests": """
        CREATE TABLE IF NOT EXISTS {schema}.laundry_requests (
            id SERIAL PRIMARY KEY,
            student_id INTEGER NOT NULL REFERENCES {schema}.students(id),
            pickup_date TIMESTAMPTZ NOT NULL,
            delivery_date TIMESTAMPTZ,
            items_count INTEGER NOT NULL DEFAULT 0,
            status VARCHAR(50) NOT NULL DEFAULT 'pending',
            created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
        )
    """,
    "leave_requests": """
        CREATE TABLE IF NOT EXISTS {schema}.leave_requests (
            id SERIAL PRIMARY KEY,
            student_id INTEGER NOT NULL REFERENCES {schema}.students(id),
            start_date TIMESTAMPTZ NOT NULL,
            end_date TIMESTAMPTZ NOT NULL,
            reason TEXT NOT NULL DEFAULT '',
            status VARCHAR(50) NOT NULL DEFAULT 'pending',
            admin_response TEXT,
            created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
        )
    """,
    "notices": """
        CREATE TABLE IF NOT EXISTS {schema}.notices (
            id SERIAL PRIMARY KEY,
            title VARCHAR(255) NOT NULL,
            content TEXT NOT NULL DEFAULT '',
            category VARCHAR(100) NOT NULL DEFAULT 'General',
            priority VARCHAR(20) NOT NULL DEFAULT 'normal',
            created_at TIMESTAMPTZ NOT NULL DEFAULT NOW()
        )
    """,
    "bus_timings": """
        CREATE TABLE IF NOT EXISTS {schema}.bus_timings (
            id SERIAL PRIMARY KEY,
            route_name VARCHAR(255) NOT NULL,
            departure_time VARCHAR(20) NOT NULL,
            destination VARCHAR(255) NOT NULL DEFAULT ''
        )
    """,
    "mess_schedule": """
        CREATE TABLE IF NOT EXISTS {schema}.mess_schedule (
            id SERIAL PRIMARY KEY,
            day_of_week SMALLINT NOT NULL CHECK (day_of_week BETWEEN 0 AND 6),
            meal_type VARCHAR(20) NOT NULL,
            menu TEXT NOT NULL
        )
    """,
    "emergency_contacts": """
        CREATE TABLE IF NOT EXISTS {schema}.emergency_contacts (
            id SERIAL PRIMARY KEY,
            name VARCHAR(255),
            designation VARCHAR(255) NOT NULL DEFAULT 'Staff',
            phone VARCHAR(50) NOT NULL,
            category VARCHAR(100) NOT NULL DEFAULT 'General'
        )
    """,
}

INDEXES = [
    "CREATE INDEX IF NOT EXISTS idx_room_allocations_room ON {schema}.room_allocations(room_id)",
    "CREATE INDEX IF NOT EXISTS idx_complaints_student ON {schema}.complaints(student_id)",
    "CREATE INDEX IF NOT EXISTS idx_payments_student ON {schema}.payments(student_id)",
    "CREATE INDEX IF NOT EXISTS idx_laundry_student ON {schema}.laundry_requests(student_id)",
    "CREATE INDEX IF NOT EXISTS idx_leaves_student ON {schema}.leave_requests(student_id)",
]


def create_connection():
    """Establece conexión con PostgreSQL."""
    try:
        if config.DATABASE_URL:
            return psycopg2.connect(config.DATABASE_URL)
        return psycopg2.connect(**config.POSTGRES_CONFIG)
    except psycopg2.OperationalError as e:
        print(f"❌ Error conectando a PostgreSQL: {e}")
        return None


def setup_tables(cursor, schema=None):
    """
    Crea schema, tablas e índices (idempotente: IF NOT EXISTS).

    Returns:
        int: Cantidad de tablas procesadas
    """
    schema = schema or config.POSTGRES_SCHEMA
    cursor.execute(f"CREATE SCHEMA IF NOT EXISTS {schema}")

    for table_name, ddl in TABLES.items():
        print(f"   🔧 {schema}.{table_name}")
        cursor.execute(ddl.format(schema=schema))

    for ddl in INDEXES:
        cursor.execute(ddl.format(schema=schema))

    return len(TABLES)


def main():
    """Punto de entrada principal."""
    print("=" * 80)
    print("🚀 CONFIGURACIÓN DE BASE DE DATOS PostgreSQL")
    print("=" * 80)

    conn = create_connection()
    if not conn:
        print("\n❌ No se pudo conectar a la base de datos")
        sys.exit(1)

    cursor = conn.cursor()

    try:
        print("\n🔨 Creando estructura de base de datos...")
        count = setup_tables(cursor)
        conn.commit()

        print("\n" + "=" * 80)
        print(f"✅ Base de datos configurada correctamente ({count} tablas, {len(INDEXES)} índices)")
        print("=" * 80)

    except Exception as e:
        conn.rollback()
        print(f"\n❌ Error durante la configuración: {e}")
        import traceback
        traceback.print_exc()
        sys.exit(1)
    finally:
        cursor.close()
        conn.close()


if __name__ == '__main__':
    main()
