"""
Migrador para la colección 'allocations' → users, students, room_allocations.

RESPONSABILIDAD:
Colección principal de estudiantes en Firebase. El ID del documento es el
email del estudiante. Un documento produce:
- 1 fila en users (get-or-create por email)
- 1 fila en students (1:1 con users)
- 0..1 fila en room_allocations (si el documento trae 'room')

DECISIONES DE DISEÑO:
- Users: SELECT por email, INSERT solo si no existe (full_name 'Unknown',
  role 'student' por defecto). Re-ejecutar no duplica usuarios
- Students: INSERT ... ON CONFLICT DO NOTHING. Un roll_no (o user_id) ya
  migrado se omite sin error y sin sobrescribir
- Rooms: si la habitación no vino en la colección 'rooms' se crea con datos
  mínimos (room_number, status 'occupied')
- Allocations: solo si habitación Y estudiante resuelven; ON CONFLICT DO
  NOTHING sobre (student_id, room_id)
- Todo el documento corre en una transacción (ver firemigra.py)
- Filas escritas = users y rooms creados + students + room_allocations
  insertados: un documento que solo crea su usuario no cuenta como omitido

Uso (desde firemigra.py):
    migrator = AllocationsMigrator(schema='public')
    written = migrator.migrate_document(doc, cursor, caches)
"""

from .base import BaseMigrator
from .mapping import FieldMapping, columns_of, map_fields


STUDENT_FIELD_MAP = (
    FieldMapping("roll_no", ("rollNo", "rollno", "roll_no"), None, kind="text"),
    FieldMapping("college_name", ("collegeName",), None),
    FieldMapping("hostel_name", ("hostelName",), None),
    FieldMapping("dob", ("dob",), None, kind="text"),
    FieldMapping("phone", ("phone",), None, kind="text"),
    FieldMapping("personal_email", ("personalEmail",), None),
    FieldMapping("address", ("address",), None),
    FieldMapping("father_name", ("fatherName",), None),
    FieldMapping("father_phone", ("fatherPhone",), None, kind="text"),
    FieldMapping("mother_name", ("motherName",), None),
    FieldMapping("mother_phone", ("motherPhone",), None, kind="text"),
    FieldMapping("blood_group", ("bloodGroup",), None),
    FieldMapping("medical_history", ("medicalHistory",), None),
    FieldMapping("emergency_contact_name", ("emergencyContactName",), None),
    FieldMapping("emergency_contact_phone", ("emergencyContactPhone",), None, kind="text"),
    FieldMapping("status", ("status",), "active"),
    FieldMapping("dues", ("dues",), 0),
)

DEFAULT_FULL_NAME = "Unknown"
DEFAULT_ROLE = "student"
NEW_ROOM_STATUS = "occupied"


class AllocationsMigrator(BaseMigrator):
    """
    Migrador de usuarios + perfiles de estudiante + asignaciones.

    Tablas destino:
    - {schema}.users
    - {schema}.students
    - {schema}.rooms (solo creación mínima)
    - {schema}.room_allocations
    """

    collection_name = "allocations"
    target_table = "students"

    # =========================================================================
    # MÉTODOS PÚBLICOS (INTERFAZ REQUERIDA)
    # =========================================================================

    def extract_shared_entities(self, doc, cursor, caches):
        """
        Get-or-create del usuario (y de la habitación si el doc la trae).

        Nunca retorna None: todo documento de allocations produce al menos
        el usuario.
        """
        email = self.get_primary_key_from_doc(doc)
        user_id, user_created = self._get_or_create_user(
            cursor, email, doc.get("name") or DEFAULT_FULL_NAME
        )

        room_number = doc.get("room")
        room_id, room_created = None, False
        if room_number:
            room_id, room_created = self._get_or_create_room(cursor, str(room_number))

        # Filas creadas aquí, sumadas por insert_batches() del mismo documento
        caches["created_rows"] = int(user_created) + int(room_created)
        return {"user_id": user_id, "room_id": room_id}

    def extract_data(self, doc, shared_entities):
        student = (shared_entities["user_id"],) + map_fields(
            doc, STUDENT_FIELD_MAP, self.now()
        )
        allocations = []
        if shared_entities["room_id"] is not None:
            # student_id se resuelve recién después del INSERT de students
            allocations.append((shared_entities["user_id"], shared_entities["room_id"]))
        return {"main": [student], "related": {"room_allocations": allocations}}

    def insert_batches(self, batches, cursor, caches=None):
        written = caches.pop("created_rows", 0) if caches else 0
        if batches["main"]:
            written += self._insert_rows(
                cursor,
                self.table("students"),
                ["user_id"] + columns_of(STUDENT_FIELD_MAP),
                batches["main"],
                suffix=" ON CONFLICT DO NOTHING",
            )

        for user_id, room_id in batches["related"].get("room_allocations", []):
            written += self._allocate_room(cursor, user_id, room_id)
        return written

    def initialize_batches(self):
        return {"main": [], "related": {"room_allocations": []}}

    # =========================================================================
    # MÉTODOS PRIVADOS
    # =========================================================================

    def _get_or_create_user(self, cursor, email, full_name):
        cursor.execute(
            f"SELECT id FROM {self.table('users')} WHERE email = %s", (email,)
        )
        row = cursor.fetchone()
        if row:
            return row[0], False

        cursor.execute(
            f"INSERT INTO {self.table('users')} (email, full_name, role) "
            f"VALUES (%s, %s, %s) RETURNING id",
            (email, full_name, DEFAULT_ROLE),
        )
        return cursor.fetchone()[0], True

    def _get_or_create_room(self, cursor, room_number):
        cursor.execute(
            f"SELECT id FROM {self.table('rooms')} WHERE room_number = %s",
            (room_number,),
        )
        row = cursor.fetchone()
        if row:
            return row[0], False

        cursor.execute(
            f"INSERT INTO {self.table('rooms')} (room_number, status) "
            f"VALUES (%s, %s) RETURNING id",
            (room_number, NEW_ROOM_STATUS),
        )
        return cursor.fetchone()[0], True

    def _allocate_room(self, cursor, user_id, room_id):
        """
        Inserta la asignación activa si el estudiante existe.

        El perfil puede no existir para este usuario cuando su roll_no ya
        pertenecía a otro estudiante (INSERT omitido): sin estudiante no
        hay asignación, y tampoco error.
        """
        cursor.execute(
            f"SELECT id FROM {self.table('students')} WHERE user_id = %s", (user_id,)
        )
        row = cursor.fetchone()
        if not row:
            return 0

        return self._insert_rows(
            cursor,
            self.table("room_allocations"),
            ["student_id", "room_id", "is_active"],
            [(row[0], room_id, True)],
            suffix=" ON CONFLICT DO NOTHING",
        )
