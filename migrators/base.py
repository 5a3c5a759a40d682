"""
Módulo base para migradores de colecciones Firestore → PostgreSQL.

Define la interfaz común (contrato) que todos los migradores específicos
deben implementar. Esto permite que firemigra.py funcione con cualquier
migrador sin conocer sus detalles internos.

Patrón de diseño: Strategy Pattern
- firemigra.py = Contexto (orquestador)
- BaseMigrator = Estrategia abstracta
- RoomsMigrator, PaymentsMigrator, ... = Estrategias concretas

Flujo de uso (por documento, dentro de una transacción):
1. extract_shared_entities() resuelve FKs por clave natural
   (None = documento omitido, no es error)
2. extract_data() convierte el documento en filas
3. initialize_batches() + acumulación
4. insert_batches() ejecuta los INSERTs y retorna filas escritas

Ejemplo de implementación:
    class MiMigrador(BaseMigrator):
        collection_name = 'complaints'
        target_table = 'complaints'

        def extract_shared_entities(self, doc, cursor, caches):
            student_id = get_student_id_by_email(cursor, doc.get('studentEmail'))
            return {'student_id': student_id} if student_id else None

        # ... implementar resto de métodos abstractos
"""

from abc import ABC, abstractmethod
from datetime import datetime, timezone

from psycopg2.extras import execute_values

from .mapping import columns_of, map_fields


def get_student_id_by_email(cursor, email, schema="public"):
    """
    Resuelve el id interno de students a partir del email del usuario.

    Un email vacío o inexistente es un lookup fallido, NO un error.

    Returns:
        int | None
    """
    if not email:
        return None
    cursor.execute(
        f"SELECT s.id FROM {schema}.students s "
        f"JOIN {schema}.users u ON s.user_id = u.id WHERE u.email = %s",
        (email,),
    )
    row = cursor.fetchone()
    return row[0] if row else None


class BaseMigrator(ABC):
    """
    Clase abstracta que define la interfaz para migradores de colecciones.

    Attributes:
        schema (str): Schema de PostgreSQL destino
        collection_name (str): Colección de Firestore origen
        target_table (str): Tabla principal destino
    """

    collection_name = None
    target_table = None

    def __init__(self, schema: str = "public", clock=None):
        """
        Args:
            schema: Schema en PostgreSQL (ej: 'public')
            clock: Callable que retorna el instante actual (defaults NOW)
        """
        self.schema = schema
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def now(self):
        return self._clock()

    def table(self, name=None):
        """Nombre calificado con schema: public.rooms"""
        return f"{self.schema}.{name or self.target_table}"

    @abstractmethod
    def extract_shared_entities(self, doc: dict, cursor, caches: dict):
        """
        Resuelve (o crea, en migradores core) las entidades referenciadas.

        Args:
            doc: Documento de Firestore (dict con '_id')
            cursor: Cursor de psycopg2
            caches: Dict compartido durante toda la colección

        Returns:
            dict: IDs para usar en FKs (ej: {'student_id': 12})
            None: La referencia no resuelve; el documento se omite
        """
        pass

    @abstractmethod
    def extract_data(self, doc: dict, shared_entities: dict) -> dict:
        """
        Convierte un documento en filas listas para insertar.

        Returns:
            dict:
                {
                    'main': [tuple, ...],
                    'related': {'tabla': [tuple, ...]}
                }
            Una lista 'main' vacía significa que el documento no produce filas.
        """
        pass

    @abstractmethod
    def insert_batches(self, batches: dict, cursor, caches=None) -> int:
        """
        Inserta los batches acumulados.

        Returns:
            int: Cantidad de filas escritas (insertadas o actualizadas)
        """
        pass

    def initialize_batches(self) -> dict:
        """Estructura vacía con la misma forma que extract_data()."""
        return {"main": [], "related": {}}

    def get_primary_key_from_doc(self, doc: dict) -> str:
        """ID del documento en Firestore."""
        return str(doc.get("_id"))

    def migrate_document(self, doc: dict, cursor, caches: dict) -> int:
        """
        Migra un documento completo. Retorna filas escritas (0 = omitido).

        No captura excepciones: un error de lectura/escritura aborta la corrida.
        """
        shared_entities = self.extract_shared_entities(doc, cursor, caches)
        if shared_entities is None:
            return 0

        data = self.extract_data(doc, shared_entities)
        if not data["main"]:
            return 0

        batches = self.initialize_batches()
        batches["main"].extend(data["main"])
        for table_name, records in data["related"].items():
            batches["related"].setdefault(table_name, []).extend(records)

        return self.insert_batches(batches, cursor, caches)

    def _insert_rows(self, cursor, table, columns, rows, suffix="") -> int:
        """
        INSERT multi-fila con execute_values; retorna filas afectadas.

        Un solo statement por llamada (page_size = len(rows)), así rowcount
        cubre todas las filas del documento.
        """
        if not rows:
            return 0
        query = f"INSERT INTO {table} ({', '.join(columns)}) VALUES %s{suffix}"
        execute_values(cursor, query, rows, page_size=len(rows))
        return max(cursor.rowcount, 0)


class MappedMigrator(BaseMigrator):
    """
    Migrador de una fila por documento guiado por FIELD_MAP.

    Subclases definen collection_name, target_table y FIELD_MAP. Sin FK:
    siempre inserta (sin upsert ni chequeo de duplicados).
    """

    FIELD_MAP = ()
    SHARED_COLUMNS = ()

    def extract_shared_entities(self, doc, cursor, caches):
        return {}

    def columns(self):
        return list(self.SHARED_COLUMNS) + columns_of(self.FIELD_MAP)

    def extract_data(self, doc, shared_entities):
        shared_values = tuple(shared_entities[col] for col in self.SHARED_COLUMNS)
        row = shared_values + map_fields(doc, self.FIELD_MAP, self.now())
        return {"main": [row], "related": {}}

    def insert_batches(self, batches, cursor, caches=None):
        if not batches["main"]:
            return 0
        return self._insert_rows(
            cursor, self.table(), self.columns(), batches["main"]
        )


class StudentLinkedMigrator(MappedMigrator):
    """
    Migrador de colecciones que referencian a un estudiante por email.

    Si el email no resuelve a un estudiante migrado, el documento se
    omite en silencio (solo suma al contador de omitidos).
    """

    SHARED_COLUMNS = ("student_id",)
    STUDENT_EMAIL_KEYS = ("studentEmail", "email")

    def extract_shared_entities(self, doc, cursor, caches):
        email = next(
            (doc.get(key) for key in self.STUDENT_EMAIL_KEYS if doc.get(key)), None
        )
        if not email:
            return None

        # Un mismo estudiante suele tener muchos documentos por colección
        students = caches.setdefault("student_ids", {})
        if email not in students:
            students[email] = get_student_id_by_email(cursor, email, self.schema)

        student_id = students[email]
        if student_id is None:
            return None
        return {"student_id": student_id}
