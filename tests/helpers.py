"""
Funciones helper compartidas para todos los tests.

Proporciona:
- Carga dinámica de migradores basándose en config.py
- FakeFirestore: cliente en memoria con la misma forma que
  firestore.client().collection(name).get()
- FakeConnection / FakeCursor: base PostgreSQL en memoria que entiende
  exactamente las sentencias que emiten los migradores (INSERT, ON CONFLICT,
  RETURNING id, SELECT por clave natural, COUNT)
"""

import copy
import os
import re
import sys
from collections import defaultdict
from types import SimpleNamespace

import psycopg2

# Agregar directorio raíz al path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import config
import firemigra


# =============================================================================
# MIGRADORES
# =============================================================================


def get_migrator_class_for_collection(collection_name):
    """
    Carga dinámicamente la clase migrador para una colección.

    Sigue la convención de firemigra.migrator_names_for():
    - emergencyContacts → EmergencyContactsMigrator (migrators/emergency_contacts.py)
    """
    import importlib

    module_name, class_name = firemigra.migrator_names_for(collection_name)
    module = importlib.import_module(f"migrators.{module_name}")
    return getattr(module, class_name)


def get_all_migrator_classes():
    """Lista de tuplas (nombre_clase, clase) en orden core + full."""
    return [
        (cls.__name__, cls)
        for cls in (
            get_migrator_class_for_collection(name) for name in all_collections_in_order()
        )
    ]


def get_all_migrator_instances():
    """Lista de tuplas (nombre_clase, instancia) en orden core + full."""
    return [(name, cls(schema="public")) for name, cls in get_all_migrator_classes()]


def all_collections_in_order():
    return config.CORE_MIGRATION_ORDER + config.FULL_MIGRATION_ORDER


# =============================================================================
# FIRESTORE EN MEMORIA
# =============================================================================


class FakeSnapshot:
    def __init__(self, doc_id, data):
        self.id = doc_id
        self._data = data

    def to_dict(self):
        return None if self._data is None else dict(self._data)


class FakeCollection:
    def __init__(self, docs):
        self._docs = docs

    def get(self):
        return [FakeSnapshot(doc_id, data) for doc_id, data in self._docs]


class FakeFirestore:
    """
    Ejemplo:
        fs = FakeFirestore({'rooms': [('101', {'capacity': 3})]})
        fs.collection('rooms').get()[0].id  # '101'
    """

    def __init__(self, collections=None):
        self.collections = collections or {}
        self.requested = []

    def collection(self, name):
        self.requested.append(name)
        return FakeCollection(self.collections.get(name, []))


# =============================================================================
# POSTGRESQL EN MEMORIA
# =============================================================================

# Espejo de las restricciones UNIQUE de dbsetup.TABLES
UNIQUE_CONSTRAINTS = {
    "users": [("email",)],
    "students": [("roll_no",), ("user_id",)],
    "rooms": [("room_number",)],
    "room_allocations": [("student_id", "room_id")],
}

INSERT_RE = re.compile(
    r"^INSERT INTO (?:\w+\.)?(\w+) \(([^)]*)\) VALUES \(([^)]*)\)(.*)$"
)
# execute_values: cada fila llega como el token que retorna FakeCursor.mogrify()
VALUES_LIST_RE = re.compile(
    r"^INSERT INTO (?:\w+\.)?(\w+) \(([^)]*)\) VALUES ((?:\(__row\d+__\),?)+)(.*)$"
)
ROW_TOKEN_RE = re.compile(r"__row(\d+)__")
CONFLICT_RE = re.compile(
    r"ON CONFLICT (?:\((\w+)\) )?DO (NOTHING|UPDATE SET (.*?))(?: RETURNING id)?$"
)
SELECT_ID_RE = re.compile(r"^SELECT id FROM (?:\w+\.)?(\w+) WHERE (\w+) = %s$")
SELECT_STUDENT_BY_EMAIL_RE = re.compile(
    r"^SELECT s\.id FROM (?:\w+\.)?students s JOIN (?:\w+\.)?users u "
    r"ON s\.user_id = u\.id WHERE u\.email = %s$"
)
COUNT_RE = re.compile(r"^SELECT COUNT\(\*\) FROM (?:\w+\.)?(\w+)$")


class FakeDatabase:
    def __init__(self):
        self.tables = defaultdict(list)
        self._next_id = defaultdict(int)

    def rows(self, table):
        return self.tables[table]

    def insert(self, table, row):
        self._next_id[table] += 1
        stored = dict(row, id=self._next_id[table])
        self.tables[table].append(stored)
        return stored

    def find_conflict(self, table, row, constraints=None):
        for columns in constraints or UNIQUE_CONSTRAINTS.get(table, []):
            values = [row.get(col) for col in columns]
            if any(value is None for value in values):
                continue
            for existing in self.tables[table]:
                if [existing.get(col) for col in columns] == values:
                    return existing
        return None

    def snapshot(self):
        return copy.deepcopy(self.tables), copy.deepcopy(self._next_id)

    def restore(self, state):
        self.tables, self._next_id = state


class FakeCursor:
    """
    Cursor psycopg2 en memoria.

    Soporta psycopg2.extras.execute_values: mogrify() guarda los parámetros
    de cada fila y retorna un token que execute() vuelve a resolver.

    fail_on: substring de SQL que dispara psycopg2.OperationalError
    (simula un error de escritura del servidor).
    """

    def __init__(self, db, fail_on=None):
        self.db = db
        self.fail_on = fail_on
        self.rowcount = -1
        self.executed = []
        self.closed = False
        self._results = []
        self._mogrified = []
        self.connection = SimpleNamespace(encoding="UTF8")

    def mogrify(self, template, args):
        self._mogrified.append(tuple(args))
        return f"(__row{len(self._mogrified) - 1}__)".encode()

    def execute(self, query, params=()):
        if isinstance(query, bytes):
            query = query.decode("utf-8")
        sql = " ".join(query.split())
        params = tuple(params or ())
        self.executed.append((sql, params))

        if self.fail_on and self.fail_on in sql:
            raise psycopg2.OperationalError(f"simulated failure on: {sql[:60]}")

        self._results = []
        self.rowcount = 0

        match = VALUES_LIST_RE.match(sql)
        if match:
            table, columns, values, rest = match.groups()
            tokens = [int(index) for index in ROW_TOKEN_RE.findall(values)]
            rows = [self._mogrified[index] for index in tokens]
            self._mogrified = []
            total = 0
            for row in rows:
                self._insert(table, columns, rest, row)
                total += self.rowcount
            self.rowcount = total
            return

        match = INSERT_RE.match(sql)
        if match:
            table, columns, _placeholders, rest = match.groups()
            return self._insert(table, columns, rest, params)

        match = SELECT_STUDENT_BY_EMAIL_RE.match(sql)
        if match:
            users = [u for u in self.db.rows("users") if u["email"] == params[0]]
            user_ids = {u["id"] for u in users}
            self._results = [
                (s["id"],) for s in self.db.rows("students") if s["user_id"] in user_ids
            ]
            self.rowcount = len(self._results)
            return

        match = SELECT_ID_RE.match(sql)
        if match:
            table, column = match.groups()
            self._results = [
                (row["id"],) for row in self.db.rows(table) if row.get(column) == params[0]
            ]
            self.rowcount = len(self._results)
            return

        match = COUNT_RE.match(sql)
        if match:
            self._results = [(len(self.db.rows(match.group(1))),)]
            self.rowcount = 1
            return

        raise NotImplementedError(f"FakeCursor no soporta: {sql}")

    def _insert(self, table, columns, rest, params):
        self.rowcount = 0
        self._results = []
        columns = [col.strip() for col in columns.split(",")]
        row = dict(zip(columns, params))
        returning = rest.strip().endswith("RETURNING id")

        conflict_clause = CONFLICT_RE.search(rest.strip())
        if conflict_clause:
            target, action, assignments = conflict_clause.groups()
            constraints = [(target,)] if target else None
            existing = self.db.find_conflict(table, row, constraints)
            if existing is None and self.db.find_conflict(table, row):
                raise psycopg2.IntegrityError(f"duplicate key value in {table}")
            if existing is not None:
                if action == "NOTHING":
                    return
                for assignment in assignments.split(","):
                    column = assignment.split("=")[0].strip()
                    existing[column] = row[column]
                self.rowcount = 1
                if returning:
                    self._results = [(existing["id"],)]
                return
        elif self.db.find_conflict(table, row):
            raise psycopg2.IntegrityError(f"duplicate key value in {table}")

        stored = self.db.insert(table, row)
        self.rowcount = 1
        if returning:
            self._results = [(stored["id"],)]

    def fetchone(self):
        return self._results.pop(0) if self._results else None

    def fetchall(self):
        results, self._results = self._results, []
        return results

    def close(self):
        self.closed = True


class FakeConnection:
    """
    Conexión psycopg2 en memoria.

    Igual que psycopg2, 'with conn:' hace commit al salir sin error y
    rollback si hubo excepción (sin cerrar la conexión).
    """

    def __init__(self, db=None, fail_on=None):
        self.db = db or FakeDatabase()
        self.fail_on = fail_on
        self.commits = 0
        self.rollbacks = 0
        self.closed = False
        self._state = None
        self._cursor = None

    def cursor(self):
        if self._cursor is None:
            self._cursor = FakeCursor(self.db, fail_on=self.fail_on)
        return self._cursor

    def __enter__(self):
        self._state = self.db.snapshot()
        return self

    def __exit__(self, exc_type, exc, tb):
        if exc_type is None:
            self.commit()
        else:
            self.db.restore(self._state)
            self.rollbacks += 1
        return False

    def commit(self):
        self.commits += 1

    def rollback(self):
        self.rollbacks += 1

    def close(self):
        self.closed = True


def seed_student(db, email, roll_no=None, full_name="Seeded Student"):
    """Inserta usuario + estudiante directamente en la base en memoria."""
    user = db.insert("users", {"email": email, "full_name": full_name, "role": "student"})
    student = db.insert(
        "students", {"user_id": user["id"], "roll_no": roll_no, "status": "active", "dues": 0}
    )
    return student["id"]
