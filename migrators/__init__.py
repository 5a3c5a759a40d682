"""
Migradores para transformar colecciones Firestore a tablas PostgreSQL.

Cada migrador implementa la interfaz BaseMigrator y se carga dinámicamente
en runtime según la colección (ver load_migrator_for_collection() en
firemigra.py).

Estructura:
    base.py: BaseMigrator, MappedMigrator, StudentLinkedMigrator
    mapping.py: FieldMapping y conversión de valores
    rooms.py: rooms → rooms (upsert)
    allocations.py: allocations → users + students + room_allocations
    complaints.py, payments.py, laundry.py, leaves.py: FK a students por email
    notices.py, bustimings.py, mess.py, emergency_contacts.py: referencia

Interfaz requerida (ver BaseMigrator):
    - extract_shared_entities(doc, cursor, caches)
    - extract_data(doc, shared_entities)
    - insert_batches(batches, cursor, caches)
    - initialize_batches()
    - get_primary_key_from_doc(doc)
"""
