"""
Suite de tests para la migración Firestore → PostgreSQL.

Los tests NO tocan Firestore ni PostgreSQL reales: usan FakeFirestore y
FakeConnection (ver helpers.py) para validar:
- Configuración y orden de migración
- Implementación correcta de interfaces
- Coherencia entre migradores y tablas de dbsetup.py
- Semántica de cada migrador (defaults, upsert, omisiones)
"""
