"""
Migración full: complaints, payments, laundry, leaves, notices,
bustimings, mess y emergencyContacts.

Requiere haber corrido migrate_core.py antes (los estudiantes se
resuelven por email).

Uso:
    python migrate_full.py
"""

from firemigra import main_full

if __name__ == "__main__":
    main_full()
