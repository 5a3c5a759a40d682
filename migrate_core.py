"""
Migración core: rooms → usuarios + estudiantes → asignaciones.

Uso:
    python migrate_core.py
"""

from firemigra import main_core

if __name__ == "__main__":
    main_core()
