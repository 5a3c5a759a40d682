"""
Migrador para la colección 'mess' → tabla mess_schedule.

Un documento representa un día del menú y se abre en hasta 4 filas
(una por comida con contenido):

    {day: 'Monday', Breakfast: 'Idli', Lunch: 'Rice'}
    → (1, 'breakfast', 'Idli'), (1, 'lunch', 'Rice')

DECISIONES DE DISEÑO:
- day_of_week: Sunday=0 ... Saturday=6
- Nombre de día fuera del set → documento completo omitido
- El día debe coincidir exactamente con el nombre ('monday' se omite)
- Cada comida acepta la key capitalizada o en minúsculas
"""

from .base import MappedMigrator

DAYS = ("Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday")
MEALS = ("Breakfast", "Lunch", "Snacks", "Dinner")


def day_index(day):
    """Índice 0-6 del día, o None si no es un nombre de día válido."""
    return DAYS.index(day) if day in DAYS else None


class MessMigrator(MappedMigrator):
    collection_name = "mess"
    target_table = "mess_schedule"

    def columns(self):
        return ["day_of_week", "meal_type", "menu"]

    def extract_shared_entities(self, doc, cursor, caches):
        index = day_index(doc.get("day"))
        if index is None:
            return None
        return {"day_of_week": index}

    def extract_data(self, doc, shared_entities):
        rows = []
        for meal in MEALS:
            menu = doc.get(meal) or doc.get(meal.lower())
            if menu:
                rows.append((shared_entities["day_of_week"], meal.lower(), menu))
        return {"main": rows, "related": {}}
