# ===============================
# File: dme_parser/parsers/vocabulary.py
# ===============================
"""Vocabularios fijos para prescripción y uso.

El orden importa en cada tupla: la búsqueda es lineal y gana el primero que
coincide, así que una entrada más específica va antes que cualquier entrada
más corta que contenga ("heated humidifier" antes que "humidifier").
"""
import re
from typing import Optional, Tuple

DEVICES: Tuple[str, ...] = (
    "cpap",
    "oxygen tank",
    "wheelchair",
    "rollator",
    "crutches",
    "bipap",
    "nebulizer",
)

MASK_TYPES: Tuple[str, ...] = ("full face", "nasal")

ADD_ONS: Tuple[str, ...] = ("heated tubing", "heated humidifier", "tubing", "humidifier")

USAGE_TYPES: Tuple[str, ...] = ("sleep and exertion", "sleep", "exertion", "movement")

QUALIFIERS: Tuple[str, ...] = ("ahi > 20", "ahi < 20", "ahi = 20")

OXYGEN_TANK = "oxygen tank"

# "2 L", "2L", "2.5 l"
LITERS_PATTERN = re.compile(r"(\d+(\.\d+)?) ?L", re.IGNORECASE)


def contains(text: str, term: str) -> bool:
    return term.lower() in text.lower()


def first_match(text: str, vocabulary: Tuple[str, ...]) -> Optional[str]:
    """Primera entrada del vocabulario contenida en el texto, tal como está declarada."""
    return next((term for term in vocabulary if contains(text, term)), None)


def all_matches(text: str, vocabulary: Tuple[str, ...]) -> Tuple[str, ...]:
    return tuple(term for term in vocabulary if contains(text, term))
