# ===============================
# File: dme_parser/parsers/note.py
# ===============================
from pathlib import Path
from typing import Iterable, List, Optional, Tuple, Union

from dme_parser.commons.logger import logger

from .base import read_lines
from .models import Diagnostic, NoteInputError, Order, ParseResult
from .vocabulary import (
    ADD_ONS,
    DEVICES,
    LITERS_PATTERN,
    MASK_TYPES,
    OXYGEN_TANK,
    QUALIFIERS,
    USAGE_TYPES,
    all_matches,
    first_match,
)

# etiqueta -> campo de Order (valor recortado, 1 a 1)
PLAIN_LABELS = {
    "patient name": "patient_name",
    "dob": "patient_dob",
    "diagnosis": "diagnosis",
    "ordering physician": "ordering_provider",
}

PRESCRIPTION_LABELS = ("prescription", "recommendation")


def _filter_add_ons(found: Tuple[str, ...]) -> Tuple[str, ...]:
    # "humidifier" sobra si ya está "heated humidifier"
    return tuple(a for a in found if not any(other != a and a in other for other in found))


def apply_prescription(order: Order, clause: str) -> Order:
    """
    Aplica las reglas de prescripción a una cláusula de texto libre.

    Una sola cláusula puede fijar equipo, máscara, accesorios, calificador y litros.
    Las palabras clave se buscan como subcadenas sin distinguir mayúsculas; gana la
    primera, salvo en accesorios, donde se juntan todas y luego se quitan las contenidas
    en otra.
    """
    update = {}

    device = first_match(clause, DEVICES)
    if device:
        update["device"] = device

    mask = first_match(clause, MASK_TYPES)
    if mask:
        update["mask_type"] = mask

    add_ons = _filter_add_ons(all_matches(clause, ADD_ONS))
    if add_ons:
        update["add_ons"] = add_ons

    qualifier = first_match(clause, QUALIFIERS)
    if qualifier:
        update["qualifier"] = qualifier

    current_device = update.get("device", order.device)
    if current_device and current_device.lower() == OXYGEN_TANK:
        m = LITERS_PATTERN.search(clause)
        if m:
            update["liters"] = f"{m.group(1)} L"

    return order.model_copy(update=update) if update else order


def reduce_line(order: Order, line: str, line_no: int = 0) -> Tuple[Order, Optional[Diagnostic]]:
    """Aplica una línea de la nota a la orden. Devuelve la orden nueva y un aviso opcional."""
    label, sep, raw_value = line.strip().partition(":")
    if not sep:
        return order, Diagnostic(kind="MalformedLine", line_no=line_no, line=line)

    key = label.strip().lower()
    value = raw_value.strip()

    if key == "ahi":
        return order.model_copy(update={"qualifier": f"ahi = {value}"}), None

    if key in PLAIN_LABELS:
        return order.model_copy(update={PLAIN_LABELS[key]: value}), None

    if key == "usage":
        usage = first_match(value, USAGE_TYPES)
        if usage:
            return order.model_copy(update={"usage": usage}), None
        return order, None

    if key in PRESCRIPTION_LABELS:
        return apply_prescription(order, value), None

    return order, Diagnostic(kind="UnrecognizedLabel", line_no=line_no, line=line, label=key)


def extract_order(lines: Iterable[str]) -> Tuple[Order, List[Diagnostic]]:
    order = Order()
    diagnostics: List[Diagnostic] = []
    for i, line in enumerate(lines, start=1):
        order, diag = reduce_line(order, line, i)
        if diag is not None:
            diagnostics.append(diag)
    return order, diagnostics


def parse_note(path: Union[str, Path], from_json: bool = False) -> ParseResult:
    """Lee la nota en `path` y extrae la orden DME. Nunca lanza por errores de E/S."""
    logger.info(f"Parseando nota {path} (modo={'json' if from_json else 'texto'})")
    try:
        lines = read_lines(path, from_json=from_json)
    except NoteInputError as ex:
        logger.error(ex.message)
        return ParseResult(error=ex.to_error())

    order, diagnostics = extract_order(lines)
    for d in diagnostics:
        if d.kind == "MalformedLine":
            logger.warning(f"Línea {d.line_no} sin formato etiqueta/valor, se omite: {d.line!r}")
        else:
            logger.warning(f"Etiqueta no reconocida en línea {d.line_no}: {d.label!r}")
    logger.debug(f"Orden extraída: {order.to_json(indent=None)}")
    return ParseResult(order=order, diagnostics=diagnostics)
