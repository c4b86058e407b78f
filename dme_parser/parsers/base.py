import json
import re
from pathlib import Path
from typing import Any, List, Optional, Union

from .models import NoteNotFoundError, NoteReadError

NOTES_FIELD = "data"

# utf-8-sig descarta el BOM si viene
NOTE_ENCODING = "utf-8-sig"


def split_lines(text: str) -> List[str]:
    """Divide en líneas (CRLF, LF o CR), omite vacías."""
    return [line for line in re.split(r"\r\n|\n|\r", text or "") if line]


def _normalize_key(key: str) -> str:
    # "Data", "DATA", "data_" -> "data"
    return key.replace("_", "").replace("-", "").lower()


def _notes_from_json(content: Any, path: str) -> Optional[str]:
    # Documento JSON `null`: sin notas, igual que un objeto sin "data"
    if content is None:
        return None
    if not isinstance(content, dict):
        raise NoteReadError(
            f"Error leyendo '{path}': se esperaba un objeto JSON, "
            f"llegó {type(content).__name__}",
            path,
        )
    value = next(
        (v for k, v in content.items() if _normalize_key(str(k)) == NOTES_FIELD), None
    )
    if value is not None and not isinstance(value, str):
        raise NoteReadError(
            f"Error leyendo '{path}': el campo '{NOTES_FIELD}' debe ser texto",
            path,
        )
    return value


def read_lines(path: Union[str, Path], from_json: bool = False) -> List[str]:
    """
    Lee la nota del médico y la devuelve como lista de líneas.
    - Texto: una línea por etiqueta.
    - JSON: {"data": "<líneas separadas por \\n>"}.
    Lanza NoteNotFoundError si no existe y NoteReadError si no se puede leer/decodificar.
    """
    p = Path(path)
    if not p.is_file():
        raise NoteNotFoundError(f"No se encontró la nota de entrada: '{p}'.", str(p))

    try:
        text = p.read_text(encoding=NOTE_ENCODING)
        if not from_json:
            return split_lines(text)
        notes = _notes_from_json(json.loads(text), str(p))
    except NoteReadError:
        raise
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as ex:
        raise NoteReadError(f"Error leyendo la nota '{p}': {ex}", str(p)) from ex

    if notes is None:
        return []
    return [line for line in re.split(r"[\n\r]", notes) if line]
