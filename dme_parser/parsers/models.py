# ===============================
# File: dme_parser/parsers/models.py
# ===============================
from dataclasses import dataclass, field
from typing import List, Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


class Order(BaseModel):
    """Orden DME extraída de una nota médica. Todos los campos son opcionales."""

    model_config = ConfigDict(frozen=True)

    device: Optional[str] = None
    mask_type: Optional[str] = None
    add_ons: Optional[Tuple[str, ...]] = None
    qualifier: Optional[str] = None
    ordering_provider: Optional[str] = None
    liters: Optional[str] = None
    usage: Optional[str] = None
    diagnosis: Optional[str] = None
    patient_name: Optional[str] = None
    patient_dob: Optional[str] = Field(default=None, serialization_alias="dob")

    def to_json(self, indent: Optional[int] = 2) -> str:
        return self.model_dump_json(by_alias=True, exclude_none=True, indent=indent)


@dataclass(frozen=True)
class Diagnostic:
    """Aviso no fatal sobre una línea omitida."""

    kind: Literal["MalformedLine", "UnrecognizedLabel"]
    line_no: int
    line: str
    label: Optional[str] = None


@dataclass(frozen=True)
class NoteError:
    kind: Literal["NotFound", "ReadError"]
    message: str
    path: str


@dataclass
class ParseResult:
    order: Optional[Order] = None
    error: Optional[NoteError] = None
    diagnostics: List[Diagnostic] = field(default_factory=list)

    def __post_init__(self):
        # una orden o un error, nunca ambos
        if (self.order is None) == (self.error is None):
            raise ValueError("ParseResult requiere una orden o un error, no ambos")

    @property
    def ok(self) -> bool:
        return self.error is None


class NoteInputError(Exception):
    kind = "ReadError"

    def __init__(self, message: str, path: str):
        super().__init__(message)
        self.message = message
        self.path = path

    def to_error(self) -> NoteError:
        return NoteError(kind=self.kind, message=self.message, path=self.path)


class NoteNotFoundError(NoteInputError):
    kind = "NotFound"


class NoteReadError(NoteInputError):
    kind = "ReadError"
