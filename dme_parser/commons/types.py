import os
import sys
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import BaseModel, field_validator

from dme_parser.commons.logger import logger

DEFAULT_SETTINGS_PATH = "dme_parser/configs/settings.yaml"
PACKAGE_SETTINGS_PATH = Path(__file__).resolve().parent.parent / "configs" / "settings.yaml"
DEFAULT_ENDPOINT = "https://alert-api.com/DrExtract"


def resource_path(relative_path: str) -> str:
    """Devuelve la ruta absoluta a un recurso, ya sea ejecutando como .exe o en desarrollo"""
    if hasattr(sys, "_MEIPASS"):
        # Si es un ejecutable generado por PyInstaller
        base_path = sys._MEIPASS
    else:
        base_path = os.path.abspath(".")

    return os.path.join(base_path, relative_path)


class ExternalApiCfg(BaseModel):
    endpoint: str = DEFAULT_ENDPOINT
    timeout_sec: float = 10.0

    @field_validator("endpoint")
    @classmethod
    def _http_url(cls, v: str):
        if not v.lower().startswith(("http://", "https://")):
            raise ValueError(f"Endpoint inválido (se espera http/https): {v!r}")
        return v


class PathsCfg(BaseModel):
    logs_root: str = "./logs"
    archive: str = "./archive"
    error: str = "./error"


class WatchCfg(BaseModel):
    filename_glob: str = "*.txt"


class Settings(BaseModel):
    input_folder: str = ""
    output_folder: str = ""
    text_input_file: str = ""
    json_input_file: str = ""
    output_file: str = "output.json"
    external_api: ExternalApiCfg = ExternalApiCfg()
    paths: PathsCfg = PathsCfg()
    watch: WatchCfg = WatchCfg()

    def note_path(self, from_json: bool = False) -> Path:
        name = self.json_input_file if from_json else self.text_input_file
        return Path(self.input_folder) / name

    def output_path(self, name: Optional[str] = None) -> Path:
        return Path(self.output_folder) / (name or self.output_file)


def settings_from_dict(raw: Optional[Dict[str, Any]]) -> Settings:
    """Acepta el YAML completo ({settings: {...}}) o solo la sección."""
    raw = raw or {}
    section = raw.get("settings", raw) if isinstance(raw, dict) else {}
    return Settings(**(section or {}))


def default_settings_path() -> Path:
    """
    settings.yaml por defecto: junto al .exe (PyInstaller) o, si no, el que viene
    instalado con el paquete. No depende del directorio actual.
    """
    if hasattr(sys, "_MEIPASS"):
        return Path(resource_path(DEFAULT_SETTINGS_PATH))
    return PACKAGE_SETTINGS_PATH


def load_settings(path: Optional[str] = None) -> Settings:
    """
    Carga settings.yaml. Orden: argumento -> $DME_SETTINGS -> ruta por defecto.
    Si el archivo no existe se usan los valores por defecto (con aviso en el log).
    """
    config_path = Path(path or os.getenv("DME_SETTINGS") or default_settings_path())
    if not config_path.is_file():
        logger.warning(f"No existe {config_path}; se usan los valores por defecto")
        return Settings()
    with open(config_path, "r", encoding="utf-8") as f:
        return settings_from_dict(yaml.safe_load(f))
