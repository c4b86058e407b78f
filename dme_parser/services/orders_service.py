# dme_parser/services/orders_service.py
import asyncio
import shutil
from pathlib import Path
from typing import Optional, Tuple, Union

from dme_parser.commons.logger import logger
from dme_parser.commons.types import Settings
from dme_parser.helpers.file_transport import FileSender, FileWatcher
from dme_parser.helpers.http_transport import HttpSender
from dme_parser.parsers.models import Order, ParseResult
from dme_parser.parsers.note import parse_note


def serialize(order: Order) -> str:
    """JSON en snake_case, sin campos vacíos; la fecha de nacimiento sale como `dob`."""
    return order.to_json(indent=2)


class OrdersService:
    def __init__(self, settings: Settings, sender: Optional[HttpSender] = None):
        self.settings = settings
        self.sender = sender or HttpSender(
            settings.external_api.endpoint,
            timeout=settings.external_api.timeout_sec,
        )

    def _write_output(self, order_json: str, filename: Optional[str] = None) -> str:
        out = FileSender(self.settings.output_folder or ".")
        p = out.send(order_json, filename or self.settings.output_file)
        logger.info(f"Orden escrita en {p}")
        return p

    async def _deliver(self, result: ParseResult, filename: Optional[str], send: bool) -> bool:
        order_json = serialize(result.order)
        self._write_output(order_json, filename)
        if not send:
            return False
        return await self.sender.post_json(order_json)

    async def process(self, from_json: bool = False, send: bool = True) -> Tuple[ParseResult, bool]:
        """Una pasada: nota configurada -> output.json -> API. Devuelve (resultado, enviada)."""
        result = parse_note(self.settings.note_path(from_json), from_json=from_json)
        if not result.ok:
            return result, False
        return result, await self._deliver(result, None, send)

    async def process_file(self, path: Union[str, Path], send: bool = True) -> ParseResult:
        """Modo bandeja: procesa una nota cualquiera y la mueve a archive/ o error/."""
        src = Path(path)
        from_json = src.suffix.lower() == ".json"
        result = parse_note(src, from_json=from_json)

        if not result.ok:
            if src.exists():
                self._move(src, self.settings.paths.error)
            return result

        sent = await self._deliver(result, f"{src.stem}.json", send)
        if send and not sent:
            logger.warning(f"Orden de {src.name} no enviada; queda el JSON en la salida")
        if src.exists():
            self._move(src, self.settings.paths.archive)
        return result

    def _move(self, src: Path, folder: str):
        dst_dir = Path(folder)
        dst_dir.mkdir(parents=True, exist_ok=True)
        shutil.move(str(src), str(dst_dir / src.name))
        logger.info(f"{src.name} movido a {dst_dir}")

    async def _process_backlog(self, glob_pat: str):
        inbox = Path(self.settings.input_folder or ".")
        files = sorted(inbox.glob(glob_pat))
        if not files:
            return
        logger.info(f"Backlog detectado: {len(files)} archivo(s) en {inbox}")
        for f in files:
            # Asegura que un fallo no detenga el backlog completo
            try:
                await self.process_file(f)
            except Exception as ex:
                logger.exception(f"Fallo inesperado con {f}: {ex}")

    async def _on_new_file(self, path: Path):
        try:
            await self.process_file(path)
        except Exception as ex:
            logger.exception(f"Fallo inesperado con {path}: {ex}")

    async def run_watch_mode(self, glob_pat: Optional[str] = None, stop_event: Optional[asyncio.Event] = None):
        glob_pat = glob_pat or self.settings.watch.filename_glob
        loop = asyncio.get_running_loop()

        # 1) Procesar backlog existente
        await self._process_backlog(glob_pat)

        # 2) Arrancar watcher para notas nuevas
        watcher = FileWatcher(self.settings.input_folder or ".", glob_pat, self._on_new_file, loop)
        watcher.start()
        logger.info("Escuchando carpeta de notas...")
        try:
            await (stop_event or asyncio.Event()).wait()
        finally:
            watcher.stop()
