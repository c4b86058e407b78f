import asyncio
import time
from pathlib import Path

from watchdog.events import PatternMatchingEventHandler
from watchdog.observers import Observer


class FileSender:
    def __init__(self, outbox: str):
        self.outbox = Path(outbox)
        self.outbox.mkdir(parents=True, exist_ok=True)

    def send(self, order_json: str, filename: str) -> str:
        p = self.outbox / filename
        p.write_text(order_json, encoding="utf-8")
        return str(p)


class FileWatcher:
    """Vigila la carpeta de entrada y pasa cada nota nueva (ruta) al loop de asyncio."""

    def __init__(self, inbox: str, glob: str, on_file_async, loop: asyncio.AbstractEventLoop):
        self.inbox = Path(inbox)
        self.inbox.mkdir(parents=True, exist_ok=True)
        self.loop = loop
        self.on_file_async = on_file_async
        self.handler = PatternMatchingEventHandler(patterns=[glob], ignore_directories=True)

        def _submit(path: Path):
            # Si el archivo ya no existe (se movió a archive/error), no hay nada que hacer
            if not path.exists():
                return
            # Espera breve hasta que termine de escribirse
            last_size = -1
            for _ in range(10):
                try:
                    size = path.stat().st_size
                except FileNotFoundError:
                    return
                if size == last_size and size > 0:
                    break
                last_size = size
                time.sleep(0.05)

            # Ejecutar la corrutina en el loop principal (thread-safe)
            asyncio.run_coroutine_threadsafe(self.on_file_async(path), self.loop)

        self.handler.on_created = lambda e: _submit(Path(e.src_path))
        self.handler.on_moved = lambda e: _submit(Path(e.dest_path))

        self.observer = Observer()

    def start(self):
        self.observer.schedule(self.handler, str(self.inbox), recursive=False)
        self.observer.start()

    def stop(self):
        self.observer.stop()
        self.observer.join()
