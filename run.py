import asyncio
import os
from typing import Optional

import typer

from dme_parser.commons.logger import setup_logging
from dme_parser.commons.types import Settings, load_settings
from dme_parser.services.orders_service import OrdersService

app = typer.Typer(add_completion=False, help="DME Note Parser")


def _bootstrap(config: Optional[str]) -> Settings:
    settings = load_settings(config)
    setup_logging(settings.paths.logs_root, os.getenv("LOG_LEVEL", "INFO"))
    return settings


@app.command()
def parse(
    from_json: bool = typer.Option(False, "--json/--text", help="Lee la nota desde el archivo JSON"),
    send: bool = typer.Option(True, "--send/--no-send", help="POST de la orden al API externo"),
    config: Optional[str] = typer.Option(None, help="Ruta a settings.yaml"),
):
    """Extrae la orden DME de la nota configurada, la guarda y la envía."""
    settings = _bootstrap(config)
    svc = OrdersService(settings)

    result, sent = asyncio.run(svc.process(from_json=from_json, send=send))
    if not result.ok:
        typer.echo(result.error.message, err=True)
        raise typer.Exit(code=1)
    typer.echo(f"Orden DME{'' if sent else ' no'} enviada.")


@app.command()
def watch(
    glob: Optional[str] = typer.Option(None, help="Patrón de archivos (por defecto el de settings)"),
    config: Optional[str] = typer.Option(None, help="Ruta a settings.yaml"),
):
    """
    Procesa las notas pendientes en la carpeta de entrada y se queda escuchando nuevas.
    Cada nota procesada se mueve a archive/ (o a error/ si no se pudo leer).
    """
    settings = _bootstrap(config)
    svc = OrdersService(settings)
    try:
        asyncio.run(svc.run_watch_mode(glob))
    except KeyboardInterrupt:
        typer.echo("Detenido.")


if __name__ == "__main__":
    app()
