import json
import os
import sys
from pathlib import Path
from typing import Optional

import typer

from lab_results.commons.hl7_engine import HL7Engine
from lab_results.commons.logger import setup_logging
from lab_results.commons.types import Settings, load_settings
from lab_results.services.results_service import ResultsService

app = typer.Typer(add_completion=False, help="HL7 lab results parser")

DEFAULT_CONFIG = "lab_results/configs/settings.yaml"


def resource_path(relative_path: str) -> str:
    """Absolute path to a bundled resource, whether frozen with PyInstaller or in dev."""
    if hasattr(sys, "_MEIPASS"):
        base_path = sys._MEIPASS
    else:
        base_path = os.path.abspath(".")
    return os.path.join(base_path, relative_path)


def load_cfg(path: str = DEFAULT_CONFIG) -> Settings:
    config_path = resource_path(path)
    if not os.path.exists(config_path):
        return Settings()
    return load_settings(config_path)


@app.command()
def parse(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, help=".hl7 o .xml"),
    dialect: str = typer.Option("", help="GENERIC | EMR (vacío = autodetectar)"),
    include_documents: bool = typer.Option(False, help="incluye RTF/PDF en línea"),
    keep_empty: bool = typer.Option(False, help="no elimina campos vacíos"),
    output: Optional[Path] = typer.Option(None, help="archivo JSON de salida"),
    config: str = typer.Option(DEFAULT_CONFIG, help="settings.yaml"),
):
    """Parse one file and print (or write) the JSON."""
    cfg = load_cfg(config)
    logger = setup_logging(cfg.paths.logs_root, os.getenv("LOG_LEVEL", cfg.logging.level))
    if dialect:
        cfg.parsers.override = dialect.upper()
    cfg.parsers.include_document_content = include_documents or cfg.parsers.include_document_content
    cfg.parsers.remove_empty_fields = not keep_empty and cfg.parsers.remove_empty_fields

    if cfg.parsers.override not in ("", "GENERIC", "EMR"):
        raise typer.BadParameter(f"dialecto desconocido: {dialect}")

    data = HL7Engine(cfg).parse_path(path)
    text = json.dumps(data, ensure_ascii=False, indent=2)
    if output:
        output.write_text(text, encoding="utf-8")
        logger.info(f"JSON escrito en {output}")
    else:
        typer.echo(text)


@app.command()
def results(
    config: str = typer.Option(DEFAULT_CONFIG, help="settings.yaml"),
    glob: str = typer.Option("*", help="patrón de archivos en la bandeja de entrada"),
):
    """Process every pending file in the inbox once."""
    cfg = load_cfg(config)
    logger = setup_logging(cfg.paths.logs_root, os.getenv("LOG_LEVEL", cfg.logging.level))
    logger.log("INFO", "Iniciando lectura de resultados pendientes por procesar")
    svc = ResultsService(HL7Engine(cfg), cfg.paths)
    written = svc.process_backlog(glob)
    logger.log("INFO", f"{len(written)} archivo(s) procesados")


if __name__ == "__main__":
    app()
