# lab_results/services/results_service.py
from pathlib import Path
from typing import List, Optional

from lab_results.commons.hl7_engine import HL7Engine
from lab_results.commons.logger import get_stream_logger
from lab_results.commons.types import PathsCfg
from lab_results.helpers.file_transport import JsonSender, list_inbox, move_to

log = get_stream_logger("lab-results")


class ResultsService:
    """Parses result files dropped in the inbox and writes JSON to the outbox.

    One bad file never stops the batch: it is moved to ``error/`` and logged.
    """

    def __init__(self, engine: HL7Engine, paths: PathsCfg):
        self.engine = engine
        self.paths = paths
        self.sender = JsonSender(paths.outbox)
        Path(paths.archive).mkdir(parents=True, exist_ok=True)
        Path(paths.error).mkdir(parents=True, exist_ok=True)

    def process_file(self, path: Path) -> Optional[Path]:
        path = Path(path)
        log.info(f"Procesando {path.name}")
        try:
            data = self.engine.parse_path(path)
        except Exception as ex:
            # ParseError, EnvelopeError or anything unexpected: park the file in error/
            errp = move_to(path, self.paths.error)
            log.exception(f"Error procesando {path.name}: {ex}. Movido a {errp}")
            return None

        out_json = self.sender.send(path.stem, data)
        move_to(path, self.paths.archive)
        log.info(f"Resultado procesado: {out_json}")
        return out_json

    def process_backlog(self, glob_pat: str = "*") -> List[Path]:
        files = list_inbox(self.paths.inbox, glob_pat)
        if not files:
            log.info("Sin archivos pendientes en la bandeja de entrada")
            return []
        log.info(f"Backlog detectado: {len(files)} archivo(s) en {self.paths.inbox}")
        written = []
        for f in files:
            out = self.process_file(f)
            if out is not None:
                written.append(out)
        return written
