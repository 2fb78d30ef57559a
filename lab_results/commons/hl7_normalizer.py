from typing import Dict, Iterable, List, Optional

from lab_results.commons.formatting import remove_empty_fields
from lab_results.commons.logger import logger
from lab_results.parsers import emr
from lab_results.parsers.assembler import build_message
from lab_results.parsers.base import (
    Dialect,
    Segment,
    detect_dialect,
    detect_report_type,
    is_ontario_format,
    tokenize,
)
from lab_results.parsers.models import ParsedMessage


class HL7Normalizer:
    def __init__(
        self,
        autodetect: bool = True,
        override: str = "",
        remove_empty: bool = True,
        include_document_content: bool = False,
    ):
        self.autodetect = autodetect
        self.override = (override or "").upper()
        self.remove_empty = remove_empty
        self.include_document_content = include_document_content

    def select_dialect(self, segments: List[Segment]) -> Dialect:
        if self.override:
            return Dialect(self.override)
        if self.autodetect:
            return detect_dialect(segments)
        return Dialect.GENERIC

    def emr_context(self, segments: List[Segment]) -> emr.EmrContext:
        report_type = detect_report_type(segments)
        return emr.EmrContext(
            is_ontario=is_ontario_format(segments),
            report_type=report_type,
            is_rtf_report=emr.check_rtf_report(segments),
            is_pdf_report=emr.check_pdf_report(segments, report_type),
            include_document_content=self.include_document_content,
        )

    def normalize(self, hl7_text: str, dialect: Optional[Dialect] = None) -> ParsedMessage:
        """Tokenize, pick the dialect and assemble the typed message tree."""
        segments = tokenize(hl7_text)
        dialect = dialect or self.select_dialect(segments)
        ctx = self.emr_context(segments) if dialect == Dialect.EMR else None
        msg = build_message(segments, dialect, ctx)
        logger.debug(
            f"Mensaje {dialect.value}: {len(segments)} segmentos, {len(msg.patients)} paciente(s)"
        )
        return msg

    def to_payload(self, msg: ParsedMessage) -> Dict:
        """Serialize with camelCase keys; prune empty fields unless disabled."""
        data = msg.to_dict()
        if data.get("messageHeader") is None:
            data["messageHeader"] = {}
        if msg.is_ontario_format is None:
            for key in ("isOntarioFormat", "isDocumentReport", "reportType"):
                data.pop(key, None)
        if not self.remove_empty:
            return data
        pruned = remove_empty_fields(data)
        # the two top-level keys are part of the output contract even when empty
        return {
            "messageHeader": pruned.pop("messageHeader", {}),
            "patients": pruned.pop("patients", []),
            **pruned,
        }

    def parse(self, hl7_text: str) -> Dict:
        return self.to_payload(self.normalize(hl7_text))

    def parse_many(self, messages: Iterable[str]) -> List[Dict]:
        return [self.parse(m) for m in messages]
