from pathlib import Path
from typing import Any, Dict, List

from lab_results.commons.hl7_normalizer import HL7Normalizer
from lab_results.commons.types import Settings, load_settings
from lab_results.helpers.file_transport import XML_SUFFIXES, read_text
from lab_results.helpers.xml_envelope import extract_hl7_messages_from_xml
from lab_results.parsers.models import ParsedMessage


class HL7Engine:
    """Engine facade that loads config and exposes the parse methods.

    Accepts a YAML path, an already loaded dict, or a ``Settings`` instance.
    """

    def __init__(self, config_path_or_obj: Any = None):
        if isinstance(config_path_or_obj, Settings):
            self.cfg = config_path_or_obj
        elif isinstance(config_path_or_obj, str):
            self.cfg = load_settings(config_path_or_obj)
        elif isinstance(config_path_or_obj, dict):
            self.cfg = Settings.model_validate(config_path_or_obj)
        else:
            self.cfg = Settings()

        parsers_cfg = self.cfg.parsers
        self.normalizer = HL7Normalizer(
            autodetect=parsers_cfg.autodetect,
            override=parsers_cfg.override,
            remove_empty=parsers_cfg.remove_empty_fields,
            include_document_content=parsers_cfg.include_document_content,
        )

    def normalize(self, hl7_text: str) -> ParsedMessage:
        return self.normalizer.normalize(hl7_text)

    def parse(self, hl7_text: str) -> Dict:
        return self.normalizer.parse(hl7_text)

    def parse_many(self, messages: List[str]) -> List[Dict]:
        return self.normalizer.parse_many(messages)

    def parse_xml(self, xml_text: str) -> List[Dict]:
        envelopes = extract_hl7_messages_from_xml(xml_text)
        return self.parse_many([env.content for env in envelopes])

    def parse_path(self, path: Path) -> Dict:
        """Parse an ``.xml`` envelope or a raw HL7 file."""
        text = read_text(path)
        if path.suffix.lower() in XML_SUFFIXES:
            return {"HL7Messages": self.parse_xml(text)}
        return self.parse(text)
