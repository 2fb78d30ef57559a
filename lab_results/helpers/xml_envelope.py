from dataclasses import dataclass
from typing import List, Union

from lxml import etree

from lab_results.commons.logger import logger

# any namespace or none
MESSAGE_TAG = "{*}Message"
MESSAGE_ID_ATTR = "MsgID"


class EnvelopeError(ValueError):
    """The XML container could not be parsed."""


@dataclass
class HL7Envelope:
    id: str
    content: str


def extract_hl7_messages_from_xml(xml_data: Union[str, bytes]) -> List[HL7Envelope]:
    """Return every ``<Message MsgID=...>`` payload in document order.

    Elements whose text (CDATA included) is empty are skipped.
    """
    raw = xml_data.encode("utf-8") if isinstance(xml_data, str) else xml_data
    parser = etree.XMLParser(huge_tree=True, resolve_entities=False)
    try:
        root = etree.fromstring(raw, parser)
    except etree.XMLSyntaxError as ex:
        raise EnvelopeError(f"XML inválido: {ex}") from ex

    messages: List[HL7Envelope] = []
    for element in root.iter(MESSAGE_TAG):
        content = "".join(element.itertext())
        if not content:
            continue
        messages.append(HL7Envelope(id=element.get(MESSAGE_ID_ATTR) or "", content=content))
    logger.debug(f"{len(messages)} mensaje(s) HL7 extraídos del XML")
    return messages
