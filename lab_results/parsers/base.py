import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

DEFAULT_FIELD_SEPARATOR = "|"
DEFAULT_ENCODING_CHARACTERS = "^~\\&"

# MSH-12 marker of the EMR (Ontario) interface profile
EMR_VERSION_MARKER = "2.3.1"

RTF_MARKER = "\\E\\rtf1\\E"
LINE_BREAK_MARKER = "\\.br\\"

REPORT_TYPES: Dict[str, str] = {
    "LAB": "Laboratory",
    "MB": "Microbiology",
    "CH": "Chemistry",
    "HM": "Hematology",
    "PAT": "Pathology",
    "RAD": "Radiology",
    "NM": "Nuclear Medicine",
    "ECG": "Cardiology",
    "TRN": "Transcription",
    "DG": "Diagnostic Imaging",
    "CD": "Clinical Documents",
    "EN": "Notifications",
}
OTHER_REPORT_TYPE = "Other"


class ParseError(ValueError):
    """Raised when a message cannot be tokenized (no MSH, no field separator)."""


class Dialect(str, Enum):
    GENERIC = "GENERIC"
    EMR = "EMR"


@dataclass(frozen=True)
class Delimiters:
    field: str = DEFAULT_FIELD_SEPARATOR
    component: str = "^"
    repetition: str = "~"
    escape: str = "\\"
    subcomponent: str = "&"

    @property
    def encoding_characters(self) -> str:
        return self.component + self.repetition + self.escape + self.subcomponent


@dataclass
class Repetition:
    """One occurrence of a field, split into components and sub-components."""

    text: str
    components: List[List[str]]
    sub_separator: str = "&"

    def component(self, c: int) -> str:
        """Component ``c`` (1-based) as raw text, sub-components re-joined."""
        if c < 1 or c > len(self.components):
            return ""
        return self._subs_text(self.components[c - 1])

    def subcomponent(self, c: int, s: int) -> str:
        if c < 1 or c > len(self.components):
            return ""
        subs = self.components[c - 1]
        return subs[s - 1] if 0 < s <= len(subs) else ""

    def subcomponents(self, c: int) -> List[str]:
        if c < 1 or c > len(self.components):
            return []
        return list(self.components[c - 1])

    def values(self) -> List[str]:
        """Every component's text, in order."""
        return [self._subs_text(subs) for subs in self.components]

    def _subs_text(self, subs: List[str]) -> str:
        return self.sub_separator.join(subs)


@dataclass
class Segment:
    type: str
    index: int
    fields: List[str]
    delimiters: Delimiters = field(default_factory=Delimiters)

    def field(self, n: int) -> str:
        """Raw text of field ``n`` using HL7 numbering (MSH-1 is the field separator)."""
        if n < 1 or n >= len(self.fields):
            return ""
        return self.fields[n]

    def repeats(self, n: int) -> List[Repetition]:
        """Field ``n`` as a list of repetitions; always a list, empty when the field is."""
        raw = self.field(n)
        if not raw:
            return []
        if self.type == "MSH" and n <= 2:
            return [self._split_repetition(raw, structured=False)]
        return [self._split_repetition(r) for r in raw.split(self.delimiters.repetition)]

    def first(self, n: int) -> Optional[Repetition]:
        reps = self.repeats(n)
        return reps[0] if reps else None

    def component(self, n: int, c: int) -> str:
        rep = self.first(n)
        return rep.component(c) if rep else ""

    def subcomponent(self, n: int, c: int, s: int) -> str:
        rep = self.first(n)
        return rep.subcomponent(c, s) if rep else ""

    def _split_repetition(self, text: str, structured: bool = True) -> Repetition:
        d = self.delimiters
        if not structured:
            return Repetition(text=text, components=[[text]], sub_separator=d.subcomponent)
        components = [comp.split(d.subcomponent) for comp in text.split(d.component)]
        return Repetition(text=text, components=components, sub_separator=d.subcomponent)


def split_lines(hl7_text: str) -> List[str]:
    """Split into segment lines (CR, LF or CRLF), dropping blank ones."""
    return [s for s in re.split(r"\r\n|\n|\r", hl7_text or "") if s.strip()]


def read_delimiters(msh_line: str) -> Delimiters:
    if len(msh_line) < 4:
        raise ParseError("MSH segment does not declare a field separator")
    field_sep = msh_line[3]
    fields = msh_line.split(field_sep)
    enc = fields[1] if len(fields) > 1 and fields[1] else DEFAULT_ENCODING_CHARACTERS
    defaults = Delimiters()
    return Delimiters(
        field=field_sep,
        component=enc[0] if len(enc) > 0 else defaults.component,
        repetition=enc[1] if len(enc) > 1 else defaults.repetition,
        escape=enc[2] if len(enc) > 2 else defaults.escape,
        subcomponent=enc[3] if len(enc) > 3 else defaults.subcomponent,
    )


def tokenize(hl7_text: str) -> List[Segment]:
    """Split one raw message into ordered segments using its own MSH delimiters."""
    lines = [line.strip("\x0b\x1c") for line in split_lines(hl7_text)]
    lines = [line for line in lines if line]
    msh = next((line for line in lines if line.startswith("MSH")), None)
    if msh is None:
        raise ParseError("No MSH segment found; delimiters cannot be established")
    delims = read_delimiters(msh)

    segments: List[Segment] = []
    for index, line in enumerate(lines):
        parts = line.split(delims.field)
        seg_type = parts[0].strip()
        if seg_type == "MSH":
            # MSH-1 is the separator itself, so every later field shifts by one
            fields = [seg_type, delims.field] + parts[1:]
        else:
            fields = [seg_type] + parts[1:]
        segments.append(Segment(type=seg_type, index=index, fields=fields, delimiters=delims))
    return segments


def find_header(segments: List[Segment]) -> Optional[Segment]:
    return next((s for s in segments if s.type == "MSH"), None)


def is_ontario_format(segments: List[Segment]) -> bool:
    msh = find_header(segments)
    return bool(msh and EMR_VERSION_MARKER in msh.field(12))


def detect_dialect(segments: List[Segment]) -> Dialect:
    """Return EMR when the header's version id carries the EMR marker, else GENERIC."""
    return Dialect.EMR if is_ontario_format(segments) else Dialect.GENERIC


def determine_report_type(diagnostic_service: str) -> str:
    return REPORT_TYPES.get(diagnostic_service, OTHER_REPORT_TYPE)


def detect_report_type(segments: List[Segment]) -> Optional[str]:
    """Report type from OBR-24 of the first OBR; None when absent."""
    obr = next((s for s in segments if s.type == "OBR"), None)
    if obr is None:
        return None
    code = obr.field(24)
    return determine_report_type(code) if code else None
