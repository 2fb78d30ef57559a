"""Field mappers for the EMR interface profile.

Two sub-formats share this module: Ontario (HL7 v2.3.1) and BC (HL7 v2.3).
"""
from dataclasses import dataclass
from typing import List, Optional, Union

from lab_results.commons.formatting import format_date, strip_line_breaks
from lab_results.parsers.base import RTF_MARKER, Repetition, Segment
from lab_results.parsers.models import (
    Address,
    CopyTo,
    EmrExternalId,
    EmrLabResult,
    EmrMessageHeader,
    EmrNote,
    EmrObservation,
    EmrObservationIdentifier,
    EmrOrder,
    EmrPatient,
    ExternalOrderId,
    MessageType,
    OrderControlReason,
    PatientLocation,
    PatientName,
    Physician,
    ProducerId,
    SendingFacility,
    UniversalServiceId,
)

ONTARIO_VERSION = "2.3.1"
BC_VERSION = "2.3"

ENCAPSULATED_DATA = "ED"
RTF_PLACEHOLDER = "RTF_CONTENT_AVAILABLE"
PDF_PLACEHOLDER = "PDF_CONTENT_AVAILABLE"

# report types whose single ED observation is a PDF
PDF_REPORT_TYPES = ("Transcription", "Cardiology")


@dataclass(frozen=True)
class EmrContext:
    """Per-message facts the EMR mappers need; fixed once the header is read."""

    is_ontario: bool = False
    report_type: Optional[str] = None
    is_rtf_report: bool = False
    is_pdf_report: bool = False
    include_document_content: bool = False

    @property
    def is_document_report(self) -> bool:
        return self.is_rtf_report or self.is_pdf_report

    @property
    def document_type(self) -> Optional[str]:
        if self.is_rtf_report:
            return "RTF"
        if self.is_pdf_report:
            return "PDF"
        return None

    @property
    def source_format(self) -> str:
        return "Ontario" if self.is_ontario else "BC"


def _single_encapsulated_obx(segments: List[Segment]) -> Optional[Segment]:
    obx = [s for s in segments if s.type == "OBX"]
    if len(obx) != 1 or obx[0].field(2) != ENCAPSULATED_DATA:
        return None
    return obx[0]


def check_rtf_report(segments: List[Segment]) -> bool:
    obx = _single_encapsulated_obx(segments)
    return bool(obx and RTF_MARKER in obx.field(5))


def check_pdf_report(segments: List[Segment], report_type: Optional[str]) -> bool:
    if report_type not in PDF_REPORT_TYPES:
        return False
    return _single_encapsulated_obx(segments) is not None


def _physician(seg: Segment, n: int) -> Optional[Physician]:
    if not seg.field(n):
        return None
    return Physician(
        physician=seg.component(n, 1),
        physician_name=seg.component(n, 2),
        family_name=seg.component(n, 2),
        first_initial=seg.component(n, 3),
    )


def map_msh(seg: Segment, ctx: EmrContext) -> EmrMessageHeader:
    return EmrMessageHeader(
        field_separator=seg.field(1) or "|",
        encoding_characters=seg.field(2) or seg.delimiters.encoding_characters,
        sending_application=seg.field(3),
        sending_facility=SendingFacility(
            namespace_id=seg.component(4, 1),
            universal_id=seg.component(4, 2),
        ),
        receiving_application=seg.field(5),
        receiving_facility=seg.field(6),
        message_date_time=format_date(seg.field(7)),
        message_type=MessageType(
            message_code=seg.component(9, 1) or "ORU",
            trigger_event=seg.component(9, 2) or "R01",
        ),
        message_control_id=seg.field(10),
        processing_id=seg.field(11) or "P",
        version_id=seg.field(12) or (ONTARIO_VERSION if ctx.is_ontario else BC_VERSION),
    )


def _ontario_pid(seg: Segment) -> EmrPatient:
    external = seg.repeats(3) or [Repetition(text="", components=[])]
    names = seg.repeats(5) or [Repetition(text="", components=[])]
    return EmrPatient(
        patient_id_external=[
            EmrExternalId(
                unique_identifier=rep.component(1),
                assigning_authority=rep.component(4),
                identifier_type_code=rep.component(5),
                assigning_jurisdiction=rep.component(9),
                id_version_code=rep.component(11),
            )
            for rep in external
        ],
        alternate_patient_id=seg.field(4),
        names=[
            PatientName(
                family_name=rep.component(1),
                given_name=rep.component(2),
                middle_name=rep.component(3),
                name_type="L",
            )
            for rep in names
        ],
        date_of_birth=format_date(seg.field(7)),
        sex=seg.field(8),
        addresses=[
            Address(
                street=rep.component(1),
                other_designation=rep.component(2),
                city=rep.component(3),
                province=rep.component(4),
                postal_code=rep.component(5),
                country=rep.component(6),
            )
            for rep in seg.repeats(11)
        ],
        phone_numbers=[p for p in (rep.component(1) for rep in seg.repeats(13)) if p],
    )


def _bc_pid(seg: Segment) -> EmrPatient:
    # BC sends identifiers as opaque text and a single name/address
    address = seg.first(11)
    return EmrPatient(
        patient_id_internal=seg.field(2),
        patient_id_external=[rep.text for rep in seg.repeats(3)] or [""],
        alternate_patient_id=seg.field(4),
        names=[
            PatientName(
                family_name=seg.component(5, 1),
                given_name=seg.component(5, 2),
                middle_name=seg.component(5, 3),
            )
        ],
        date_of_birth=format_date(seg.field(7)),
        sex=seg.field(8),
        addresses=(
            [
                Address(
                    street=address.component(1),
                    city=address.component(3),
                    province=address.component(4),
                    postal_code=address.component(5),
                )
            ]
            if address
            else []
        ),
        phone_numbers=[seg.field(13)],
    )


def map_pid(seg: Segment, ctx: EmrContext) -> EmrPatient:
    patient = _ontario_pid(seg) if ctx.is_ontario else _bc_pid(seg)
    patient.source_format = ctx.source_format
    if ctx.is_document_report:
        patient.is_report_document = True
        patient.document_type = ctx.document_type
        patient.report_type = ctx.report_type
    return patient


def map_pv1(seg: Segment, ctx: EmrContext) -> PatientLocation:
    return PatientLocation(
        patient_class=seg.field(2),
        patient_location_id=seg.field(3),
    )


def map_orc(seg: Segment, ctx: EmrContext) -> EmrOrder:
    reason = None
    if ctx.is_ontario and seg.field(16):
        reason = OrderControlReason(code=seg.component(16, 1), reason=seg.component(16, 2))
    return EmrOrder(
        order_control=seg.field(1),
        filler_order_number=seg.component(3, 1),
        patient_id_external=ExternalOrderId(
            unique_id=seg.component(4, 1),
            filler_application_id=seg.component(4, 2),
        ),
        order_status=seg.field(5),
        order_control_code_reason=reason,
        ordering_physician=_physician(seg, 12),
    )


def map_obr(seg: Segment, ctx: EmrContext) -> EmrLabResult:
    return EmrLabResult(
        placer_order_number=seg.component(2, 1),
        filler_order_number=seg.component(3, 1),
        filler_order_source=seg.component(3, 2) if ctx.is_ontario else None,
        universal_service_id=UniversalServiceId(
            gdml_test_code=seg.component(4, 1),
            test_name=seg.component(4, 2),
        ),
        requested_date_time=format_date(seg.field(6)),
        collection_date_time=format_date(seg.field(7)),
        specimen_received_date_time=format_date(seg.field(14)),
        ordering_physician=_physician(seg, 16),
        reported_date_time=format_date(seg.field(22)),
        diagnostic_service_section_id=seg.field(24),
        result_status=seg.field(25),
        result_copies_to=[
            CopyTo(
                id_number=rep.component(1),
                family_name=rep.component(2),
                given_name=rep.component(3),
                assigning_facility=rep.component(14),
            )
            for rep in seg.repeats(28)
        ],
    )


def observation_value(seg: Segment, ctx: EmrContext) -> Union[str, List[str]]:
    """OBX-5 as a scalar, a list for repeats, or a placeholder for documents."""
    raw = seg.field(5)
    if not raw:
        return ""
    if ctx.is_rtf_report and RTF_MARKER in raw:
        return raw if ctx.include_document_content else RTF_PLACEHOLDER
    if ctx.is_pdf_report and seg.field(2) == ENCAPSULATED_DATA:
        return raw if ctx.include_document_content else PDF_PLACEHOLDER

    reps = seg.repeats(5)
    if len(reps) > 1:
        values = [strip_line_breaks(rep.component(1) or rep.component(2)) for rep in reps]
        return [v for v in values if v]
    return strip_line_breaks(reps[0].component(1) or reps[0].component(2))


def _producer(seg: Segment) -> ProducerId:
    # OBX-15: id ^ name & street & apt & city & province & postal code & country
    parts = seg.first(15)
    subs = parts.subcomponents(2) if parts else []
    address_parts = subs[1:]
    address = None
    if address_parts:
        padded = address_parts + [""] * (6 - len(address_parts))
        address = Address(
            street=padded[0],
            apt=padded[1],
            city=padded[2],
            province=padded[3],
            postal_code=padded[4],
            country=padded[5],
        )
    return ProducerId(
        id=seg.component(15, 1),
        name=subs[0] if subs else "",
        address=address,
    )


def map_obx(seg: Segment, ctx: EmrContext) -> EmrObservation:
    return EmrObservation(
        set_id=seg.field(1),
        value_type=seg.field(2),
        observation_identifier=EmrObservationIdentifier(
            identifier=seg.component(3, 1),
            text=seg.component(3, 2),
            coding_system=seg.component(3, 3),
        ),
        observation_sub_id=seg.field(4),
        observation_results=observation_value(seg, ctx),
        units=seg.field(6),
        reference_range=seg.field(7),
        abnormal_flags=seg.field(8),
        observation_result_status=seg.field(11),
        date_time_of_observation=format_date(seg.field(14)),
        producers_id=_producer(seg) if ctx.is_ontario else None,
    )


def map_nte(seg: Segment, ctx: EmrContext) -> EmrNote:
    return EmrNote(
        set_id=seg.field(1),
        source_of_comment=seg.field(2),
        comment=seg.field(3),
    )
