"""Field mappers for the generic provincial lab profile (HL7 v2.3).

Placeholder fields the profile declares but never populates are still mapped, so
a partner that starts sending them does not need a code change.
"""
from typing import List, Optional

from lab_results.commons.formatting import format_date, strip_line_breaks
from lab_results.parsers.base import Segment
from lab_results.parsers.models import (
    Address,
    AssigningFacility,
    CopyTo,
    CourierRoutes,
    ExternalId,
    ExternalOrderId,
    FillerOrderNumber,
    LabResult,
    MessageHeader,
    MessageType,
    Note,
    Observation,
    ObservationIdentifier,
    Order,
    Patient,
    PatientIdInternal,
    PatientName,
    Physician,
    PhysicianAddress,
    ReferenceRange,
    UniversalServiceId,
    Zct,
    Zcy,
    Zdr,
    ZdrAddress,
    ZdrPhysician,
    ZdrPhysicianName,
    Zex,
    Zpi,
    Ztx,
)

DEFAULT_VERSION = "2.3"


def _opt(seg: Segment, n: int) -> Optional[str]:
    return seg.field(n) or None


def _opt_comp(seg: Segment, n: int, c: int) -> Optional[str]:
    return seg.component(n, c) or None


def map_msh(seg: Segment) -> MessageHeader:
    return MessageHeader(
        field_separator=seg.field(1) or "|",
        encoding_characters=seg.field(2) or seg.delimiters.encoding_characters,
        sending_application=seg.field(3),
        sending_facility=seg.field(4),
        receiving_application=seg.field(5),
        receiving_facility=seg.field(6),
        message_date_time=format_date(seg.field(7)),
        security=_opt(seg, 8),
        message_type=MessageType(
            message_code=seg.component(9, 1) or "ORU",
            trigger_event=seg.component(9, 2) or "R01",
        ),
        message_control_id=seg.field(10),
        processing_id=seg.field(11) or "P",
        version_id=seg.field(12) or DEFAULT_VERSION,
        sequence_number=_opt(seg, 13),
        continuation_pointer=_opt(seg, 14),
        accept_acknowledgement_type=_opt(seg, 15),
        application_acknowledgement_type=_opt(seg, 16),
        country_code=_opt(seg, 17),
        character_set=_opt(seg, 18),
        principal_language_of_message=_opt(seg, 19),
    )


def map_pid(seg: Segment) -> Patient:
    internal = seg.first(2)
    patient_id_internal = PatientIdInternal()
    if internal:
        patient_id_internal = PatientIdInternal(
            unique_identifier=internal.component(1),
            version_number=internal.component(2),
            province_code=internal.component(3),
            client_reference_id=internal.component(4),
            client_type=internal.component(5),
            assigning_authority=internal.component(6),
            jurisdiction=internal.component(7),
        )

    # PID-3 always yields at least one entry, even when the field is empty
    external_reps = seg.repeats(3) or [None]
    external_ids = []
    for rep in external_reps:
        if rep is None:
            external_ids.append(ExternalId())
            continue
        external_ids.append(
            ExternalId(
                unique_identifier=rep.component(1),
                assigning_facility=AssigningFacility(
                    authority=rep.subcomponent(4, 1),
                    identifier_type=rep.subcomponent(4, 2),
                    facility_id=rep.subcomponent(4, 3),
                ),
            )
        )

    return Patient(
        set_id=seg.field(1),
        patient_id_internal=patient_id_internal,
        patient_id_external=external_ids,
        alternate_external_patient_id=_opt(seg, 4),
        names=[
            PatientName(
                family_name=rep.component(1),
                given_name=rep.component(2),
                middle_name=rep.component(3),
            )
            for rep in seg.repeats(5)
        ],
        mothers_maiden_name=_opt(seg, 6),
        date_of_birth=format_date(seg.field(7)),
        sex=seg.field(8),
        patient_alias=_opt(seg, 9),
        race=_opt(seg, 10),
        addresses=[
            Address(
                street=rep.component(1),
                apt=rep.component(2),
                city=rep.component(3),
                province=rep.component(4),
                postal_code=rep.component(5),
                country=rep.component(6),
            )
            for rep in seg.repeats(11)
        ],
        county_code=_opt(seg, 12),
        phone_numbers=[rep.text for rep in seg.repeats(13)],
        alternate_phone_number=_opt(seg, 14),
        primary_language=_opt(seg, 15),
        marital_status=_opt(seg, 16),
        religion=_opt(seg, 17),
        patient_account_number=_opt(seg, 18),
        ssn_number=_opt(seg, 19),
        drivers_license_number=_opt(seg, 20),
        mothers_identifier=_opt(seg, 21),
        ethnic_group=_opt(seg, 22),
        birth_place=_opt(seg, 23),
        multiple_birth_indicator=_opt(seg, 24),
        birth_order=_opt(seg, 25),
        citizenship=_opt(seg, 26),
        veterans_medical_status=_opt(seg, 27),
        nationality_code=_opt(seg, 28),
        patient_death_date_time=format_date(seg.field(29)),
        patient_death_indicator=_opt(seg, 30),
    )


def map_orc(seg: Segment) -> Order:
    return Order(
        order_control=seg.field(1),
        placer_order_number=_opt(seg, 2),
        filler_order_number=_opt(seg, 3),
        patient_id_external=ExternalOrderId(
            unique_id=seg.component(4, 1),
            filler_application_id=seg.component(4, 2),
        ),
        order_status=seg.field(5),
        response_flag=_opt(seg, 6),
        quantity_timing=_opt(seg, 7),
        parent_order=_opt(seg, 8),
        transaction_date_time=format_date(seg.field(9)),
        ordering_physician_address=PhysicianAddress(
            street_address=_opt_comp(seg, 24, 1),
            other_designation=_opt_comp(seg, 24, 2),
            city=_opt_comp(seg, 24, 3),
            province=_opt_comp(seg, 24, 4),
            postal_code=_opt_comp(seg, 24, 5),
            country=_opt_comp(seg, 24, 6),
        ),
    )


def map_obr(seg: Segment) -> LabResult:
    return LabResult(
        set_id=seg.field(1),
        placer_order_number=seg.component(2, 1),
        filler_order_number=FillerOrderNumber(
            id=seg.component(3, 1),
            application_id=seg.component(3, 2),
        ),
        universal_service_id=UniversalServiceId(
            gdml_test_code=seg.component(4, 1),
            test_name=seg.component(4, 2),
            moh_test_code=seg.component(4, 3),
            department=seg.component(4, 4),
        ),
        priority=seg.field(5),
        requested_date_time=format_date(seg.field(6)),
        collection_date_time=format_date(seg.field(7)),
        observation_end_date_time=format_date(seg.field(8)),
        collection_volume=_opt(seg, 9),
        collector_identifier=_opt(seg, 10),
        specimen_action_flag=seg.field(11) or "N",
        danger_code=_opt(seg, 12),
        relevant_clinical_information=_opt(seg, 13),
        specimen_received_date_time=format_date(seg.field(14)),
        specimen_source=_opt(seg, 15),
        ordering_physician=Physician(
            physician=seg.component(16, 1),
            physician_name=seg.component(16, 2),
            physician_ohip=seg.component(16, 3),
            family_name=_opt_comp(seg, 16, 2),
            first_initial=_opt_comp(seg, 16, 3),
        ),
        order_callback_phone_number=_opt(seg, 17),
        placer_field1=_opt(seg, 18),
        placer_field2=_opt(seg, 19),
        filler_field1=_opt(seg, 20),
        filler_field2=_opt(seg, 21),
        reported_date_time=format_date(seg.field(22)),
        charge_to_practice=_opt(seg, 23),
        diagnostic_service_section_id=_opt(seg, 24),
        result_status=seg.field(25),
        parent_result=_opt(seg, 26),
        quantity_timing=_opt(seg, 27),
        result_copies_to=[
            CopyTo(
                id_number=rep.component(1),
                family_name=rep.component(2),
                given_name=rep.component(3),
                assigning_facility=rep.component(14),
            )
            for rep in seg.repeats(28)
        ],
        parent_number=_opt(seg, 29),
        transportation_mode=_opt(seg, 30),
        reason_for_study=_opt(seg, 31),
        principal_result_interpreter=_opt(seg, 32),
        assistant_result_interpreter=_opt(seg, 33),
        technician=_opt(seg, 34),
        transcriptionist=_opt(seg, 35),
        scheduled_date_time=format_date(seg.field(36)),
        number_of_sample_containers=_opt(seg, 37),
        transport_logistics=_opt(seg, 38),
        collectors_comment=_opt(seg, 39),
        transport_arrangement_responsibility=_opt(seg, 40),
        transport_arranged=_opt(seg, 41),
        escort_required=_opt(seg, 42),
        planned_patient_transport=_opt(seg, 43),
    )


def map_reference_range(seg: Segment) -> ReferenceRange:
    reps = seg.repeats(7)
    lines: List[str] = []
    for rep in reps:
        for value in rep.values():
            value = strip_line_breaks(value)
            if value:
                lines.append(value)
    first = reps[0] if reps else None
    return ReferenceRange(
        lines=lines,
        legacy=first.component(1) if first else "",
        formatted=first.component(2) if first else "",
        low_value=first.component(3) if first else "",
        high_value=first.component(4) if first else "",
    )


def map_obx(seg: Segment) -> Observation:
    results = []
    for rep in seg.repeats(5):
        # compound values collapse to their first non-empty part
        value = next((v for v in map(strip_line_breaks, rep.values()) if v), "")
        if value:
            results.append(value)

    return Observation(
        set_id=seg.field(1),
        value_type=seg.field(2),
        observation_identifier=ObservationIdentifier(
            gdml_test_code=seg.subcomponent(3, 1, 1),
            test_component_id=seg.subcomponent(3, 1, 2),
            test_name=seg.component(3, 2) or seg.component(3, 3),
            alt_ident_code=seg.component(3, 4),
            alt_ident_txt=seg.component(3, 5),
            alt_ident_coding=seg.component(3, 6),
        ),
        observation_sub_id=seg.field(4),
        observation_results=results,
        units=seg.field(6),
        reference_range=map_reference_range(seg),
        abnormal_flag=seg.field(8),
        probability=_opt(seg, 9),
        observation_result_status_legacy=seg.field(10),
        observation_result_status=seg.field(11),
        date_last_observed_normal_values=format_date(seg.field(12)),
        user_defined_access_checks=_opt(seg, 13),
        date_time_of_observation=format_date(seg.field(14)),
        producers_id=_opt(seg, 15),
        responsible_observer=_opt(seg, 16),
        observation_method=_opt(seg, 17),
    )


def map_nte(seg: Segment) -> Note:
    return Note(
        set_id=seg.field(1),
        comment_or_source=seg.field(2),
        comment=seg.field(3),
        comment2=seg.field(4),
    )


def map_zdr(seg: Segment) -> Zdr:
    return Zdr(
        set_id=seg.field(1),
        segment_type=seg.field(2),
        physician=ZdrPhysician(
            physician_client_number=seg.component(3, 1),
            alternate_address_number=_opt_comp(seg, 3, 2),
            regulatory_body_type=_opt_comp(seg, 3, 3),
            regulatory_body_id=_opt_comp(seg, 3, 4),
        ),
        physician_name=ZdrPhysicianName(
            name=seg.component(4, 1),
            last_name=seg.component(4, 2),
            middle_name=seg.component(4, 3),
        ),
        physician_address=ZdrAddress(
            address_line1=seg.component(5, 1),
            address_line2=seg.component(5, 2),
            city=seg.component(5, 3),
            province=seg.component(5, 4),
            postal_code=seg.component(5, 5),
        ),
        telephone=seg.field(6),
        slot_code=_opt(seg, 9),
        courier_routes=CourierRoutes(
            route1=_opt_comp(seg, 10, 1),
            route2=_opt_comp(seg, 10, 2),
            route3=_opt_comp(seg, 10, 3),
        ),
    )


def map_zex(seg: Segment) -> Zex:
    return Zex(
        set_id=seg.field(1),
        exception_code=seg.field(2),
        exception_text=seg.field(3),
        pid_id=_opt(seg, 4),
        obr_id=_opt(seg, 5),
        obx_id=_opt(seg, 6),
    )


def map_ztx(seg: Segment) -> Ztx:
    return Ztx(
        location=_opt(seg, 1),
        requisition_number=_opt(seg, 2),
        client_reference_number=_opt(seg, 3),
        toxicology_collection_site=_opt(seg, 4),
        toxicology_company_number=_opt(seg, 5),
        toxicology_company_name=_opt(seg, 6),
        collectors_name=_opt(seg, 7),
        collection_site_name=_opt(seg, 8),
        collection_site_address1=_opt(seg, 9),
        collection_site_address2=_opt(seg, 10),
        collection_site_city=_opt(seg, 11),
        collection_site_province=_opt(seg, 12),
        collection_site_postal_code=_opt(seg, 13),
        toxicology_secondary_specimen_id=_opt(seg, 14),
    )


def map_zct(seg: Segment) -> Zct:
    return Zct(
        location=_opt(seg, 1),
        requisition_number=_opt(seg, 2),
        study_number=_opt(seg, 3),
        investigator_site=_opt(seg, 4),
        subject_number=_opt(seg, 5),
        clinical_trial_subject_initials=_opt(seg, 6),
        screening_number=_opt(seg, 7),
        randomization_number=_opt(seg, 8),
        visit_number=_opt(seg, 9),
        visit_name=_opt(seg, 10),
        visit_type=_opt(seg, 11),
    )


def map_zcy(seg: Segment) -> Zcy:
    return Zcy(
        location=_opt(seg, 1),
        requisition_number=_opt(seg, 2),
        pathologist=_opt(seg, 3),
    )


def map_zpi(seg: Segment) -> Zpi:
    return Zpi(
        ticket=seg.field(1),
        policy_number=_opt(seg, 2),
        examiner_code=_opt(seg, 3),
        insurance_type=_opt(seg, 4),
        insurance_amount=_opt(seg, 5),
        date_time_last_food_taken=format_date(seg.field(6)),
        insurance_agent=_opt(seg, 7),
        agent_province_code=_opt(seg, 8),
        examining_company=_opt(seg, 9),
        examining_province_code=_opt(seg, 10),
        specimen_temperature=_opt(seg, 11),
        mensus_flag=_opt(seg, 12),
    )


# Extension segment -> (mapper, attribute of the list on Patient)
EXTENSIONS = {
    "ZDR": (map_zdr, "zdrs"),
    "ZEX": (map_zex, "exceptions"),
    "ZTX": (map_ztx, "forensic_toxicology_orders"),
    "ZCT": (map_zct, "clinical_trials_orders"),
    "ZCY": (map_zcy, "cytology_orders"),
    "ZPI": (map_zpi, "private_insurance_orders"),
}
