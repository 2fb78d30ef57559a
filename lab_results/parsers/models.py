# ===============================
# File: lab_results/parsers/models.py
# ===============================
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class Record(BaseModel):
    """Base for every output record: snake_case in Python, camelCase on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_dict(self) -> dict:
        return self.model_dump(by_alias=True)


# ----------------- Shared pieces -----------------
class MessageType(Record):
    message_code: str = "ORU"
    trigger_event: str = "R01"


class Note(Record):
    set_id: str = ""
    comment_or_source: str = ""
    comment: str = ""
    comment2: str = ""


class EmrNote(Record):
    set_id: str = ""
    source_of_comment: str = ""
    comment: str = ""


class Physician(Record):
    physician: str = ""
    physician_name: str = ""
    physician_ohip: Optional[str] = Field(default=None, alias="physicianOHIP")
    family_name: Optional[str] = None
    first_initial: Optional[str] = None


class CopyTo(Record):
    id_number: str = ""
    family_name: str = ""
    given_name: str = ""
    assigning_facility: str = ""


class ExternalOrderId(Record):
    unique_id: str = ""
    filler_application_id: str = ""


class Address(Record):
    street: str = ""
    apt: Optional[str] = None
    other_designation: Optional[str] = None
    city: str = ""
    province: str = ""
    postal_code: str = ""
    country: Optional[str] = None


class PatientName(Record):
    family_name: str = ""
    given_name: str = ""
    middle_name: str = ""
    name_type: Optional[str] = None


# ----------------- Header -----------------
class MessageHeader(Record):
    field_separator: str = "|"
    encoding_characters: str = "^~\\&"
    sending_application: str = ""
    sending_facility: str = ""
    receiving_application: str = ""
    receiving_facility: str = ""
    message_date_time: str = ""
    security: Optional[str] = None
    message_type: MessageType = Field(default_factory=MessageType)
    message_control_id: str = ""
    processing_id: str = "P"
    version_id: str = "2.3"
    sequence_number: Optional[str] = None
    continuation_pointer: Optional[str] = None
    accept_acknowledgement_type: Optional[str] = None
    application_acknowledgement_type: Optional[str] = None
    country_code: Optional[str] = None
    character_set: Optional[str] = None
    principal_language_of_message: Optional[str] = None


class SendingFacility(Record):
    namespace_id: str = Field(default="", alias="namespaceID")
    universal_id: str = Field(default="", alias="universalID")


class EmrMessageHeader(Record):
    field_separator: str = "|"
    encoding_characters: str = "^~\\&"
    sending_application: str = ""
    sending_facility: SendingFacility = Field(default_factory=SendingFacility)
    receiving_application: str = ""
    receiving_facility: str = ""
    message_date_time: str = ""
    message_type: MessageType = Field(default_factory=MessageType)
    message_control_id: str = ""
    processing_id: str = "P"
    version_id: str = "2.3"


# ----------------- Observation -----------------
class ObservationIdentifier(Record):
    gdml_test_code: str = ""
    test_component_id: str = ""
    test_name: str = ""
    alt_ident_code: str = ""
    alt_ident_txt: str = ""
    alt_ident_coding: str = ""


class ReferenceRange(Record):
    # both shapes are kept: partners send either free lines or structured sub-fields
    lines: List[str] = Field(default_factory=list)
    legacy: str = ""
    formatted: str = ""
    low_value: str = ""
    high_value: str = ""


class Observation(Record):
    set_id: str = ""
    value_type: str = ""
    observation_identifier: ObservationIdentifier = Field(default_factory=ObservationIdentifier)
    observation_sub_id: str = ""
    observation_results: List[str] = Field(default_factory=list)
    units: str = ""
    reference_range: ReferenceRange = Field(default_factory=ReferenceRange)
    abnormal_flag: str = ""
    probability: Optional[str] = None
    observation_result_status_legacy: str = ""
    observation_result_status: str = ""
    date_last_observed_normal_values: str = ""
    user_defined_access_checks: Optional[str] = None
    date_time_of_observation: str = ""
    producers_id: Optional[str] = None
    responsible_observer: Optional[str] = None
    observation_method: Optional[str] = None
    notes: List[Note] = Field(default_factory=list)


class EmrObservationIdentifier(Record):
    identifier: str = ""
    text: str = ""
    coding_system: str = ""


class ProducerId(Record):
    id: str = ""
    name: str = ""
    address: Optional[Address] = None


class EmrObservation(Record):
    set_id: str = ""
    value_type: str = ""
    observation_identifier: EmrObservationIdentifier = Field(
        default_factory=EmrObservationIdentifier
    )
    observation_sub_id: str = ""
    observation_results: Union[str, List[str]] = ""
    units: str = ""
    reference_range: str = ""
    abnormal_flags: str = ""
    observation_result_status: str = ""
    date_time_of_observation: str = ""
    producers_id: Optional[ProducerId] = None
    notes: List[EmrNote] = Field(default_factory=list)


# ----------------- Lab result (OBR) -----------------
class FillerOrderNumber(Record):
    id: str = ""
    application_id: str = ""


class UniversalServiceId(Record):
    gdml_test_code: str = ""
    test_name: str = ""
    moh_test_code: Optional[str] = None
    department: Optional[str] = None


class LabResult(Record):
    set_id: str = ""
    placer_order_number: str = ""
    filler_order_number: FillerOrderNumber = Field(default_factory=FillerOrderNumber)
    universal_service_id: UniversalServiceId = Field(default_factory=UniversalServiceId)
    priority: str = ""
    requested_date_time: str = ""
    collection_date_time: str = ""
    observation_end_date_time: str = ""
    collection_volume: Optional[str] = None
    collector_identifier: Optional[str] = None
    specimen_action_flag: str = "N"
    danger_code: Optional[str] = None
    relevant_clinical_information: Optional[str] = None
    specimen_received_date_time: str = ""
    specimen_source: Optional[str] = None
    ordering_physician: Physician = Field(default_factory=Physician)
    order_callback_phone_number: Optional[str] = None
    placer_field1: Optional[str] = None
    placer_field2: Optional[str] = None
    filler_field1: Optional[str] = None
    filler_field2: Optional[str] = None
    reported_date_time: str = ""
    charge_to_practice: Optional[str] = None
    diagnostic_service_section_id: Optional[str] = None
    result_status: str = ""
    parent_result: Optional[str] = None
    quantity_timing: Optional[str] = None
    result_copies_to: List[CopyTo] = Field(default_factory=list)
    parent_number: Optional[str] = None
    transportation_mode: Optional[str] = None
    reason_for_study: Optional[str] = None
    principal_result_interpreter: Optional[str] = None
    assistant_result_interpreter: Optional[str] = None
    technician: Optional[str] = None
    transcriptionist: Optional[str] = None
    scheduled_date_time: str = ""
    number_of_sample_containers: Optional[str] = None
    transport_logistics: Optional[str] = None
    collectors_comment: Optional[str] = None
    transport_arrangement_responsibility: Optional[str] = None
    transport_arranged: Optional[str] = None
    escort_required: Optional[str] = None
    planned_patient_transport: Optional[str] = None
    observations: List[Observation] = Field(default_factory=list)
    notes: List[Note] = Field(default_factory=list)


class EmrLabResult(Record):
    placer_order_number: str = ""
    filler_order_number: str = ""
    filler_order_source: Optional[str] = None
    universal_service_id: UniversalServiceId = Field(default_factory=UniversalServiceId)
    requested_date_time: str = ""
    collection_date_time: str = ""
    specimen_received_date_time: str = ""
    ordering_physician: Optional[Physician] = None
    reported_date_time: str = ""
    diagnostic_service_section_id: str = ""
    result_status: str = ""
    result_copies_to: List[CopyTo] = Field(default_factory=list)
    observations: List[EmrObservation] = Field(default_factory=list)
    notes: List[EmrNote] = Field(default_factory=list)


# ----------------- Order (ORC) -----------------
class PhysicianAddress(Record):
    street_address: Optional[str] = None
    other_designation: Optional[str] = None
    city: Optional[str] = None
    province: Optional[str] = None
    postal_code: Optional[str] = None
    country: Optional[str] = None


class Order(Record):
    order_control: str = ""
    placer_order_number: Optional[str] = None
    filler_order_number: Optional[str] = None
    patient_id_external: Optional[ExternalOrderId] = None
    order_status: str = ""
    response_flag: Optional[str] = None
    quantity_timing: Optional[str] = None
    parent_order: Optional[str] = None
    transaction_date_time: str = ""
    ordering_physician_address: Optional[PhysicianAddress] = None
    lab_results: List[LabResult] = Field(default_factory=list)


class OrderControlReason(Record):
    code: str = ""
    reason: str = ""


class EmrOrder(Record):
    order_control: str = ""
    filler_order_number: str = ""
    patient_id_external: Optional[ExternalOrderId] = None
    order_status: str = ""
    order_control_code_reason: Optional[OrderControlReason] = None
    ordering_physician: Optional[Physician] = None
    lab_results: List[EmrLabResult] = Field(default_factory=list)


# ----------------- Extension segments (generic only) -----------------
class ZdrPhysician(Record):
    physician_client_number: str = ""
    alternate_address_number: Optional[str] = None
    regulatory_body_type: Optional[str] = None
    regulatory_body_id: Optional[str] = None


class ZdrPhysicianName(Record):
    name: str = ""
    last_name: str = ""
    middle_name: str = ""


class ZdrAddress(Record):
    address_line1: str = ""
    address_line2: str = ""
    city: str = ""
    province: str = ""
    postal_code: str = ""


class CourierRoutes(Record):
    route1: Optional[str] = None
    route2: Optional[str] = None
    route3: Optional[str] = None


class Zdr(Record):
    """Physician / demographic routing."""

    set_id: str = ""
    segment_type: str = ""
    physician: ZdrPhysician = Field(default_factory=ZdrPhysician)
    physician_name: ZdrPhysicianName = Field(default_factory=ZdrPhysicianName)
    physician_address: ZdrAddress = Field(default_factory=ZdrAddress)
    telephone: str = ""
    slot_code: Optional[str] = None
    courier_routes: CourierRoutes = Field(default_factory=CourierRoutes)


class Zex(Record):
    """Exception raised by the lab against the order."""

    set_id: str = ""
    exception_code: str = ""
    exception_text: str = ""
    pid_id: Optional[str] = None
    obr_id: Optional[str] = None
    obx_id: Optional[str] = None


class Ztx(Record):
    """Forensic toxicology order."""

    location: Optional[str] = None
    requisition_number: Optional[str] = None
    client_reference_number: Optional[str] = None
    toxicology_collection_site: Optional[str] = None
    toxicology_company_number: Optional[str] = None
    toxicology_company_name: Optional[str] = None
    collectors_name: Optional[str] = None
    collection_site_name: Optional[str] = None
    collection_site_address1: Optional[str] = None
    collection_site_address2: Optional[str] = None
    collection_site_city: Optional[str] = None
    collection_site_province: Optional[str] = None
    collection_site_postal_code: Optional[str] = None
    toxicology_secondary_specimen_id: Optional[str] = None


class Zct(Record):
    """Clinical trial order."""

    location: Optional[str] = None
    requisition_number: Optional[str] = None
    study_number: Optional[str] = None
    investigator_site: Optional[str] = None
    subject_number: Optional[str] = None
    clinical_trial_subject_initials: Optional[str] = None
    screening_number: Optional[str] = None
    randomization_number: Optional[str] = None
    visit_number: Optional[str] = None
    visit_name: Optional[str] = None
    visit_type: Optional[str] = None


class Zcy(Record):
    """Cytology order."""

    location: Optional[str] = None
    requisition_number: Optional[str] = None
    pathologist: Optional[str] = None


class Zpi(Record):
    """Private insurance order."""

    ticket: str = ""
    policy_number: Optional[str] = None
    examiner_code: Optional[str] = None
    insurance_type: Optional[str] = None
    insurance_amount: Optional[str] = None
    date_time_last_food_taken: str = ""
    insurance_agent: Optional[str] = None
    agent_province_code: Optional[str] = None
    examining_company: Optional[str] = None
    examining_province_code: Optional[str] = None
    specimen_temperature: Optional[str] = None
    mensus_flag: Optional[str] = None


# ----------------- Patient -----------------
class PatientIdInternal(Record):
    unique_identifier: str = ""
    version_number: str = ""
    province_code: str = ""
    client_reference_id: str = ""
    client_type: str = ""
    assigning_authority: str = ""
    jurisdiction: str = ""


class AssigningFacility(Record):
    authority: str = ""
    identifier_type: str = ""
    facility_id: str = ""


class ExternalId(Record):
    unique_identifier: str = ""
    assigning_facility: AssigningFacility = Field(default_factory=AssigningFacility)


class EmrExternalId(Record):
    unique_identifier: str = ""
    assigning_authority: str = ""
    identifier_type_code: str = ""
    assigning_jurisdiction: str = ""
    id_version_code: str = ""


class Patient(Record):
    set_id: str = ""
    patient_id_internal: PatientIdInternal = Field(default_factory=PatientIdInternal)
    patient_id_external: List[ExternalId] = Field(default_factory=list)
    alternate_external_patient_id: Optional[str] = None
    names: List[PatientName] = Field(default_factory=list)
    mothers_maiden_name: Optional[str] = None
    date_of_birth: str = ""
    sex: str = ""
    patient_alias: Optional[str] = None
    race: Optional[str] = None
    addresses: List[Address] = Field(default_factory=list)
    county_code: Optional[str] = None
    phone_numbers: List[str] = Field(default_factory=list)
    alternate_phone_number: Optional[str] = None
    primary_language: Optional[str] = None
    marital_status: Optional[str] = None
    religion: Optional[str] = None
    patient_account_number: Optional[str] = None
    ssn_number: Optional[str] = None
    drivers_license_number: Optional[str] = None
    mothers_identifier: Optional[str] = None
    ethnic_group: Optional[str] = None
    birth_place: Optional[str] = None
    multiple_birth_indicator: Optional[str] = None
    birth_order: Optional[str] = None
    citizenship: Optional[str] = None
    veterans_medical_status: Optional[str] = None
    nationality_code: Optional[str] = None
    patient_death_date_time: str = ""
    patient_death_indicator: Optional[str] = None
    notes: List[Note] = Field(default_factory=list)
    orders: List[Order] = Field(default_factory=list)
    zdrs: List[Zdr] = Field(default_factory=list)
    exceptions: List[Zex] = Field(default_factory=list)
    forensic_toxicology_orders: List[Ztx] = Field(default_factory=list)
    clinical_trials_orders: List[Zct] = Field(default_factory=list)
    cytology_orders: List[Zcy] = Field(default_factory=list)
    private_insurance_orders: List[Zpi] = Field(default_factory=list)


class PatientLocation(Record):
    patient_class: str = ""
    patient_location_id: str = ""


class EmrPatient(Record):
    patient_id_internal: Optional[str] = None
    patient_id_external: List[Union[EmrExternalId, str]] = Field(default_factory=list)
    alternate_patient_id: str = ""
    names: List[PatientName] = Field(default_factory=list)
    date_of_birth: str = ""
    sex: str = ""
    addresses: List[Address] = Field(default_factory=list)
    phone_numbers: List[str] = Field(default_factory=list)
    location: Optional[PatientLocation] = None
    source_format: str = ""
    is_report_document: Optional[bool] = None
    document_type: Optional[str] = None
    report_type: Optional[str] = None
    notes: List[EmrNote] = Field(default_factory=list)
    orders: List[EmrOrder] = Field(default_factory=list)


# ----------------- Message -----------------
class ParsedMessage(Record):
    message_header: Optional[Union[MessageHeader, EmrMessageHeader]] = None
    patients: List[Union[Patient, EmrPatient]] = Field(default_factory=list)
    is_ontario_format: Optional[bool] = None
    is_document_report: Optional[bool] = None
    report_type: Optional[str] = None
