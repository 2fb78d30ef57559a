# flake8: noqa

from lab_results.commons.hl7_normalizer import HL7Normalizer
from lab_results.parsers import emr
from lab_results.parsers.base import tokenize
from lab_results.parsers.models import EmrMessageHeader, EmrPatient
from samples import BC_PDF, BC_PDF_OBX_VALUE, ONTARIO, ONTARIO_RTF


def ontario_result(out):
    return out["patients"][0]["orders"][0]["labResults"][0]


def test_ontario_message_flags():
    out = HL7Normalizer().parse(ONTARIO)
    assert out["isOntarioFormat"] is True
    assert out["isDocumentReport"] is False
    assert out["reportType"] == "Chemistry"
    assert list(out)[:2] == ["messageHeader", "patients"]


def test_ontario_header():
    header = HL7Normalizer().parse(ONTARIO)["messageHeader"]
    assert header["sendingFacility"] == {
        "namespaceID": "LIFELABS",
        "universalID": "2.16.840.1.113883.3.59.1",
    }
    assert header["versionId"] == "2.3.1"
    assert header["messageControlId"] == "CTRL123"
    assert header["messageDateTime"] == "2024-01-05T10:30:00"


def test_ontario_patient():
    patient = HL7Normalizer().parse(ONTARIO)["patients"][0]
    assert patient["patientIdExternal"] == [
        {
            "uniqueIdentifier": "1234567890",
            "assigningAuthority": "ON",
            "identifierTypeCode": "JHN",
            "assigningJurisdiction": "ON",
            "idVersionCode": "AB",
        },
        {"uniqueIdentifier": "MR123", "assigningAuthority": "LAB", "identifierTypeCode": "MR"},
    ]
    assert [n["nameType"] for n in patient["names"]] == ["L", "L"]
    assert patient["names"][0] == {
        "familyName": "SMITH",
        "givenName": "JOHN",
        "middleName": "A",
        "nameType": "L",
    }
    # components without a number are dropped
    assert patient["phoneNumbers"] == ["4165559999"]
    assert patient["addresses"][0]["otherDesignation"] == "UNIT 2"
    assert patient["location"] == {"patientClass": "O", "patientLocationId": "CLINIC"}
    assert patient["sourceFormat"] == "Ontario"
    assert "isReportDocument" not in patient


def test_ontario_order():
    order = HL7Normalizer().parse(ONTARIO)["patients"][0]["orders"][0]
    assert order["orderControl"] == "RE"
    assert order["fillerOrderNumber"] == "F123"
    assert order["patientIdExternal"] == {"uniqueId": "1234567890", "fillerApplicationId": "LIFELABS"}
    assert order["orderControlCodeReason"] == {"code": "CR", "reason": "Corrected"}
    assert order["orderingPhysician"] == {
        "physician": "12345",
        "physicianName": "WELBY",
        "familyName": "WELBY",
        "firstInitial": "M",
    }


def test_ontario_result():
    result = ontario_result(HL7Normalizer().parse(ONTARIO))
    assert result["placerOrderNumber"] == "P123"
    assert result["fillerOrderNumber"] == "F123"
    assert result["fillerOrderSource"] == "LIFELABS"
    assert result["diagnosticServiceSectionId"] == "CH"
    assert result["resultCopiesTo"] == [{"idNumber": "11111", "familyName": "JONES", "givenName": "A"}]


def test_ontario_observations():
    first, second = ontario_result(HL7Normalizer().parse(ONTARIO))["observations"]
    assert first["observationIdentifier"] == {
        "identifier": "GLU",
        "text": "Glucose",
        "codingSystem": "LN",
    }
    assert first["observationResults"] == "5.4"
    assert first["referenceRange"] == "3.6-6.1"
    assert first["abnormalFlags"] == "N"
    assert first["producersId"] == {
        "id": "LAB1",
        "name": "LifeLabs",
        "address": {
            "street": "100 International Blvd",
            "city": "Toronto",
            "province": "ON",
            "postalCode": "M9W6J6",
            "country": "CA",
        },
    }
    assert first["notes"] == [{"setId": "1", "sourceOfComment": "L", "comment": "Result verified"}]
    assert second["observationResults"] == ["Line one", "Line two"]


def test_ontario_rtf_placeholder():
    out = HL7Normalizer().parse(ONTARIO_RTF)
    assert out["isDocumentReport"] is True
    assert out["reportType"] == "Clinical Documents"
    patient = out["patients"][0]
    assert patient["isReportDocument"] is True
    assert patient["documentType"] == "RTF"
    assert patient["reportType"] == "Clinical Documents"
    obs = ontario_result(out)["observations"][0]
    assert obs["observationResults"] == emr.RTF_PLACEHOLDER


def test_ontario_rtf_content_included():
    out = HL7Normalizer(include_document_content=True).parse(ONTARIO_RTF)
    obs = ontario_result(out)["observations"][0]
    assert obs["observationResults"] == "{\\E\\rtf1\\E\\ansi Consult report}"


def test_bc_pdf_placeholder():
    out = HL7Normalizer(override="EMR").parse(BC_PDF)
    assert out["isOntarioFormat"] is False
    assert out["isDocumentReport"] is True
    assert out["reportType"] == "Transcription"
    obs = ontario_result(out)["observations"][0]
    assert obs["observationResults"] == emr.PDF_PLACEHOLDER
    assert "producersId" not in obs


def test_bc_pdf_content_included():
    out = HL7Normalizer(override="EMR", include_document_content=True).parse(BC_PDF)
    obs = ontario_result(out)["observations"][0]
    assert obs["observationResults"] == BC_PDF_OBX_VALUE


def test_bc_patient():
    out = HL7Normalizer(override="EMR").parse(BC_PDF)
    patient = out["patients"][0]
    assert patient["patientIdInternal"] == "9876543210"
    assert patient["patientIdExternal"] == ["9876543210^^^BC"]
    assert patient["names"] == [{"familyName": "DOE", "givenName": "JOHN"}]
    assert patient["addresses"] == [
        {"street": "5 MAIN ST", "city": "VANCOUVER", "province": "BC", "postalCode": "V5K0A1"}
    ]
    assert patient["phoneNumbers"] == ["6045551234"]
    assert patient["sourceFormat"] == "BC"
    assert patient["documentType"] == "PDF"
    # visit segments are only read for Ontario
    assert "location" not in patient


def test_bc_header():
    header = HL7Normalizer(override="EMR").parse(BC_PDF)["messageHeader"]
    assert header["sendingFacility"] == {"namespaceID": "BCLAB"}
    assert header["versionId"] == "2.3"


def test_second_patient_replaces_first():
    second = "PID|1||2222222222^^^ON^JHN||||19900101|F"
    text = ONTARIO.rstrip("\r") + "\r" + second + "\r"
    msg = HL7Normalizer().normalize(text)
    assert len(msg.patients) == 1
    assert msg.patients[0].date_of_birth == "1990-01-01T00:00:00"


def test_normalize_returns_emr_models():
    msg = HL7Normalizer().normalize(ONTARIO)
    assert isinstance(msg.message_header, EmrMessageHeader)
    assert isinstance(msg.patients[0], EmrPatient)


def test_document_checks():
    rtf = tokenize(ONTARIO_RTF)
    assert emr.check_rtf_report(rtf) is True
    assert emr.check_pdf_report(rtf, "Clinical Documents") is False
    pdf = tokenize(BC_PDF)
    assert emr.check_pdf_report(pdf, "Transcription") is True
    assert emr.check_pdf_report(pdf, "Chemistry") is False
    # more than one observation is never a document report
    assert emr.check_rtf_report(tokenize(ONTARIO)) is False


def test_context_properties():
    ctx = emr.EmrContext(is_ontario=True, is_pdf_report=True)
    assert ctx.is_document_report
    assert ctx.document_type == "PDF"
    assert ctx.source_format == "Ontario"
    assert emr.EmrContext().document_type is None
