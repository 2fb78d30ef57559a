# flake8: noqa
"""HL7 sample messages shared by the test modules."""


def segment(seg_type: str, values: dict) -> str:
    """Build a segment line from {field_number: text}; gaps become empty fields."""
    size = max(values) if values else 0
    return seg_type + "|" + "|".join(values.get(i, "") for i in range(1, size + 1))


def message(*lines: str) -> str:
    return "\r".join(lines) + "\r"


# ----------------- Generic lab profile (v2.3) -----------------
GENERIC_MSH = "MSH|^~\\&|GDML|GDML LAB|EMR|CLINIC|20190709151359||ORU^R01|MSG0001|P|2.3"

GENERIC_PID_1 = segment(
    "PID",
    {
        1: "1",
        2: "1234567890^AB^ON",
        3: "MRN001^^^GDML&MR&001~MRN002",
        5: "DOE^JANE^Q",
        7: "19800102",
        8: "F",
        11: "12 MAIN ST^APT 4^TORONTO^ON^M5V1A1^CA",
        13: "(416)555-0100~(416)555-0199",
    },
)
GENERIC_ZDR = segment("ZDR", {1: "1", 2: "OP", 3: "12345^^^CPSO", 4: "JOHN^SMITH", 6: "4165550000"})
GENERIC_ORC = "ORC|RE|PL001|FL001"
GENERIC_OBR_1 = segment(
    "OBR",
    {
        1: "1",
        2: "PL001",
        3: "FL001^GDML",
        4: "GLU^Glucose^^CH",
        5: "R",
        6: "20190709080000",
        7: "20190709081500",
        14: "20190709090000",
        16: "12345^SMITH^J",
        22: "20190709151359",
        24: "CH",
        25: "F",
        28: "12345^SMITH^J~67890^BROWN^K",
    },
)
GENERIC_OBX_1 = segment(
    "OBX",
    {
        1: "1",
        2: "NM",
        3: "GLU^Glucose",
        5: "5.4",
        6: "mmol/L",
        7: "3.6-6.1^^3.6^6.1",
        8: "N",
        10: "F",
        11: "F",
        14: "20190709120000",
    },
)
GENERIC_PID_2 = segment("PID", {1: "2", 3: "MRN999", 5: "ROE^RICHARD", 7: "19751212", 8: "M"})
GENERIC_OBR_2 = segment("OBR", {1: "1", 2: "PL002", 4: "HGB^Hemoglobin", 7: "20190709081500"})
GENERIC_OBX_2 = segment(
    "OBX",
    {1: "1", 2: "NM", 3: "HGB^Hemoglobin", 5: "140\\.br\\", 6: "g/L", 7: "\\.br\\130-170", 11: "F"},
)

GENERIC = message(
    GENERIC_MSH,
    GENERIC_PID_1,
    "NTE|1|L|Patient fasting",
    GENERIC_ZDR,
    GENERIC_ORC,
    GENERIC_OBR_1,
    GENERIC_OBX_1,
    "NTE|1|L|Non-fasting sample",
    GENERIC_PID_2,
    GENERIC_OBR_2,
    GENERIC_OBX_2,
)

# ----------------- EMR profile, Ontario (v2.3.1) -----------------
ONTARIO_MSH = (
    "MSH|^~\\&|LIFELABS|LIFELABS^2.16.840.1.113883.3.59.1|EMR|CLINIC|20240105103000"
    "||ORU^R01|CTRL123|P|2.3.1"
)
ONTARIO_PID = segment(
    "PID",
    {
        1: "1",
        3: "1234567890^^^ON^JHN^^^^ON^^AB~MR123^^^LAB^MR",
        5: "SMITH^JOHN^A~JOHNNY^SMITH",
        7: "19700101",
        8: "M",
        11: "1 KING ST^UNIT 2^TORONTO^ON^M5H1A1^CA",
        13: "^PRN^PH~4165559999",
    },
)
ONTARIO_PV1 = segment("PV1", {1: "1", 2: "O", 3: "CLINIC"})
ONTARIO_ORC = segment(
    "ORC",
    {1: "RE", 3: "F123^LAB", 4: "1234567890^LIFELABS", 5: "CM", 12: "12345^WELBY^M", 16: "CR^Corrected"},
)
ONTARIO_OBR = segment(
    "OBR",
    {
        1: "1",
        2: "P123",
        3: "F123^LIFELABS",
        4: "GLU^Glucose",
        7: "20240105080000",
        14: "20240105090000",
        16: "12345^WELBY^M",
        22: "20240105103000",
        24: "CH",
        25: "F",
        28: "11111^JONES^A",
    },
)
ONTARIO_OBX_1 = segment(
    "OBX",
    {
        1: "1",
        2: "NM",
        3: "GLU^Glucose^LN",
        5: "5.4",
        6: "mmol/L",
        7: "3.6-6.1",
        8: "N",
        11: "F",
        14: "20240105100000",
        15: "LAB1^LifeLabs&100 International Blvd&&Toronto&ON&M9W6J6&CA",
    },
)
ONTARIO_OBX_2 = segment("OBX", {1: "2", 2: "TX", 3: "COM^Comment", 5: "Line one~Line two\\.br\\", 11: "F"})

ONTARIO = message(
    ONTARIO_MSH,
    ONTARIO_PID,
    ONTARIO_PV1,
    ONTARIO_ORC,
    ONTARIO_OBR,
    ONTARIO_OBX_1,
    "NTE|1|L|Result verified",
    ONTARIO_OBX_2,
)

ONTARIO_RTF = message(
    ONTARIO_MSH,
    ONTARIO_PID,
    segment("OBR", {1: "1", 4: "DOC^Consult note", 24: "CD", 25: "F"}),
    segment("OBX", {1: "1", 2: "ED", 3: "RTF^Report", 5: "{\\E\\rtf1\\E\\ansi Consult report}", 11: "F"}),
)

# ----------------- EMR profile, BC (v2.3) -----------------
BC_MSH = "MSH|^~\\&|EXCELLERIS|BCLAB|EMR|CLINIC|20240105103000||ORU^R01|BC1|P|2.3"
BC_PID = segment(
    "PID",
    {
        2: "9876543210",
        3: "9876543210^^^BC",
        5: "DOE^JOHN",
        7: "19600315",
        8: "M",
        11: "5 MAIN ST^^VANCOUVER^BC^V5K0A1",
        13: "6045551234",
    },
)
BC_PDF_OBX_VALUE = "^application^pdf^Base64^JVBERi0xLjQK"
BC_PDF = message(
    BC_MSH,
    BC_PID,
    segment("PV1", {1: "1", 2: "O", 3: "CLINIC"}),
    segment("OBR", {1: "1", 4: "TRN^Transcription", 24: "TRN", 25: "F"}),
    segment("OBX", {1: "1", 2: "ED", 3: "PDF^Report", 5: BC_PDF_OBX_VALUE, 11: "F"}),
)
