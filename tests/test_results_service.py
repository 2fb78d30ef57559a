import json
from pathlib import Path

import pytest
import yaml

from lab_results.commons.hl7_engine import HL7Engine
from lab_results.commons.types import PathsCfg, Settings
from lab_results.services.results_service import ResultsService
from samples import GENERIC, ONTARIO


@pytest.fixture
def paths(tmp_path):
    return PathsCfg(
        logs_root=str(tmp_path / "logs"),
        inbox=str(tmp_path / "inbox"),
        outbox=str(tmp_path / "outbox"),
        archive=str(tmp_path / "archive"),
        error=str(tmp_path / "error"),
    )


@pytest.fixture
def service(paths):
    return ResultsService(HL7Engine(), paths)


def drop(paths, name, text):
    p = Path(paths.inbox) / name
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(text, encoding="utf-8")
    return p


def test_good_file_goes_to_outbox_and_archive(service, paths, tmp_path):
    src = drop(paths, "lab1.hl7", GENERIC)
    out = service.process_file(src)
    assert out == tmp_path / "outbox" / "lab1.json"
    payload = json.loads(out.read_text(encoding="utf-8"))
    assert payload["messageHeader"]["messageControlId"] == "MSG0001"
    assert not src.exists()
    assert (tmp_path / "archive" / "lab1.hl7").exists()


def test_bad_file_goes_to_error(service, paths, tmp_path):
    src = drop(paths, "broken.hl7", "PID|1||X\rOBX|1|NM|GLU||5")
    assert service.process_file(src) is None
    assert (tmp_path / "error" / "broken.hl7").exists()
    assert not (tmp_path / "outbox" / "broken.json").exists()


def test_backlog_keeps_going_after_failure(service, paths, tmp_path):
    drop(paths, "a.hl7", GENERIC)
    drop(paths, "b.hl7", "not hl7 at all")
    drop(paths, "c.hl7", ONTARIO)
    written = service.process_backlog("*.hl7")
    assert [p.name for p in written] == ["a.json", "c.json"]
    assert (tmp_path / "error" / "b.hl7").exists()


def test_empty_backlog(service):
    assert service.process_backlog() == []


def test_latin1_file_is_read(service, paths):
    src = Path(paths.inbox) / "latin.hl7"
    src.parent.mkdir(parents=True, exist_ok=True)
    src.write_bytes(GENERIC.replace("DOE^JANE", "MUÑOZ^JANE").encode("latin-1"))
    out = service.process_file(src)
    payload = json.loads(out.read_text(encoding="utf-8"))
    assert payload["patients"][0]["names"][0]["familyName"] == "MUÑOZ"


def test_engine_from_dict_config():
    engine = HL7Engine({"parsers": {"override": "EMR", "remove_empty_fields": False}})
    assert engine.cfg.parsers.override == "EMR"
    out = engine.parse(ONTARIO)
    assert out["isOntarioFormat"] is True
    # nothing pruned: empty placeholders stay
    assert out["patients"][0]["notes"] == []


def test_engine_from_yaml_config(tmp_path):
    cfg = tmp_path / "settings.yaml"
    cfg.write_text(
        yaml.safe_dump({"parsers": {"include_document_content": True}, "logging": {"level": "DEBUG"}}),
        encoding="utf-8",
    )
    engine = HL7Engine(str(cfg))
    assert engine.cfg.logging.level == "DEBUG"
    assert engine.normalizer.include_document_content is True
    assert engine.cfg.paths == PathsCfg()


def test_engine_accepts_settings():
    settings = Settings()
    assert HL7Engine(settings).cfg is settings


def test_byte_order_mark_is_ignored(service, paths):
    src = Path(paths.inbox) / "bom.hl7"
    src.parent.mkdir(parents=True, exist_ok=True)
    src.write_bytes(b"\xef\xbb\xbf" + GENERIC.encode("utf-8"))
    out = service.process_file(src)
    assert out is not None
    payload = json.loads(out.read_text(encoding="utf-8"))
    assert payload["messageHeader"]["messageControlId"] == "MSG0001"
