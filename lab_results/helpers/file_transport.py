import json
import shutil
from pathlib import Path
from typing import Any, List

XML_SUFFIXES = (".xml",)


def read_text(path: Path) -> str:
    # Partner files are mostly UTF-8 but some labs still send Latin-1
    try:
        return path.read_text(encoding="utf-8-sig")
    except UnicodeDecodeError:
        return path.read_text(encoding="latin-1")


def list_inbox(inbox: str, glob_pat: str) -> List[Path]:
    root = Path(inbox)
    root.mkdir(parents=True, exist_ok=True)
    return sorted(p for p in root.glob(glob_pat) if p.is_file())


class JsonSender:
    """Writes parsed payloads as JSON files into the outbox."""

    def __init__(self, outbox: str):
        self.outbox = Path(outbox)
        self.outbox.mkdir(parents=True, exist_ok=True)

    def send(self, name: str, payload: Any) -> Path:
        p = self.outbox / f"{name}.json"
        p.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")
        return p


def move_to(src: Path, folder: str) -> Path:
    dst_dir = Path(folder)
    dst_dir.mkdir(parents=True, exist_ok=True)
    dst = dst_dir / src.name
    shutil.move(str(src), dst)
    return dst
