from __future__ import annotations

import json
from pathlib import Path

ERROR_REGISTRY = Path(__file__).resolve().with_name("error-registry.json")


def _load_registry() -> dict[str, int]:
    payload = json.loads(ERROR_REGISTRY.read_text(encoding="utf-8"))
    mapping: dict[str, int] = {}
    for row in payload.get("codes", []):
        mapping[str(row["name"])] = int(row["code"])
    return mapping


_REG = _load_registry()

OK = _REG["BOOT_OK"]
ERR_USAGE = _REG["BOOT_ERR_USAGE"]
ERR_CONFIG = _REG["BOOT_ERR_CONFIG"]
ERR_PREREQ = _REG["BOOT_ERR_PREREQ"]
ERR_TIMEOUT = _REG["BOOT_ERR_TIMEOUT"]
ERR_STEP = _REG["BOOT_ERR_STEP"]
ERR_INTERNAL = _REG["BOOT_ERR_INTERNAL"]
