from __future__ import annotations

import json
import os
from typing import Any, Iterable

from .models import PolicyStatement


POLICY_VERSION = "2012-10-17"
INDENT = 4


def build_policy(statements: Iterable[PolicyStatement]) -> dict:
    # One entry per statement, duplicates included.
    return {
        "Version": POLICY_VERSION,
        "Statement": [st.to_dict() for st in statements],
    }


def serialize_policy(policy: dict) -> str:
    return json.dumps(policy, indent=INDENT)


def atomic_write_json(path: str, obj: Any) -> None:
    tmp_path = f"{path}.tmp"
    with open(tmp_path, "w", encoding="utf-8") as f:
        json.dump(obj, f, indent=INDENT, sort_keys=False, default=str)
        f.write("\n")
    os.replace(tmp_path, path)
