from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from .contracts import CompositeCorpusResult, CompositeDocResult


def serialize_composite_result(result: CompositeCorpusResult | CompositeDocResult) -> str:
    """
    Stable JSON serialization: identical runs produce identical bytes.
    """

    payload: dict[str, Any] = result.to_dict()
    return json.dumps(payload, ensure_ascii=False, sort_keys=True, indent=2) + "\n"


def write_composite_ledger_json(
    *, result: CompositeCorpusResult | CompositeDocResult, out_ledger: Path
) -> None:
    out_ledger.parent.mkdir(parents=True, exist_ok=True)
    out_ledger.write_text(serialize_composite_result(result), encoding="utf-8")
