from __future__ import annotations

import json
import math
import uuid
from datetime import date, datetime
from decimal import Decimal
from typing import Any

from pydantic import BaseModel


def to_jsonable(value: Any):
    """
    Recursively convert arbitrary Python values (records, datetimes, Decimals ...)
    into JSON-serializable primitives. Product records dump by column name.
    """
    if isinstance(value, BaseModel):
        return to_jsonable(value.model_dump(by_alias=True, exclude={"platform"}))
    if isinstance(value, Decimal):
        f = float(value)
        if math.isnan(f) or math.isinf(f):
            return None
        return f
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, uuid.UUID):
        return str(value)
    if isinstance(value, (list, tuple, set)):
        return [to_jsonable(v) for v in value]
    if isinstance(value, dict):
        return {str(k): to_jsonable(v) for k, v in value.items()}
    if isinstance(value, float):
        if math.isnan(value) or math.isinf(value):
            return None
    return value


def canonical_json(value: Any) -> str:
    """Stable text form: sorted keys, no whitespace, unicode kept as-is."""
    return json.dumps(to_jsonable(value), sort_keys=True, separators=(",", ":"), ensure_ascii=False)
