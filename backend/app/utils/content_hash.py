from __future__ import annotations

import hashlib
from typing import Any

from app.utils.serialization import canonical_json


'''
Content address of a generation batch: sha256 over the canonical JSON.
Same payloads in the same order -> same digest, in any process.
Key order inside a payload does not matter, payload order does.
'''
def content_digest(value: Any) -> str:
    raw = canonical_json(value).encode("utf-8")
    return hashlib.sha256(raw).hexdigest()
