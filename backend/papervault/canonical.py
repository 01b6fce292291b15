from typing import Any
import json

def canonical_json_bytes(obj: Any) -> bytes:
    s = json.dumps(obj, ensure_ascii=False, separators=(',', ':'), sort_keys=True)
    return s.encode('utf-8')

def parse_json_bytes(data: bytes) -> Any:
    return json.loads(bytes(data).decode('utf-8'))
