from pydantic import ValidationError

from .canonical import canonical_json_bytes, parse_json_bytes
from .errors import DecodeError
from .models import Paper


def encode_paper(paper: Paper) -> bytes:
    return canonical_json_bytes(paper.to_payload())


def decode_paper(paper_id: str, data: bytes) -> Paper:
    """Decode a stored record blob.

    Empty data is not a record: callers check for presence before decoding.
    Anything non-empty that is not a well-formed payload raises DecodeError.
    """
    if not data:
        raise ValueError("decode_paper called with empty data; check presence first")
    try:
        payload = parse_json_bytes(data)
    except (UnicodeDecodeError, ValueError) as e:
        raise DecodeError(f"record is not valid JSON: {e}", paper_id=paper_id, operation="decode") from e
    if not isinstance(payload, dict):
        raise DecodeError("record payload is not an object", paper_id=paper_id, operation="decode")
    try:
        return Paper.model_validate({**payload, "id": paper_id})
    except ValidationError as e:
        raise DecodeError(f"record payload invalid: {e.error_count()} error(s)", paper_id=paper_id,
                          operation="decode") from e
