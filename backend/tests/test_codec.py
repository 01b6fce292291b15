import json

import pytest

from papervault.codec import decode_paper, encode_paper
from papervault.errors import DecodeError
from papervault.models import Paper, PaperStatus


def _paper(**overrides):
    fields = dict(
        id="1700000000000-abc1234", title="T", abstract="A", category="Physics",
        encrypted_content_id="FHE-NDI=", price=0.1, owner="0xAbC", created_at=1_700_000_000,
    )
    fields.update(overrides)
    return Paper(**fields)


@pytest.mark.parametrize("status", list(PaperStatus))
@pytest.mark.parametrize("citations", [0, 3])
def test_round_trip(status, citations):
    p = _paper(status=status, citations=citations)
    assert decode_paper(p.id, encode_paper(p)) == p


def test_round_trip_with_defaults():
    p = _paper()
    assert p.status == PaperStatus.PENDING and p.citations == 0
    assert decode_paper(p.id, encode_paper(p)) == p


def test_encoded_payload_uses_persisted_keys():
    payload = json.loads(encode_paper(_paper()))
    assert set(payload) == {
        "title", "abstract", "encryptedContentId", "price", "owner",
        "timestamp", "category", "status", "citations",
    }
    assert payload["status"] == "pending"
    assert payload["timestamp"] == 1_700_000_000


def test_encode_is_deterministic():
    assert encode_paper(_paper()) == encode_paper(_paper())


def test_decode_defaults_missing_status_and_citations():
    payload = json.loads(encode_paper(_paper()))
    del payload["status"]
    payload["citations"] = None
    p = decode_paper("x", json.dumps(payload).encode())
    assert p.status == PaperStatus.PENDING
    assert p.citations == 0
    assert p.id == "x"


@pytest.mark.parametrize("blob", [b"{not json", b"[1, 2]", b'{"title": "only"}', b"\xff\xfe"])
def test_decode_malformed_raises(blob):
    with pytest.raises(DecodeError) as ei:
        decode_paper("bad-id", blob)
    assert ei.value.paper_id == "bad-id"


def test_decode_empty_is_caller_error():
    with pytest.raises(ValueError):
        decode_paper("x", b"")
