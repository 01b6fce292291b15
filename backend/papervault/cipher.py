"""Placeholder "encryption" for the gated content id.

This is a reversible text transform, not cryptography: anyone holding the
stored string can invert it. Access is gated only by the reveal ritual in
gate.py.
"""
import base64, binascii, math
from typing import Union

from .errors import FormatError

Number = Union[int, float]


class PlaceholderCipher:
    TAG = "FHE-"

    def encode(self, n: int) -> str:
        return self.TAG + base64.b64encode(str(int(n)).encode("ascii")).decode("ascii")

    def decode(self, s: str) -> Number:
        if s.startswith(self.TAG):
            try:
                text = base64.b64decode(s[len(self.TAG):], validate=True).decode("ascii")
            except (binascii.Error, UnicodeDecodeError) as e:
                raise FormatError(f"placeholder payload is not base64: {s!r}", operation="decode") from e
        else:
            # untagged values are stored plain
            text = s
        return _parse_number(text)


def _parse_number(text: str) -> Number:
    t = text.strip()
    # int/float also accept "1_000" and non-ASCII digits
    if not t.isascii() or "_" in t:
        raise FormatError(f"placeholder payload is not numeric: {text!r}", operation="decode")
    try:
        return int(t)
    except ValueError:
        pass
    try:
        v = float(t)
    except ValueError:
        raise FormatError(f"placeholder payload is not numeric: {text!r}", operation="decode") from None
    if not math.isfinite(v):
        raise FormatError(f"placeholder payload is not finite: {text!r}", operation="decode")
    return v
