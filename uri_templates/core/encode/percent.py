from __future__ import annotations

import re
import string


UNRESERVED: frozenset[str] = frozenset(string.ascii_letters + string.digits + "-._~")

# RFC 3986 gen-delims + sub-delims.
RESERVED: frozenset[str] = frozenset(":/?#[]@!$&'()*+,;=")

_PCT_TRIPLET = re.compile(r"%[0-9A-Fa-f]{2}")


def _pct(ch: str) -> str:
    return "".join(f"%{b:02X}" for b in ch.encode("utf-8"))


def encode(s: str, preserve_reserved: bool = False) -> str:
    """Percent-encode ``s`` one code point at a time.

    Unreserved characters always pass through. With ``preserve_reserved`` the
    RFC 3986 reserved set and well-formed ``%XX`` triplets pass through too.
    Everything else becomes one ``%XX`` per UTF-8 byte.
    """
    out: list[str] = []
    i = 0
    n = len(s)
    while i < n:
        ch = s[i]
        if ch in UNRESERVED:
            out.append(ch)
        elif preserve_reserved and ch in RESERVED:
            out.append(ch)
        elif preserve_reserved and ch == "%" and _PCT_TRIPLET.match(s, i):
            out.append(s[i : i + 3])
            i += 3
            continue
        else:
            out.append(_pct(ch))
        i += 1
    return "".join(out)


def encode_literal(s: str) -> str:
    """Literal template text is emitted with the reserved-preserving profile."""
    return encode(s, preserve_reserved=True)
