from __future__ import annotations
import base64
import binascii
import hashlib
from typing import Tuple

import nacl.exceptions
import nacl.signing
import rfc8785

DIGEST_SIZE = 32


def B64(b: bytes) -> str:
    """Base64-encode bytes to ASCII string."""
    return base64.b64encode(b).decode("ascii")


def B64D(s: str) -> bytes:
    """Decode base64 ASCII string to bytes with strict validation."""
    try:
        return base64.b64decode(s.encode("ascii"), validate=True)
    except Exception as e:
        raise ValueError("invalid base64") from e


def sha256(data: bytes) -> bytes:
    return hashlib.sha256(data).digest()


def hash_data(blob: bytes) -> bytes:
    """Leaf digest: H(blob)."""
    return sha256(bytes(blob))


def hash_concat(left: bytes, right: bytes) -> bytes:
    """Branch digest: H(left || right)."""
    return sha256(left + right)


def parse_digest(text: str) -> bytes:
    """Parse a 32-byte digest given as hex (optionally 0x-prefixed) or base64."""
    s = text.strip()
    h = s[2:] if s.lower().startswith("0x") else s
    if len(h) == DIGEST_SIZE * 2:
        try:
            return binascii.unhexlify(h)
        except binascii.Error:
            pass
    raw = B64D(s)
    if len(raw) != DIGEST_SIZE:
        raise ValueError(f"digest must be {DIGEST_SIZE} bytes, got {len(raw)}")
    return raw


def jcs_dumps(obj) -> bytes:
    """Deterministic canonical JSON bytes per RFC8785."""
    return rfc8785.dumps(obj)


def ed25519_generate() -> Tuple[bytes, bytes]:
    sk = nacl.signing.SigningKey.generate()
    pk = sk.verify_key
    return (sk.encode(), pk.encode())


def ed25519_sign(sk_bytes: bytes, data: bytes) -> bytes:
    sk = nacl.signing.SigningKey(sk_bytes)
    return sk.sign(data).signature


def ed25519_verify(pk_bytes: bytes, data: bytes, signature: bytes) -> bool:
    vk = nacl.signing.VerifyKey(pk_bytes)
    try:
        vk.verify(data, signature)
        return True
    except nacl.exceptions.BadSignatureError:
        return False
