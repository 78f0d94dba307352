from __future__ import annotations
import datetime
import logging
from pathlib import Path
from typing import Any, Dict, Tuple

from .crypto import jcs_dumps, ed25519_generate, ed25519_sign, B64
from .merkle import MerkleTree
from .models import SignedRoot
from .settings import settings

log = logging.getLogger(__name__)


def _now_iso() -> str:
    return datetime.datetime.now(datetime.timezone.utc).isoformat()


def signed_root_body(obj: Dict[str, Any]) -> bytes:
    """Canonical bytes covered by a signed root's signature."""
    return jcs_dumps({k: v for k, v in obj.items() if k != "signature_b64"})


def make_signed_root(
    tree: MerkleTree, signer_sk_bytes: bytes, signer_pk_bytes: bytes
) -> SignedRoot:
    body = {
        "leaf_count": tree.leaf_count,
        "depth": tree.depth,
        "merkle_root_b64": B64(tree.hash),
        "ts": _now_iso(),
        "signer_pubkey_b64": B64(signer_pk_bytes),
    }
    sig = ed25519_sign(signer_sk_bytes, signed_root_body(body))
    return SignedRoot(**{**body, "signature_b64": B64(sig)})


def load_signing_keys() -> Tuple[bytes, bytes]:
    sk_path = Path(settings.signing_key_path)
    pk_path = Path(settings.signing_pubkey_path)
    if not sk_path.exists() or not pk_path.exists():
        # generate if allowed for development only (gated by HASHTREE_ALLOW_DEV_KEYGEN)
        if not settings.allow_dev_keygen:
            raise FileNotFoundError(
                "signing keypair not found; set HASHTREE_ALLOW_DEV_KEYGEN=true to auto-generate for development"
            )
        sk_path.parent.mkdir(parents=True, exist_ok=True)
        pk_path.parent.mkdir(parents=True, exist_ok=True)
        sk, pk = ed25519_generate()
        sk_path.write_bytes(sk)
        pk_path.write_bytes(pk)
        log.warning("generated development signing keypair at %s", sk_path.parent)
    return sk_path.read_bytes(), pk_path.read_bytes()
