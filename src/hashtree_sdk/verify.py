from typing import Dict, Any, Sequence
from hashtree_api.crypto import ed25519_verify, B64D
from hashtree_api.merkle import MerkleTree
from hashtree_api.roots import signed_root_body


def verify_signed_root(root_json: Dict[str, Any]) -> bool:
    """Return True if the signed root's Ed25519 signature is valid.

    Canonicalizes the body (all fields except signature_b64) using RFC 8785
    JSON. Missing or malformed fields yield False.
    """
    if not isinstance(root_json, dict):
        return False
    try:
        sig_b64 = root_json["signature_b64"]
        pub_b64 = root_json["signer_pubkey_b64"]
    except KeyError:
        return False
    try:
        return ed25519_verify(B64D(pub_b64), signed_root_body(root_json), B64D(sig_b64))
    except (ValueError, TypeError):
        return False


def verify_dataset(blobs: Sequence[bytes], root_json: Dict[str, Any]) -> bool:
    """Check that ``blobs`` is exactly the dataset a signed root commits to.

    The signature must verify, the leaf count must match and the rebuilt
    root must equal ``merkle_root_b64``. InvalidInputLength propagates.
    """
    tree = MerkleTree.construct(blobs)
    if not verify_signed_root(root_json):
        return False
    if root_json.get("leaf_count") != tree.leaf_count:
        return False
    try:
        root = B64D(root_json["merkle_root_b64"])
    except (KeyError, ValueError):
        return False
    return tree.hash == root
