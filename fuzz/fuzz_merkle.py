"""Fuzz harness for Merkle tree construction & full-dataset verification."""
from __future__ import annotations
import atheris
import sys

with atheris.instrument_imports():
    from hashtree_api.merkle import MerkleTree, InvalidInputLength


def TestOneInput(data: bytes):  # noqa: N802
    if not data:
        return
    # Split data deterministically into blobs (bounded count)
    size = max(1, min(32, data[0]))
    blobs = [data[i : i + size] for i in range(1, min(len(data), 1 + size * 64), size)]
    n = len(blobs)
    try:
        tree = MerkleTree.construct(blobs)
    except InvalidInputLength:
        if n and not n & (n - 1):
            raise RuntimeError("power-of-two input rejected")
        return
    if tree.leaf_count != n or tree.depth != n.bit_length():
        raise RuntimeError("tree shape mismatch")
    if not MerkleTree.verify(blobs, tree.hash):
        raise RuntimeError("rebuilt root differs")
    # Flip one bit of one blob; the root must change
    idx = data[-1] % n
    tampered = list(blobs)
    b = bytearray(tampered[idx])
    if not b:
        return
    b[0] ^= 0x01
    tampered[idx] = bytes(b)
    if MerkleTree.verify(tampered, tree.hash):
        raise RuntimeError("tampered blob not detected")


def main():
    atheris.Setup(sys.argv, TestOneInput, enable_python_coverage=True)
    atheris.Fuzz()


if __name__ == "__main__":
    main()
