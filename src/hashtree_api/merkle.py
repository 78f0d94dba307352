from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Optional, Sequence

from .crypto import hash_data, hash_concat

log = logging.getLogger(__name__)


class InvalidInputLength(ValueError):
    """Leaf count is zero or not a power of two."""

    def __init__(self, length: int):
        super().__init__(f"invalid input length: {length} (must be a nonzero power of two)")
        self.length = length


@dataclass(frozen=True)
class MerkleTree:
    """A Merkle (sub)tree.

    Leaves carry ``H(blob)`` and no children. Branches carry
    ``H(left.hash || right.hash)`` and own exactly two subtrees of equal depth.
    """

    hash: bytes
    left: Optional["MerkleTree"] = None
    right: Optional["MerkleTree"] = None

    def __post_init__(self):
        if (self.left is None) != (self.right is None):
            raise ValueError("a branch needs both children")

    @classmethod
    def leaf(cls, digest: bytes) -> "MerkleTree":
        return cls(digest)

    @classmethod
    def branch(cls, left: "MerkleTree", right: "MerkleTree") -> "MerkleTree":
        return cls(hash_concat(left.hash, right.hash), left, right)

    @classmethod
    def construct(cls, blobs: Sequence[bytes]) -> "MerkleTree":
        """Build the tree over ``blobs`` in one left-to-right pass.

        ``len(blobs)`` must be a nonzero power of two, otherwise
        InvalidInputLength is raised. Each new leaf merges with the waiting
        left sibling of every layer it reaches, like a binary counter carry.
        """
        n = len(blobs)
        if n == 0 or n & (n - 1):
            raise InvalidInputLength(n)

        depth = n.bit_length()
        # Unfinished subtrees waiting for their right-hand sibling, by layer
        pending: List[Optional[MerkleTree]] = [None] * depth

        for blob in blobs:
            node = cls.leaf(hash_data(blob))
            for layer in range(depth):
                left = pending[layer]
                if left is None:
                    pending[layer] = node
                    break
                pending[layer] = None
                node = cls.branch(left, node)

        root = pending[-1]
        if root is None:
            raise RuntimeError("carry propagation left no root")
        log.debug("constructed merkle tree leaves=%d depth=%d", n, depth)
        return root

    @classmethod
    def verify(cls, blobs: Sequence[bytes], root_hash: bytes) -> bool:
        """Rebuild the tree from ``blobs`` and compare against ``root_hash``.

        A mismatch returns False. InvalidInputLength propagates.
        """
        return cls.construct(blobs).hash == bytes(root_hash)

    @property
    def root(self) -> bytes:
        return self.hash

    @property
    def is_leaf(self) -> bool:
        return self.left is None

    @property
    def depth(self) -> int:
        """Number of layers, counting the leaf layer as 1."""
        d = 1
        node = self
        while node.left is not None:
            node = node.left
            d += 1
        return d

    @property
    def leaf_count(self) -> int:
        return 1 << (self.depth - 1)

    def leaf_hashes(self) -> Iterator[bytes]:
        """Yield leaf digests left to right."""
        stack = [self]
        while stack:
            node = stack.pop()
            if node.left is None or node.right is None:
                yield node.hash
            else:
                stack.append(node.right)
                stack.append(node.left)

    def to_dict(self) -> Dict[str, Any]:
        if self.left is None or self.right is None:
            return {"hash": self.hash.hex()}
        return {
            "hash": self.hash.hex(),
            "left": self.left.to_dict(),
            "right": self.right.to_dict(),
        }


def construct(blobs: Sequence[bytes]) -> MerkleTree:
    return MerkleTree.construct(blobs)


def verify(blobs: Sequence[bytes], root_hash: bytes) -> bool:
    return MerkleTree.verify(blobs, root_hash)
