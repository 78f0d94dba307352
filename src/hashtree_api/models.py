from __future__ import annotations
from typing import Optional, Dict, Any, List
from pydantic import BaseModel, Field, field_validator
from pydantic import ConfigDict

from .crypto import B64D


class ConstructRequest(BaseModel):
    """Blobs to commit to, in order, each base64 encoded.

    Decoding happens here so that malformed base64 is a schema error (HTTP
    400) rather than a tree-shape error.
    """

    model_config = ConfigDict(strict=True)

    blobs_b64: List[str] = Field(default_factory=list)
    include_tree: bool = False

    @field_validator("blobs_b64")
    @classmethod
    def _must_be_base64(cls, v: List[str]) -> List[str]:
        for item in v:
            B64D(item)
        return v

    def blobs(self) -> List[bytes]:
        return [B64D(b) for b in self.blobs_b64]


class VerifyRequest(ConstructRequest):
    root_b64: str


class ConstructResponse(BaseModel):
    root_b64: str
    root_hex: str
    leaf_count: int
    depth: int
    tree: Optional[Dict[str, Any]] = None


class VerifyResponse(BaseModel):
    valid: bool


class SignedRoot(BaseModel):
    leaf_count: int
    depth: int
    merkle_root_b64: str
    ts: str
    signer_pubkey_b64: str
    signature_b64: str
