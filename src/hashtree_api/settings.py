from __future__ import annotations
from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    signing_key_path: str = Field(
        default="./keys/ed25519_private.key", alias="HASHTREE_SIGNING_KEY_PATH"
    )
    signing_pubkey_path: str = Field(
        default="./keys/ed25519_public.key", alias="HASHTREE_SIGNING_PUBKEY_PATH"
    )
    allow_dev_keygen: bool = Field(default=False, alias="HASHTREE_ALLOW_DEV_KEYGEN")

    # Upper bound on leaves accepted by the HTTP API per request
    max_leaves: int = Field(default=1 << 16, alias="HASHTREE_MAX_LEAVES")

    # Global request size limit enforced by middleware (bytes)
    max_request_bytes: int = Field(default=8388608, alias="HASHTREE_MAX_REQUEST_BYTES")

    log_level: str = Field(default="INFO", alias="HASHTREE_LOG_LEVEL")

    class Config:
        env_file = ".env"
        case_sensitive = False
        extra = "ignore"


settings = Settings()  # load at import
