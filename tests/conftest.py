import os
import sys
from pathlib import Path

import pytest

# Ensure the 'src' directory is on sys.path for imports in tests
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

# Reduce noise and ensure default dev keygen is allowed in tests
os.environ.setdefault("HASHTREE_ALLOW_DEV_KEYGEN", "true")
os.environ.setdefault("HASHTREE_LOG_LEVEL", "WARNING")


@pytest.fixture
def byte_blobs():
    """Return a factory for [[0], [1], ..., [n-1]]."""

    def _make(n: int):
        return [bytes([i % 256]) for i in range(n)]

    return _make


@pytest.fixture
def signing_keys(tmp_path, monkeypatch):
    from hashtree_api.crypto import ed25519_generate
    from hashtree_api.settings import settings

    sk, pk = ed25519_generate()
    (tmp_path / "keys").mkdir(parents=True, exist_ok=True)
    sk_path = tmp_path / "keys/ed25519_private.key"
    pk_path = tmp_path / "keys/ed25519_public.key"
    sk_path.write_bytes(sk)
    pk_path.write_bytes(pk)
    monkeypatch.setattr(settings, "signing_key_path", str(sk_path))
    monkeypatch.setattr(settings, "signing_pubkey_path", str(pk_path))
    return sk, pk
