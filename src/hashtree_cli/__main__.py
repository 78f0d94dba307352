from __future__ import annotations
import os
import json
import pathlib
import logging
from typing import List, Optional
import typer
from rich import print
import requests

from hashtree_api.crypto import ed25519_generate, parse_digest, B64, B64D
from hashtree_api.logutil import setup_logging
from hashtree_api.merkle import MerkleTree, InvalidInputLength
from hashtree_api.settings import settings

log = logging.getLogger("hashtree_cli")

app = typer.Typer(add_completion=False, no_args_is_help=True)

EXIT_MISMATCH = 1
EXIT_INVALID_LENGTH = 2


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging")):
    setup_logging("DEBUG" if verbose else settings.log_level)


def _read_blobs(data_dir: str) -> List[bytes]:
    """Leaves are the raw contents of the regular files in ``data_dir``, sorted by name."""
    d = pathlib.Path(data_dir)
    if not d.is_dir():
        raise typer.BadParameter(f"not a directory: {d}")
    files = sorted(p for p in d.iterdir() if p.is_file())
    log.debug("read %d files from %s", len(files), d)
    return [p.read_bytes() for p in files]


def _construct(blobs: List[bytes]) -> MerkleTree:
    try:
        return MerkleTree.construct(blobs)
    except InvalidInputLength as e:
        print(f"[red]{e}[/red]")
        raise typer.Exit(code=EXIT_INVALID_LENGTH)


@app.command()
def gen_keys(out_dir: str = typer.Option("./keys", help="Directory to write keypair")):
    os.makedirs(out_dir, exist_ok=True)
    sk, pk = ed25519_generate()
    (pathlib.Path(out_dir) / "ed25519_private.key").write_bytes(sk)
    (pathlib.Path(out_dir) / "ed25519_public.key").write_bytes(pk)
    print(f"[green]Wrote keys to {out_dir}[/green]")


@app.command()
def root(
    data_dir: str = typer.Argument(..., help="Directory whose files are the leaves"),
    sign: bool = typer.Option(False, help="Also write an Ed25519-signed root"),
    out: Optional[str] = typer.Option(None, help="Signed root path (default: signed-root.json next to DIR)"),
):
    """Compute the Merkle root over the files of DATA_DIR."""
    tree = _construct(_read_blobs(data_dir))
    print(f"[cyan]root_hex[/cyan]: {tree.hash.hex()}")
    print(f"[cyan]root_b64[/cyan]: {B64(tree.hash)}")
    print(f"[cyan]leaf_count[/cyan]: {tree.leaf_count}  [cyan]depth[/cyan]: {tree.depth}")
    if not sign:
        return

    from hashtree_api.roots import make_signed_root, load_signing_keys

    sk, pk = load_signing_keys()
    signed = make_signed_root(tree, sk, pk)
    # Kept out of DATA_DIR so it never becomes a leaf
    path = pathlib.Path(out) if out else pathlib.Path(data_dir).resolve().parent / "signed-root.json"
    path.write_text(json.dumps(signed.model_dump(), indent=2))
    print(f"[green]Wrote signed root to {path}[/green]")


@app.command()
def verify(
    data_dir: str = typer.Argument(..., help="Directory whose files are the leaves"),
    root_digest: Optional[str] = typer.Option(None, "--root", help="Expected root (hex or base64)"),
    signed_root: Optional[str] = typer.Option(None, help="Signed root JSON to check against"),
):
    """Check that the files of DATA_DIR reproduce a published root."""
    if (root_digest is None) == (signed_root is None):
        raise typer.BadParameter("pass exactly one of --root or --signed-root")
    blobs = _read_blobs(data_dir)

    if signed_root is not None:
        from hashtree_sdk.verify import verify_dataset, verify_signed_root

        try:
            obj = json.loads(pathlib.Path(signed_root).read_text())
        except json.JSONDecodeError as e:
            raise typer.BadParameter(f"signed root is not valid JSON: {e}")
        if not verify_signed_root(obj):
            print({"signature_valid": False, "valid": False})
            raise typer.Exit(code=EXIT_MISMATCH)
        try:
            ok = verify_dataset(blobs, obj)
        except InvalidInputLength as e:
            print(f"[red]{e}[/red]")
            raise typer.Exit(code=EXIT_INVALID_LENGTH)
        print({"signature_valid": True, "valid": ok})
    else:
        try:
            expected = parse_digest(root_digest)
        except ValueError as e:
            raise typer.BadParameter(str(e))
        ok = _construct(blobs).hash == expected
        print({"valid": ok})

    if not ok:
        raise typer.Exit(code=EXIT_MISMATCH)


@app.command()
def remote_root(
    data_dir: str = typer.Argument(..., help="Directory whose files are the leaves"),
    url: str = typer.Option(..., help="Base URL of a running hashtree API"),
):
    """Ask a hashtree API to construct the root and check it locally."""
    blobs = _read_blobs(data_dir)
    resp = requests.post(
        url.rstrip("/") + "/merkle/construct",
        json={"blobs_b64": [B64(b) for b in blobs]},
        timeout=30,
    )
    print(f"[cyan]Status[/cyan]: {resp.status_code}")
    if resp.status_code == 422:
        print(resp.json())
        raise typer.Exit(code=EXIT_INVALID_LENGTH)
    if resp.status_code != 200:
        print(resp.text)
        raise typer.Exit(code=EXIT_MISMATCH)
    body = resp.json()
    local = _construct(blobs)
    ok = B64D(body["root_b64"]) == local.hash
    print({**body, "matches_local": ok})
    if not ok:
        raise typer.Exit(code=EXIT_MISMATCH)


if __name__ == "__main__":
    app()
