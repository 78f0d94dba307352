from __future__ import annotations
import datetime
import logging
from fastapi import FastAPI, Request, HTTPException
from pydantic import ValidationError

from .settings import settings
from .crypto import B64, B64D
from .logutil import setup_logging
from .merkle import MerkleTree, InvalidInputLength
from .models import ConstructRequest, ConstructResponse, VerifyRequest, VerifyResponse
from .middleware.size_limit import SizeLimitMiddleware

setup_logging(settings.log_level)
log = logging.getLogger(__name__)

app = FastAPI(title="Hashtree")
app.add_middleware(SizeLimitMiddleware)


async def _read_json(request: Request) -> dict:
    ct = request.headers.get("content-type", "")
    if not ct.lower().startswith("application/json"):
        raise HTTPException(status_code=415, detail="unsupported content type")
    try:
        raw = await request.json()
    except Exception:
        raise HTTPException(status_code=400, detail="invalid JSON body")
    if not isinstance(raw, dict):
        raise HTTPException(status_code=400, detail="JSON body must be an object")
    return raw


def _blobs(req: ConstructRequest) -> list:
    if len(req.blobs_b64) > settings.max_leaves:
        raise HTTPException(status_code=413, detail="too many blobs")
    return req.blobs()


@app.post("/merkle/construct")
async def merkle_construct(request: Request):
    raw = await _read_json(request)
    try:
        req = ConstructRequest(**raw)
    except (ValidationError, TypeError):
        raise HTTPException(status_code=400, detail="payload schema invalid")

    try:
        tree = MerkleTree.construct(_blobs(req))
    except InvalidInputLength as e:
        raise HTTPException(status_code=422, detail=str(e))

    log.info("construct leaves=%d root=%s", tree.leaf_count, tree.hash.hex())
    return ConstructResponse(
        root_b64=B64(tree.hash),
        root_hex=tree.hash.hex(),
        leaf_count=tree.leaf_count,
        depth=tree.depth,
        tree=tree.to_dict() if req.include_tree else None,
    ).model_dump(exclude_none=True)


@app.post("/merkle/verify")
async def merkle_verify(request: Request):
    raw = await _read_json(request)
    try:
        req = VerifyRequest(**raw)
        root = B64D(req.root_b64)
    except (ValidationError, TypeError, ValueError):
        raise HTTPException(status_code=400, detail="payload schema invalid")

    try:
        ok = MerkleTree.verify(_blobs(req), root)
    except InvalidInputLength as e:
        raise HTTPException(status_code=422, detail=str(e))

    log.info("verify leaves=%d valid=%s", len(req.blobs_b64), ok)
    return VerifyResponse(valid=ok).model_dump()


@app.get("/healthz")
async def healthz():
    return {"ok": True, "ts": datetime.datetime.now(datetime.timezone.utc).isoformat()}
