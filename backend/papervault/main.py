# papervault/main.py
import logging
from functools import lru_cache
from typing import List

from fastapi import Depends, FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware

from . import config
from .blockchain import ContractStore
from .desk import PaperDesk
from .errors import (
    DecodeError, FormatError, InvalidTransition, NotFoundError, PermissionDenied, RegistryError, StoreUnavailable,
)
from .gate import EnvelopeSigner, GateDenied, RevealGate, RevealSession, SignatureRejected, recover_address
from .models import (
    AuthEnvelope, AuthorizedRequest, CreatePaperRequest, PaperView, RevealResponse, StatsResponse,
)
from .storage import FileStore, KeyValueStore, MemoryStore
from .summary import filter_papers, max_citations, status_counts, top_contributors
from .sync import RegistrySync

_logger = logging.getLogger(__name__)

APP_NAME = "Paper Vault (registry sync + gated reveal)"

# -------------------------------------------------
# store / registry / gate wiring
# -------------------------------------------------
def build_store(backend: str = config.STORE_BACKEND) -> KeyValueStore:
    if backend == "memory":
        return MemoryStore()
    if backend == "file":
        return FileStore(config.DATA_DIR)
    if backend == "contract":
        return ContractStore()
    raise RuntimeError(f"unknown STORE_BACKEND: {backend!r}")

@lru_cache(maxsize=1)
def get_store() -> KeyValueStore:
    return build_store()

@lru_cache(maxsize=1)
def get_desk() -> PaperDesk:
    return PaperDesk(RegistrySync(get_store()))

@lru_cache(maxsize=1)
def get_gate() -> RevealGate:
    store = get_store()
    address = getattr(store, "address", None) or config.REGISTRY_ADDRESS
    session = RevealSession.start(contract_address=address, chain_id=config.CHAIN_ID,
                                  duration_days=config.REVEAL_DURATION_DAYS)
    return RevealGate(session)

# -------------------------------------------------
# auth & error mapping
# -------------------------------------------------
def _recover_eip191(auth: AuthEnvelope) -> str:
    if not auth or not auth.message or not auth.signature:
        raise HTTPException(status_code=400, detail="auth.message and auth.signature required")
    sig_type = (auth.sig_type or "eip191").lower()
    if sig_type != "eip191":
        raise HTTPException(status_code=400, detail=f"unsupported sig_type: {sig_type}")
    try:
        return recover_address(auth.message, auth.signature)
    except SignatureRejected as e:
        raise HTTPException(status_code=400, detail=str(e))

_STATUS_BY_ERROR = [
    (NotFoundError, 404),
    (PermissionDenied, 403),
    (InvalidTransition, 409),
    (StoreUnavailable, 503),
    (DecodeError, 422),
    (FormatError, 422),
]

def _http_error(e: RegistryError) -> HTTPException:
    for cls, code in _STATUS_BY_ERROR:
        if isinstance(e, cls):
            return HTTPException(status_code=code, detail=str(e))
    return HTTPException(status_code=500, detail=str(e))

# -------------------------------------------------
# FastAPI
# -------------------------------------------------
app = FastAPI(title=APP_NAME)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.get("/")
def root(desk: PaperDesk = Depends(get_desk), gate: RevealGate = Depends(get_gate)):
    store = desk.registry.store
    return {
        "ok": True,
        "store": type(store).__name__,
        "available": store.is_available(),
        "chain_id": gate.session.chain_id,
        "contract": gate.session.contract_address,
    }

@app.get("/papers", response_model=List[PaperView])
def list_papers(search: str = "", category: str = "all", desk: PaperDesk = Depends(get_desk)):
    papers = filter_papers(desk.list_papers(), search=search, category=category)
    return [PaperView.from_paper(p) for p in papers]

@app.get("/papers/stats", response_model=StatsResponse)
def paper_stats(limit: int = Query(5, ge=1), desk: PaperDesk = Depends(get_desk)):
    papers = desk.list_papers()
    return StatsResponse(
        total=len(papers),
        counts=status_counts(papers),
        max_citations=max_citations(papers),
        top_contributors=top_contributors(papers, limit=limit),
    )

@app.post("/papers")
def create_paper(req: CreatePaperRequest, desk: PaperDesk = Depends(get_desk)):
    owner = _recover_eip191(req.auth)
    try:
        pid = desk.create(req.paper, caller=owner)
    except RegistryError as e:
        raise _http_error(e)
    return {"ok": True, "id": pid, "owner": owner}

@app.post("/papers/{paper_id}/publish", response_model=PaperView)
def publish_paper(paper_id: str, req: AuthorizedRequest, desk: PaperDesk = Depends(get_desk)):
    caller = _recover_eip191(req.auth)
    try:
        return PaperView.from_paper(desk.publish(paper_id, caller))
    except RegistryError as e:
        raise _http_error(e)

@app.post("/papers/{paper_id}/reject", response_model=PaperView)
def reject_paper(paper_id: str, req: AuthorizedRequest, desk: PaperDesk = Depends(get_desk)):
    caller = _recover_eip191(req.auth)
    try:
        return PaperView.from_paper(desk.reject(paper_id, caller))
    except RegistryError as e:
        raise _http_error(e)

@app.post("/papers/{paper_id}/cite", response_model=PaperView)
def cite_paper(paper_id: str, desk: PaperDesk = Depends(get_desk)):
    try:
        return PaperView.from_paper(desk.cite(paper_id))
    except RegistryError as e:
        raise _http_error(e)

@app.get("/reveal/challenge")
def reveal_challenge(gate: RevealGate = Depends(get_gate)):
    return {"challenge": gate.build_challenge()}

@app.post("/papers/{paper_id}/reveal", response_model=RevealResponse)
def reveal_paper(paper_id: str, req: AuthorizedRequest, desk: PaperDesk = Depends(get_desk),
                 gate: RevealGate = Depends(get_gate)):
    try:
        paper = desk.registry.get(paper_id, operation="reveal")
    except RegistryError as e:
        raise _http_error(e)
    signer = EnvelopeSigner(req.auth.message, req.auth.signature, req.auth.sig_type)
    try:
        result = gate.reveal(paper.encrypted_content_id, signer)
    except FormatError as e:
        raise _http_error(e)
    if isinstance(result, GateDenied):
        raise HTTPException(status_code=403, detail=f"reveal denied: {result.reason}")
    _logger.info("revealed %s for %s", paper_id, signer.recovered)
    return RevealResponse(ok=True, id=paper_id, value=result)
