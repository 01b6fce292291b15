# papervault/models.py
from __future__ import annotations
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, Union
from pydantic import BaseModel, ConfigDict, Field, field_validator

# =============== Paper ===========================
class PaperStatus(str, Enum):
    PENDING = "pending"
    PUBLISHED = "published"
    REJECTED = "rejected"

# keys of the persisted record payload; id lives in the store key
PAYLOAD_KEYS = (
    "title", "abstract", "encryptedContentId", "price", "owner",
    "timestamp", "category", "status", "citations",
)

class Paper(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: str
    title: str
    abstract: str
    category: str
    encrypted_content_id: str = Field(alias="encryptedContentId")
    price: float = Field(ge=0)
    owner: str
    created_at: int = Field(alias="timestamp", ge=0)
    status: PaperStatus = PaperStatus.PENDING
    citations: int = Field(default=0, ge=0)

    # a null status/citations in an old payload means "never set"
    @field_validator("status", mode="before")
    @classmethod
    def _default_status(cls, v: Any) -> Any:
        return PaperStatus.PENDING if v in (None, "") else v

    @field_validator("citations", mode="before")
    @classmethod
    def _default_citations(cls, v: Any) -> Any:
        return 0 if v is None else v

    def to_payload(self) -> Dict[str, Any]:
        d = self.model_dump(by_alias=True, exclude={"id"}, mode="json")
        return {k: d[k] for k in PAYLOAD_KEYS}

# =============== Draft (caller-supplied part) ====
class PaperDraft(BaseModel):
    title: str
    abstract: str
    category: str
    price: float = Field(default=0.1, ge=0)

# =============== Requests ========================
class AuthEnvelope(BaseModel):
    message: str
    signature: str
    sig_type: Optional[str] = "eip191"

class CreatePaperRequest(BaseModel):
    auth: AuthEnvelope
    paper: PaperDraft

class AuthorizedRequest(BaseModel):
    auth: AuthEnvelope

# =============== Responses =======================
class PaperView(BaseModel):
    id: str
    title: str
    abstract: str
    category: str
    encryptedContentId: str
    price: float
    owner: str
    timestamp: int
    status: PaperStatus
    citations: int

    @classmethod
    def from_paper(cls, p: Paper) -> "PaperView":
        return cls(id=p.id, **p.to_payload())

class StatsResponse(BaseModel):
    total: int
    counts: Dict[str, int]
    max_citations: int
    top_contributors: List[Tuple[str, int]]

class RevealResponse(BaseModel):
    ok: bool
    id: str
    value: Optional[Union[int, float]] = None
