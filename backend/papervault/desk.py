"""Caller-side policy on top of RegistrySync.

The sync layer mutates whatever it is told to. Ownership and the
pending -> published/rejected state machine are checked here, before a
mutation is issued, because only the caller knows who is asking.
"""
import logging
from typing import List

from .errors import InvalidTransition, PermissionDenied
from .models import Paper, PaperDraft, PaperStatus
from .sync import RegistrySync

_logger = logging.getLogger(__name__)


def is_owner(paper: Paper, caller: str) -> bool:
    return bool(caller) and caller.lower() == paper.owner.lower()


class PaperDesk:
    def __init__(self, registry: RegistrySync):
        self.registry = registry

    def list_papers(self) -> List[Paper]:
        return self.registry.list_papers()

    def create(self, draft: PaperDraft, caller: str) -> str:
        if not caller:
            raise PermissionDenied("a caller identity is required to submit", operation="create")
        return self.registry.create(draft, owner=caller)

    def _check_review(self, paper_id: str, caller: str, operation: str) -> Paper:
        paper = self.registry.get(paper_id, operation=operation)
        if not is_owner(paper, caller):
            _logger.info("%s refused for %s: caller %s is not the owner", operation, paper_id, caller)
            raise PermissionDenied("only the owner may review this paper", paper_id=paper_id, operation=operation)
        if paper.status != PaperStatus.PENDING:
            raise InvalidTransition(f"paper is already {paper.status.value}", paper_id=paper_id,
                                    operation=operation)
        return paper

    def publish(self, paper_id: str, caller: str) -> Paper:
        self._check_review(paper_id, caller, "publish")
        return self.registry.publish(paper_id)

    def reject(self, paper_id: str, caller: str) -> Paper:
        self._check_review(paper_id, caller, "reject")
        return self.registry.reject(paper_id)

    def cite(self, paper_id: str) -> Paper:
        return self.registry.cite(paper_id)
