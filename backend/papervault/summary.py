from typing import Dict, Iterable, List, Tuple

from .models import Paper, PaperStatus


def status_counts(papers: Iterable[Paper]) -> Dict[str, int]:
    counts = {s.value: 0 for s in PaperStatus}
    for p in papers:
        counts[p.status.value] += 1
    return counts


def top_contributors(papers: Iterable[Paper], limit: int = 5) -> List[Tuple[str, int]]:
    # dicts keep insertion order and sorted() is stable: ties stay first-seen
    per_owner: Dict[str, int] = {}
    for p in papers:
        per_owner[p.owner] = per_owner.get(p.owner, 0) + 1
    return sorted(per_owner.items(), key=lambda kv: kv[1], reverse=True)[:limit]


def filter_papers(papers: Iterable[Paper], search: str = "", category: str = "all") -> List[Paper]:
    needle = (search or "").lower()
    out = []
    for p in papers:
        if needle and needle not in p.title.lower() and needle not in p.abstract.lower():
            continue
        if category and category != "all" and p.category != category:
            continue
        out.append(p)
    return out


def max_citations(papers: Iterable[Paper]) -> int:
    return max((p.citations for p in papers), default=0)
