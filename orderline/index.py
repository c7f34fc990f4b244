from __future__ import annotations

from typing import Dict, List

from rapidfuzz import fuzz, process

from .models import Candidate, CatalogEntry, CatalogIndex, ResolveResult
from .utils import _trace, normalize_text


FUZZY_ACCEPT_THRESHOLD = 90.0
FUZZY_AMBIGUOUS_THRESHOLD = 80.0
FUZZY_ACCEPT_GAP = 5.0


def build_index(entries: Dict[int, CatalogEntry]) -> CatalogIndex:
    """
    Index entries by normalized name for lookup by what the user typed.
    """
    idx = CatalogIndex(entries=entries)
    for entry_id, entry in entries.items():
        norm = normalize_text(entry.name)
        if not norm:
            continue
        ids = idx.entries_by_norm_name.setdefault(norm, [])
        ids.append(entry_id)
        idx.name_choices[entry_id] = norm
    return idx


def _candidate(index: CatalogIndex, entry_id: int, score: float) -> Candidate:
    return Candidate(entry_id=entry_id, display=index.entries[entry_id].name, score=float(score))


def _match_name(index: CatalogIndex, query: str, top_k: int) -> ResolveResult:
    norm_q = normalize_text(query)
    if not norm_q:
        return ResolveResult(ok=False, query=query, reason="empty_query")

    same_name = index.entries_by_norm_name.get(norm_q, [])
    if len(same_name) == 1:
        eid = same_name[0]
        return ResolveResult(ok=True, query=query, resolved_id=eid, resolved_display=index.entries[eid].name, reason="exact")
    if same_name:
        return ResolveResult(
            ok=False,
            query=query,
            candidates=[_candidate(index, eid, 100.0) for eid in same_name[:top_k]],
            reason="ambiguous_exact",
        )

    if not index.name_choices:
        return ResolveResult(ok=False, query=query, reason="no_choices")

    # One choice per entry, keyed by id, so matches need no merging.
    scored: List[Candidate] = [
        _candidate(index, eid, score)
        for _name, score, eid in process.extract(norm_q, index.name_choices, scorer=fuzz.WRatio, limit=top_k)
    ]
    if not scored:
        return ResolveResult(ok=False, query=query, reason="no_match")

    best = scored[0]
    runner_up = scored[1].score if len(scored) > 1 else 0.0
    if best.score >= FUZZY_ACCEPT_THRESHOLD and best.score - runner_up >= FUZZY_ACCEPT_GAP:
        return ResolveResult(
            ok=True,
            query=query,
            resolved_id=best.entry_id,
            resolved_display=best.display,
            candidates=scored,
            reason="fuzzy_accept",
        )

    # Don't guess: hand the candidates back
    reason = "fuzzy_ambiguous" if best.score >= FUZZY_AMBIGUOUS_THRESHOLD else "fuzzy_low_confidence"
    return ResolveResult(ok=False, query=query, candidates=scored, reason=reason)


def resolve_entry(index: CatalogIndex, query: str, *, top_k: int = 5, debug: bool = False) -> ResolveResult:
    """Resolve a product name (exact, then fuzzy) to a catalog entry id."""
    result = _match_name(index, query, top_k)
    _trace(
        debug,
        "catalog.resolve",
        {
            "query": query,
            "ok": result.ok,
            "reason": result.reason,
            "resolved_id": result.resolved_id,
            "candidates": [c.entry_id for c in result.candidates[:3]],
        },
    )
    return result
