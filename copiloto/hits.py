"""Ranked hits, one type per domain, and their wire payloads."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, List, Literal, Optional, Sequence, Union

if TYPE_CHECKING:
    from .gas_index import GasStation


@dataclass(frozen=True)
class ManualHit:
    module_id: str
    module_title: str
    section_title: str
    text: str
    score: int
    kind: Literal["manual"] = "manual"

    @property
    def id(self) -> str:
        return f"{self.module_id}::{self.section_title}"


@dataclass(frozen=True)
class GasHit:
    station: GasStation
    score: Optional[int] = None
    kind: Literal["gas"] = "gas"

    @property
    def id(self) -> str:
        return self.station.id


Hit = Union[ManualHit, GasHit]


def hit_to_payload(hit: Hit) -> Dict[str, Any]:
    if isinstance(hit, ManualHit):
        return {
            "id": hit.id,
            "score": hit.score,
            "metadata": {"title": hit.module_title, "section": hit.section_title},
        }
    payload: Dict[str, Any] = hit.station.to_dict()
    if hit.score is not None:
        payload["score"] = hit.score
    return payload


def hits_to_payload(hits: Sequence[Hit]) -> List[Dict[str, Any]]:
    return [hit_to_payload(h) for h in hits]
