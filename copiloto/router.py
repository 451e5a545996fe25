"""Route a question to the manual, the fuel station list, or neither."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List

from . import vocab
from .logger import preview
from .query_utils import expand_aliases
from .text import count_hits, normalize

logger = logging.getLogger(__name__)


class Route(str, Enum):
    MANUAL = "manual"
    GASOLINERAS = "gasolineras"
    AMBIGUOUS = "ambiguous"


@dataclass(frozen=True)
class RouteDecision:
    route: Route
    normalized: str
    expanded: str
    matched: List[Dict[str, str]] = field(default_factory=list)

    def to_dict(self) -> Dict[str, object]:
        return {
            "route": self.route.value,
            "normalized": self.normalized,
            "expanded": self.expanded,
            "matched": [dict(m) for m in self.matched],
        }


def route_question(question: str) -> RouteDecision:
    """Pick a domain from weighted term hits.

    A location word plus any fuel term always means fuel stations. When
    both domains have hits the decision is ``ambiguous`` and the caller
    asks the driver to clarify. With no signal at all, or a tie, the
    manual wins.
    """
    normalized = normalize(question)
    expanded, matched = expand_aliases(normalized)

    gas_hits = count_hits(expanded, vocab.GAS_TERMS)
    manual_hits = count_hits(expanded, vocab.MANUAL_TERMS)
    location_hits = count_hits(expanded, vocab.LOCATION_TERMS)

    if location_hits > 0 and gas_hits > 0:
        route = Route.GASOLINERAS
    else:
        gas_score = gas_hits * 2 + location_hits
        manual_score = manual_hits * 2
        if gas_hits > 0 and manual_hits > 0:
            route = Route.AMBIGUOUS
        elif gas_score > manual_score:
            route = Route.GASOLINERAS
        else:
            route = Route.MANUAL

    logger.debug(
        "route=%s gas=%d manual=%d location=%d q=%r",
        route.value, gas_hits, manual_hits, location_hits, preview(expanded),
    )
    return RouteDecision(route=route, normalized=normalized, expanded=expanded, matched=matched)
