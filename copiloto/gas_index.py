"""Official fuel station list: filter by parsed constraints or score by text."""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from . import vocab
from .errors import DataIntegrityError
from .hits import GasHit
from .text import normalize, tokenize

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("id", "country", "network", "name", "status", "instructions")


class GasStatus(str, Enum):
    OK = "ok"
    CONDITIONED = "condicionado"

    @classmethod
    def parse(cls, raw: Any) -> "GasStatus":
        # anything that is not explicitly "ok" (incl. legacy "warn") is conditioned
        value = str(raw or "").strip().strip('"').lower()
        return cls.OK if value == cls.OK.value else cls.CONDITIONED


@dataclass(frozen=True)
class GasStation:
    id: str
    country: str
    network: str
    name: str
    status: GasStatus
    instructions: str

    def to_dict(self) -> Dict[str, Any]:
        d = asdict(self)
        d["status"] = self.status.value
        return d


@dataclass(frozen=True)
class GasFilters:
    country: Optional[str] = None
    status: Optional[GasStatus] = None
    network: Optional[str] = None
    free_text: Optional[str] = None


@dataclass(frozen=True)
class GasWeights:
    token_anywhere: int = 2
    token_in_network: int = 4
    token_in_name: int = 3
    full_query: int = 8


def parse_gas_filters(question: str) -> GasFilters:
    q_norm = normalize(question)
    tokens = tokenize(question)

    country = next((vocab.COUNTRY_ALIASES[t] for t in tokens if t in vocab.COUNTRY_ALIASES), None)

    status = None
    if any(t in q_norm for t in vocab.STATUS_OK_TERMS):
        status = GasStatus.OK
    elif any(t in q_norm for t in vocab.STATUS_CONDITIONED_TERMS):
        status = GasStatus.CONDITIONED

    network = next((vocab.NETWORK_ALIASES[t] for t in tokens if t in vocab.NETWORK_ALIASES), None)

    free_tokens = [t for t in tokens if t not in vocab.GAS_STOPWORDS]
    free_text = " ".join(free_tokens) if free_tokens else None

    return GasFilters(country=country, status=status, network=network, free_text=free_text)


def sort_for_display(stations: Iterable[GasStation]) -> List[GasStation]:
    """ok before condicionado, then country, network and name."""
    return sorted(
        stations,
        key=lambda g: (g.status != GasStatus.OK, g.country, g.network, g.name),
    )


class GasIndex:
    def __init__(self, stations: Iterable[GasStation], weights: Optional[GasWeights] = None):
        self.stations: List[GasStation] = list(stations)
        self.weights = weights or GasWeights()
        self._hay = [
            (
                normalize(f"{g.country} {g.network} {g.name} {g.instructions}"),
                normalize(g.network),
                normalize(g.name),
            )
            for g in self.stations
        ]
        logger.info("gas index built: %d stations", len(self.stations))

    def __len__(self) -> int:
        return len(self.stations)

    @staticmethod
    def load_gas_json(path: Path) -> List[GasStation]:
        with open(path, "r", encoding="utf-8") as f:
            try:
                data = json.load(f)
            except json.JSONDecodeError as exc:
                raise DataIntegrityError(f"gasolineras: invalid JSON in {path}: {exc}") from exc
        return GasIndex.stations_from_records(data)

    @staticmethod
    def stations_from_records(records: Any) -> List[GasStation]:
        if not isinstance(records, list):
            raise DataIntegrityError("gasolineras: root must be a list of stations")

        out: List[GasStation] = []
        ids = set()
        for i, r in enumerate(records):
            if not isinstance(r, dict):
                raise DataIntegrityError(f"gasolineras: row #{i} is not an object")
            for k in REQUIRED_FIELDS:
                if k not in r:
                    raise DataIntegrityError(f"gasolineras: missing field '{k}' in row #{i}")
            station_id = str(r["id"]).strip()
            if not station_id:
                raise DataIntegrityError(f"gasolineras: empty id in row #{i}")
            if station_id in ids:
                raise DataIntegrityError(f"gasolineras: duplicate id: {station_id}")
            ids.add(station_id)
            out.append(
                GasStation(
                    id=station_id,
                    country=str(r["country"]).strip(),
                    network=str(r["network"]).strip(),
                    name=str(r["name"]).strip(),
                    status=GasStatus.parse(r["status"]),
                    instructions=str(r["instructions"]).strip(),
                )
            )
        return out

    def filter(self, filters: GasFilters) -> List[GasStation]:
        out = self.stations

        if filters.country:
            out = [g for g in out if g.country == filters.country]

        if filters.status:
            out = [g for g in out if g.status == filters.status]

        if filters.network:
            net = filters.network.strip().lower()
            out = [g for g in out if g.network.lower() == net or net in g.name.lower()]

        if filters.free_text:
            ft = normalize(filters.free_text)
            out = [g for g in out if ft in normalize(f"{g.name} {g.instructions}")]

        return list(out)

    def search(self, query: str, top_k: int = 50) -> List[GasHit]:
        q_norm = normalize(query)
        q_tokens = tokenize(query)
        if not q_tokens:
            return []

        w = self.weights
        scored = []
        for g, (hay, net, name) in zip(self.stations, self._hay):
            score = 0
            for tok in q_tokens:
                if tok in hay:
                    score += w.token_anywhere
                if tok in net:
                    score += w.token_in_network
                if tok in name:
                    score += w.token_in_name
            if q_norm and q_norm in hay:
                score += w.full_query
            if score > 0:
                scored.append(GasHit(station=g, score=score))

        scored.sort(key=lambda h: h.score, reverse=True)
        return scored[: max(top_k, 1)]


def build_gas_index(gas_path: str, weights: Optional[GasWeights] = None) -> GasIndex:
    path = Path(gas_path)
    if not path.exists():
        raise FileNotFoundError(f"gasolineras.json not found: {path}")
    return GasIndex(GasIndex.load_gas_json(path), weights=weights)
