from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Union


BucketKey = Union[int, float, str]


@dataclass(frozen=True)
class StatsReport:
    count: int
    avg_price: float
    avg_price_per_room: Dict[BucketKey, float] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "count": self.count,
            "avg_price": self.avg_price,
            "avg_price_per_room": dict(self.avg_price_per_room),
        }


@dataclass(frozen=True)
class HostRank:
    host: str
    count: int

    def to_dict(self) -> Dict[str, Any]:
        return {"host": self.host, "count": self.count}


@dataclass(frozen=True)
class TopHost:
    host: str
    avg_rating: float
    count: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "host": self.host,
            "avg_rating": float(self.avg_rating),
            "count": self.count,
        }
