from __future__ import annotations

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, Tuple, Union

from .coerce import Parsed, bucket_key, parse_int, parse_number, parse_price
from .criteria import FilterCriteria
from .models import BucketKey, HostRank, StatsReport, TopHost


logger = logging.getLogger("abnb.collection")

Listing = Mapping[str, Any]

TOP_HOSTS_LIMIT = 10
MIN_HOST_LISTINGS = 3


def _text_key(value: Any) -> str:
    if not value:
        return ""
    return str(value).strip()


def _is_subsequence(sub: Tuple[Listing, ...], seq: Tuple[Listing, ...]) -> bool:
    remaining = iter(seq)
    return all(any(item is candidate for candidate in remaining) for item in sub)


def _room_field(listing: Listing) -> Any:
    bedrooms = listing.get("bedrooms")
    if bedrooms is None or (isinstance(bedrooms, str) and not bedrooms.strip()):
        return listing.get("rooms")
    return bedrooms


def _satisfies(listing: Listing, criteria: FilterCriteria) -> bool:
    if criteria.price is not None:
        price = parse_price(listing.get("price"))
        if not price.ok or price.value > criteria.price:
            return False
    if criteria.bedrooms is not None:
        bedrooms = parse_number(listing.get("bedrooms"))
        if not bedrooms.ok or bedrooms.value != criteria.bedrooms:
            return False
    if criteria.review_scores_rating is not None:
        rating = parse_number(listing.get("review_scores_rating"))
        if not rating.ok or rating.value < criteria.review_scores_rating:
            return False
    return True


def _bucket_average(total: float, valid: int, key: BucketKey) -> float:
    if valid == 0:
        return 0.0
    # Numeric keys normalize by rooms as well as listings.
    if isinstance(key, (int, float)) and key > 0:
        return total / (valid * key)
    return total / valid


@dataclass(frozen=True)
class ListingCollection:
    """Immutable view over a loaded listing dataset.

    ``original`` is captured once and shared by every collection derived from
    it; ``current`` is the order-preserving subset in view. Every operation
    either reads these tuples or returns a new value.
    """

    original: Tuple[Listing, ...]
    current: Tuple[Listing, ...] = field(default=None)  # type: ignore[assignment]

    # Records are mappings, so collections compare by value but are unhashable.
    __hash__ = None  # type: ignore[assignment]

    def __post_init__(self) -> None:
        if not isinstance(self.original, tuple):
            raise TypeError("original must be a tuple; use ListingCollection.from_records")
        if self.current is None:
            object.__setattr__(self, "current", self.original)
        elif not isinstance(self.current, tuple):
            raise TypeError("current must be a tuple")
        elif self.current is not self.original and not _is_subsequence(self.current, self.original):
            raise ValueError("current must be an ordered subset of original")

    @classmethod
    def from_records(cls, records: Iterable[Mapping[str, Any]]) -> "ListingCollection":
        frozen = tuple(MappingProxyType(dict(record)) for record in records)
        return cls(original=frozen)

    def __len__(self) -> int:
        return len(self.current)

    @property
    def original_count(self) -> int:
        return len(self.original)

    @property
    def is_filtered(self) -> bool:
        return self.current is not self.original

    def get_data(self) -> Tuple[Listing, ...]:
        return self.current

    def filter(
        self,
        criteria: Union[FilterCriteria, Mapping[str, Any], None] = None,
    ) -> "ListingCollection":
        criteria = FilterCriteria.coerce(criteria)
        if criteria.is_empty():
            narrowed = self.current
        else:
            narrowed = tuple(item for item in self.current if _satisfies(item, criteria))
        logger.debug(
            "filter %s: %d -> %d listings",
            criteria.describe(),
            len(self.current),
            len(narrowed),
        )
        return ListingCollection(original=self.original, current=narrowed)

    def reset_filters(self) -> "ListingCollection":
        return ListingCollection(original=self.original, current=self.original)

    def compute_stats(self) -> StatsReport:
        count = len(self.current)
        if count == 0:
            return StatsReport(count=0, avg_price=0.0, avg_price_per_room={})

        total = 0.0
        buckets: Dict[BucketKey, List[float]] = {}
        for listing in self.current:
            price = parse_price(listing.get("price"))
            total += price.or_default(0.0)
            # Buckets exist for every listing; only valid prices feed the mean.
            bucket = buckets.setdefault(bucket_key(_room_field(listing)), [0.0, 0])
            if price.ok:
                bucket[0] += price.value
                bucket[1] += 1

        per_room = {
            key: _bucket_average(acc[0], int(acc[1]), key) for key, acc in buckets.items()
        }
        return StatsReport(count=count, avg_price=total / count, avg_price_per_room=per_room)

    def compute_hosts_ranking(self) -> List[HostRank]:
        counts: Dict[str, int] = {}
        for listing in self.current:
            host = _text_key(listing.get("host_id"))
            if not host:
                continue
            counts[host] = counts.get(host, 0) + 1
        ranked = sorted(counts.items(), key=lambda kv: -kv[1])
        return [HostRank(host=host, count=count) for host, count in ranked]

    def compute_top_hosts_by_rating(
        self,
        *,
        limit: int = TOP_HOSTS_LIMIT,
        min_host_listings: int = MIN_HOST_LISTINGS,
    ) -> List[TopHost]:
        totals: Dict[str, List[float]] = {}
        for listing in self.current:
            owned = parse_int(listing.get("host_listings_count"))
            if not owned.ok or owned.value < min_host_listings:
                continue
            name = _text_key(listing.get("host_name"))
            rating: Parsed = parse_number(listing.get("review_scores_rating"))
            if not name or not rating.ok:
                continue
            acc = totals.setdefault(name, [0.0, 0])
            acc[0] += rating.value
            acc[1] += 1

        hosts = [
            TopHost(host=name, avg_rating=acc[0] / acc[1], count=int(acc[1]))
            for name, acc in totals.items()
        ]
        hosts.sort(key=lambda h: -h.avg_rating)
        return hosts[: max(0, int(limit))]
