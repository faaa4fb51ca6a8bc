from __future__ import annotations

from typing import Any, Dict, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class FilterCriteria(BaseModel):
    """Constraints accepted by ``ListingCollection.filter``.

    Absent options impose no constraint; present ones are combined with AND.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    price: Optional[float] = Field(default=None, description="Maximum nightly price, inclusive")
    bedrooms: Optional[float] = Field(default=None, description="Exact bedroom count")
    review_scores_rating: Optional[float] = Field(
        default=None, description="Minimum review score, inclusive"
    )

    @classmethod
    def coerce(cls, value: Union["FilterCriteria", Mapping[str, Any], None]) -> "FilterCriteria":
        if value is None:
            return cls()
        if isinstance(value, cls):
            return value
        return cls.model_validate(dict(value))

    def is_empty(self) -> bool:
        return not self.describe()

    def describe(self) -> Dict[str, float]:
        return self.model_dump(exclude_none=True)
