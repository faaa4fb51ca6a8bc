"""Package initializer for `airbnb_explorer`."""

from .collection import ListingCollection
from .criteria import FilterCriteria
from .models import HostRank, StatsReport, TopHost

__all__ = ["FilterCriteria", "HostRank", "ListingCollection", "StatsReport", "TopHost"]
