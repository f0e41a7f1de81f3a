"""Dataset model and insight categories."""

from enum import Enum
from typing import Dict, List, Optional, Union

from pydantic import BaseModel, Field

from document_store.models.base import BaseDocument


class InsightCategory(str, Enum):
    """Closed set of artifact categories stored on a dataset."""

    PIE_CHART = "pie_chart"
    BAR_CHART = "bar_chart"
    HISTOGRAM = "histogram"
    KDE = "kde"
    CORRELATION = "correlation"
    FORECAST = "forecast"
    OTHERS = "others"

    @property
    def is_filtered(self) -> bool:
        """Filtered categories carry a numeric filter parameter with each artifact."""
        return self in FILTERED_CATEGORIES

    @classmethod
    def from_tag(cls, tag: str) -> "InsightCategory":
        """Map an engine tag onto a category, folding unknown tags into ``others``."""
        try:
            return cls(tag)
        except ValueError:
            return cls.OTHERS


FILTERED_CATEGORIES = frozenset({InsightCategory.BAR_CHART, InsightCategory.HISTOGRAM, InsightCategory.FORECAST})


class FilteredInsight(BaseModel):
    """Artifact reference for a filtered category."""

    url: str
    filter_number: Union[int, float] = Field(..., alias="filterNumber")

    model_config = {"populate_by_name": True}


InsightReference = Union[str, FilteredInsight]


class Dataset(BaseDocument):
    """Dataset produced by the intake wizard."""

    user_id: str = Field(..., description="Owner of the dataset")
    name: str
    dataset_url: str = Field(..., description="URL of the uploaded source file")
    cleaned_dataset_url: Optional[str] = None
    domain_type: Optional[str] = None
    insights: Dict[InsightCategory, List[InsightReference]] = Field(default_factory=dict)
    shared_usernames: List[str] = Field(default_factory=list, description="Usernames with a direct grant, for display")
