"""Partition of engine artifacts into insight categories."""

from dataclasses import dataclass, field
from numbers import Real
from typing import Any, Dict, List, Optional, Sequence, Union

from document_store.models import InsightCategory
from exceptions import PartialArtifactFailure


@dataclass
class PendingArtifact:
    """An artifact whose payload has not been stored yet."""

    payload: Any
    category: InsightCategory
    position: int
    filter_number: Optional[Union[int, float]] = None


@dataclass
class Classification:
    buckets: Dict[InsightCategory, List[PendingArtifact]] = field(default_factory=dict)
    rejected: List[PartialArtifactFailure] = field(default_factory=list)

    def __len__(self) -> int:
        return sum(len(artifacts) for artifacts in self.buckets.values())


def classify_artifacts(images: Sequence[Sequence[Any]]) -> Classification:
    """Route each ``(payload, category[, filterNumber])`` entry into its category bucket.

    Single pass, order preserving within each bucket. Unknown tags go to ``others``.
    Filtered categories keep their filter number; other categories never carry one.
    A filtered entry without a numeric filter number is rejected, not dropped silently.
    """
    result = Classification()

    for position, entry in enumerate(images):
        payload, tag = entry[0], entry[1]
        category = InsightCategory.from_tag(tag)
        filter_number = None

        if category.is_filtered:
            raw = entry[2] if len(entry) > 2 else None
            if isinstance(raw, bool) or not isinstance(raw, Real):
                result.rejected.append(
                    PartialArtifactFailure(f"Artifact {position} of category {tag} has no numeric filter number", category=tag)
                )
                continue
            filter_number = raw

        result.buckets.setdefault(category, []).append(
            PendingArtifact(payload=payload, category=category, position=position, filter_number=filter_number)
        )

    return result
