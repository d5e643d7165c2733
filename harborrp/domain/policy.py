"""
Retention policy domain objects for harborrp.

A policy holds one FactorSpec per scored metric:
- update_time: days since the repository was last updated
- pull_count: number of pulls
- tags_count: number of tags

Each FactorSpec has a base and an ordered list of half-open buckets
``[low, high)``. The first bucket containing the value supplies the weight.
Buckets need not be contiguous or cover every value.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

METRICS = ('update_time', 'pull_count', 'tags_count')


@dataclass(frozen=True)
class FactorBucket:
    """A half-open integer interval ``[low, high)`` mapped to a weight."""
    low: int
    high: int
    weight: float

    def contains(self, value: int) -> bool:
        return self.low <= value < self.high

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'FactorBucket':
        bounds = data.get('range') or {}
        return cls(
            low=int(bounds['low']),
            high=int(bounds['high']),
            weight=float(data['weight']),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'weight': self.weight,
            'range': {'low': self.low, 'high': self.high},
        }


@dataclass(frozen=True)
class FactorSpec:
    """Base multiplier plus ordered weight buckets for one metric."""
    base: float = 0.0
    buckets: Tuple[FactorBucket, ...] = ()

    def match(self, value: int) -> Optional[float]:
        """
        Weight of the first bucket containing ``value``.

        Returns:
            The matched weight, or None when no bucket contains the value
        """
        for bucket in self.buckets:
            if bucket.contains(value):
                return bucket.weight
        return None

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'FactorSpec':
        data = data or {}
        return cls(
            base=float(data.get('base', 0.0)),
            buckets=tuple(FactorBucket.from_dict(f) for f in data.get('factors') or []),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'base': self.base,
            'factors': [b.to_dict() for b in self.buckets],
        }


@dataclass(frozen=True)
class RetentionPolicy:
    """Weighted-factor retention policy."""
    update_time: FactorSpec = field(default_factory=FactorSpec)
    pull_count: FactorSpec = field(default_factory=FactorSpec)
    tags_count: FactorSpec = field(default_factory=FactorSpec)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'RetentionPolicy':
        """
        Build a policy from the parsed policy file.

        Raises:
            KeyError, TypeError, ValueError: On malformed sections
        """
        return cls(**{metric: FactorSpec.from_dict(data.get(metric)) for metric in METRICS})

    def to_dict(self) -> Dict[str, Any]:
        return {metric: getattr(self, metric).to_dict() for metric in METRICS}
