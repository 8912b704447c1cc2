from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Unlimited(Enum):
    UNLIMITED = "unlimited"

    def __repr__(self) -> str:
        return "UNLIMITED"


UNLIMITED = Unlimited.UNLIMITED

Limit = int | Unlimited


@dataclass(frozen=True)
class Feature:
    code: str
    name: str
    description: str | None


@dataclass(frozen=True)
class FeatureGrant:
    feature_code: str
    is_enabled: bool
    limit: Limit | None = None
