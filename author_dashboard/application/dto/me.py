from __future__ import annotations

from dataclasses import dataclass

from author_dashboard.application.dto.entitlements import UserEntitlementsOutput


@dataclass(frozen=True)
class MeOutput:
    user_id: str
    name: str
    email: str
    plan_name: str | None
    entitlements: UserEntitlementsOutput
