from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Literal, Protocol


ChangeTopic = Literal["user_subscriptions", "plan_config"]


@dataclass(frozen=True)
class ChangeEvent:
    topic: ChangeTopic
    user_id: str | None = None


ChangeHandler = Callable[[ChangeEvent], None]
Unsubscribe = Callable[[], None]


class ChangeNotificationPort(Protocol):
    def subscribe(self, handler: ChangeHandler) -> Unsubscribe:
        ...
