"""
Hold Domain Events

Events that represent things that have happened to room holds.
These are published after successful transaction commits.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional

from shared.domain.base import DomainEvent
from shared.domain.value_objects import DateRange


@dataclass
class HoldCreated(DomainEvent):
    """
    Event: A session placed a hold on a pod

    Triggers:
    - Audit log entry
    """
    room_id: Any = None
    session_id: str = ''
    dates: Optional[DateRange] = None
    stage: str = ''
    hold_expiry: Optional[datetime] = None


@dataclass
class HoldStageAdvanced(DomainEvent):
    """Event: Hold extended or moved to a later stage (confirmation -> payment)"""
    session_id: str = ''
    stage: str = ''
    hold_expiry: Optional[datetime] = None


@dataclass
class HoldConverted(DomainEvent):
    """
    Event: Hold was turned into a committed reservation

    The hold stops contending for the room and is kept for audit.
    """
    room_id: Any = None
    reservation_id: Any = None


@dataclass
class HoldReleased(DomainEvent):
    """Event: Hold(s) dropped by the session (explicit cancel or abandonment)"""
    session_id: str = ''
    count: int = 0


@dataclass
class ExpiredHoldsPurged(DomainEvent):
    """Event: Sweep deleted expired, unconverted holds"""
    count: int = 0
