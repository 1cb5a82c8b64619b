"""
Hold event handlers

Audit trail of hold state changes. Handlers run after the transaction that
produced the event has committed.
"""

import structlog

from shared.application.message_bus import MessageBus

from .domain.events import (
    ExpiredHoldsPurged,
    HoldConverted,
    HoldCreated,
    HoldReleased,
    HoldStageAdvanced,
)

audit_logger = structlog.get_logger("holds.audit")


def log_hold_created(event: HoldCreated):
    audit_logger.info(
        "hold_created",
        hold_id=event.aggregate_id,
        room_id=event.room_id,
        session_id=event.session_id,
        dates=str(event.dates) if event.dates else None,
        hold_expiry=event.hold_expiry.isoformat() if event.hold_expiry else None,
    )


def log_hold_stage_advanced(event: HoldStageAdvanced):
    audit_logger.info(
        "hold_extended",
        hold_id=event.aggregate_id,
        session_id=event.session_id,
        stage=event.stage,
        hold_expiry=event.hold_expiry.isoformat() if event.hold_expiry else None,
    )


def log_hold_converted(event: HoldConverted):
    audit_logger.info(
        "hold_converted",
        hold_id=event.aggregate_id,
        room_id=event.room_id,
        reservation_id=event.reservation_id,
    )


def log_hold_released(event: HoldReleased):
    audit_logger.info(
        "hold_released",
        hold_id=event.aggregate_id,
        session_id=event.session_id,
        count=event.count,
    )


def log_expired_holds_purged(event: ExpiredHoldsPurged):
    audit_logger.info("expired_holds_purged", count=event.count)


def register_handlers(bus: MessageBus):
    """Subscribe the audit handlers to ``bus``"""
    bus.register_event_handler(HoldCreated, log_hold_created)
    bus.register_event_handler(HoldStageAdvanced, log_hold_stage_advanced)
    bus.register_event_handler(HoldConverted, log_hold_converted)
    bus.register_event_handler(HoldReleased, log_hold_released)
    bus.register_event_handler(ExpiredHoldsPurged, log_expired_holds_purged)
