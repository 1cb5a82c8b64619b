"""Booking session identification for HTTP callers."""

from __future__ import annotations

from . import conf


def resolve_session_id(request, create: bool = True) -> str | None:
    """
    Stable per-browser session id of the caller

    The booking session header wins; otherwise the Django session key is
    used, creating the session when ``create`` is set.
    """
    header_value = request.headers.get(conf.session_header(), "").strip()
    if header_value:
        return header_value[:64]

    session = getattr(request, "session", None)
    if session is None:
        return None
    if not session.session_key and create:
        session.save()
    return session.session_key
