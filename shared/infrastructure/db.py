"""Database helpers shared by the booking stores."""

from __future__ import annotations

from django.db import connection, transaction  # type: ignore
from django.db.utils import NotSupportedError  # type: ignore


def lock_queryset_if_possible(queryset, *, skip_locked: bool = False):
    """Apply select_for_update when inside transaction.atomic()."""

    if not transaction.get_connection().in_atomic_block:
        return queryset

    if skip_locked and not connection.features.has_select_for_update_skip_locked:
        skip_locked = False

    try:
        return queryset.select_for_update(skip_locked=skip_locked)
    except NotSupportedError:
        return queryset
