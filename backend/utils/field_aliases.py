"""Ordered field-name aliases probed on Firestore documents.

Riders' apps and the dispatch console have written the same facts under
different names over time. Each tuple lists the names in priority order.
"""
from typing import Any, Mapping, Optional, Sequence

# Drivers/{riderId}
DIRECTORY_TOKEN_FIELDS = ('fcmToken', 'riderFcmToken', 'fcm')

# rider_assignments/{assignmentId}
ASSIGNMENT_TOKEN_FIELDS = ('riderFcmToken', 'riderToken', 'riderFCM')

# Orders/{orderId}
ORDER_ASSIGNEE_FIELDS = ('assignedTo', 'riderId', 'assignedRider', 'driverId', 'assigned_driver_email')
ORDER_TOKEN_FIELDS = ('riderFcmToken', 'assignedRiderFcmToken', 'riderToken')


def is_empty(value):
    """True for None, empty strings and other falsy values."""
    return not value


def first_non_empty(record: Optional[Mapping[str, Any]], keys: Sequence[str]) -> Optional[Any]:
    """Return the first non-empty value among keys, or None."""
    if not record:
        return None
    for key in keys:
        value = record.get(key)
        if not is_empty(value):
            return value
    return None
