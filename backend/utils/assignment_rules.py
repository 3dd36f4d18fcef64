from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .field_aliases import (
    ASSIGNMENT_TOKEN_FIELDS,
    ORDER_ASSIGNEE_FIELDS,
    ORDER_TOKEN_FIELDS,
    first_non_empty,
)
from .payloads import build_manual_assignment_payload, build_offer_payload


class NotificationOutcome(str, Enum):
    SENT = 'sent'
    MISSING_ORDER = 'missing_order'
    NO_CHANGE = 'no_change'
    NO_TOKEN = 'no_token'
    SEND_FAILED = 'send_failed'


@dataclass(frozen=True)
class AssignmentTarget:
    """Who to notify about which order."""
    order_id: str
    identity_key: Optional[str]
    inline_token: Optional[str]


class AssignmentRequestRule:
    """A new rider_assignments document offers an order to a rider."""
    name = 'sendAssignmentNotification'
    skip_reason = 'missing orderId'
    skip_outcome = NotificationOutcome.MISSING_ORDER

    def extract(self, event) -> Optional[AssignmentTarget]:
        fields = event.fields or {}
        order_id = fields.get('orderId')
        if not order_id:
            return None
        return AssignmentTarget(
            order_id=str(order_id),
            identity_key=fields.get('riderId') or None,
            inline_token=first_non_empty(fields, ASSIGNMENT_TOKEN_FIELDS),
        )

    def build(self, token, order_id, channel_id):
        return build_offer_payload(token, order_id, channel_id=channel_id)


class ManualAssignmentRule:
    """An Orders document changed hands to a new rider."""
    name = 'sendManualAssignmentNotification'
    skip_reason = 'assigned rider unchanged or empty'
    skip_outcome = NotificationOutcome.NO_CHANGE

    def __init__(self, id_param='orderId'):
        self.id_param = id_param

    def assignee(self, fields):
        return first_non_empty(fields, ORDER_ASSIGNEE_FIELDS)

    def extract(self, event) -> Optional[AssignmentTarget]:
        previous = self.assignee(event.before)
        current = self.assignee(event.after)

        # exact match only, "R1" and "r1" are different riders
        if not current or current == previous:
            return None

        order_id = (event.params or {}).get(self.id_param) or event.document_id
        return AssignmentTarget(
            order_id=str(order_id),
            identity_key=current,
            inline_token=first_non_empty(event.after, ORDER_TOKEN_FIELDS),
        )

    def build(self, token, order_id, channel_id):
        return build_manual_assignment_payload(token, order_id, channel_id=channel_id)
