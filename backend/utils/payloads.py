from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional

from firebase_admin import messaging

from .config import DEFAULT_ANDROID_CHANNEL_ID

ASSIGNMENT_REQUEST = 'assignment_request'
MANUAL_ASSIGNMENT = 'manual_assignment'

# Flutter's firebase_messaging opens the app on this click action
CLICK_ACTION = 'FLUTTER_NOTIFICATION_CLICK'

OFFER_TITLE = '🚨 New Order Offer!'
OFFER_BODY = 'Tap quickly! You have 2 minutes to accept.'
OFFER_ALERT_TITLE = 'New Order Offer!'
OFFER_ALERT_BODY = 'Tap to accept \u2014 2 min'

MANUAL_TITLE = 'You’ve been assigned an order!'
MANUAL_BODY = 'A new delivery is now assigned to you.'


@dataclass(frozen=True)
class DeliveryHints:
    """Platform delivery options shared by every rider assignment push.

    TTL 0 means deliver now or drop: a stale offer must never be queued.
    """
    alert_title: str
    alert_body: str
    channel_id: str = DEFAULT_ANDROID_CHANNEL_ID
    android_priority: str = 'high'
    ttl: int = 0
    notification_priority: str = 'max'
    visibility: str = 'public'
    default_sound: bool = True
    apns_priority: str = '10'
    apns_expiration: str = '0'
    apns_push_type: str = 'alert'
    sound: str = 'default'

    def android_config(self):
        return messaging.AndroidConfig(
            priority=self.android_priority,
            ttl=self.ttl,
            notification=messaging.AndroidNotification(
                channel_id=self.channel_id,
                priority=self.notification_priority,
                visibility=self.visibility,
                default_sound=self.default_sound,
            ),
        )

    def apns_headers(self):
        return {
            'apns-priority': self.apns_priority,
            'apns-expiration': self.apns_expiration,
            'apns-push-type': self.apns_push_type,
        }

    def apns_config(self):
        return messaging.APNSConfig(
            headers=self.apns_headers(),
            payload=messaging.APNSPayload(
                aps=messaging.Aps(
                    alert=messaging.ApsAlert(title=self.alert_title, body=self.alert_body),
                    sound=self.sound,
                )
            ),
        )


@dataclass(frozen=True)
class NotificationPayload:
    """One push notification for one rider device."""
    token: str
    title: str
    body: str
    data: Mapping[str, str]
    hints: Optional[DeliveryHints] = field(repr=False, default=None)

    def __post_init__(self):
        if not self.token:
            raise ValueError("NotificationPayload requires a non-empty token")
        object.__setattr__(self, 'data', MappingProxyType(dict(self.data)))

    @property
    def notification_type(self):
        return self.data.get('type')

    def to_message(self):
        """Build the firebase_admin Message handed to FCM."""
        return messaging.Message(
            token=self.token,
            notification=messaging.Notification(title=self.title, body=self.body),
            data=dict(self.data),
            android=self.hints.android_config() if self.hints else None,
            apns=self.hints.apns_config() if self.hints else None,
        )

    def to_log_dict(self):
        """Message structure for logging; the token is left to the sanitizer."""
        log_dict = {
            'token': self.token,
            'notification': {'title': self.title, 'body': self.body},
            'data': dict(self.data),
        }
        if self.hints:
            log_dict['android'] = {
                'priority': self.hints.android_priority,
                'ttl': self.hints.ttl,
                'channel_id': self.hints.channel_id,
            }
            log_dict['apns'] = {'headers': self.hints.apns_headers()}
        return log_dict


def _build_payload(token, order_id, notification_type, title, body, alert_title, alert_body, channel_id):
    return NotificationPayload(
        token=token,
        title=title,
        body=body,
        data={
            'type': notification_type,
            'orderId': str(order_id),
            'click_action': CLICK_ACTION,
        },
        hints=DeliveryHints(alert_title=alert_title, alert_body=alert_body, channel_id=channel_id),
    )


def build_offer_payload(token, order_id, channel_id=DEFAULT_ANDROID_CHANNEL_ID):
    """Payload for an automatic offer written to rider_assignments."""
    return _build_payload(
        token, order_id, ASSIGNMENT_REQUEST,
        OFFER_TITLE, OFFER_BODY, OFFER_ALERT_TITLE, OFFER_ALERT_BODY,
        channel_id,
    )


def build_manual_assignment_payload(token, order_id, channel_id=DEFAULT_ANDROID_CHANNEL_ID):
    """Payload for an order assigned to a rider from the dispatch console."""
    return _build_payload(
        token, order_id, MANUAL_ASSIGNMENT,
        MANUAL_TITLE, MANUAL_BODY, MANUAL_TITLE, MANUAL_BODY,
        channel_id,
    )
