from firebase_admin import messaging

from .assignment_rules import NotificationOutcome
from .config import DEFAULT_ANDROID_CHANNEL_ID
from .firebase_client import FirestoreDirectory, MessagingSender
from .logging_utils import create_logger
from .token_resolver import TokenResolver


class AssignmentNotifier:
    """React to one Firestore change and push at most one notification.

    The rule decides whether the event concerns a rider assignment and how
    the payload looks; everything else (token resolution, sending, logging)
    is shared by both triggers.
    """

    def __init__(self, rule, resolver, sender, channel_id=DEFAULT_ANDROID_CHANNEL_ID, logger=None):
        self.rule = rule
        self.resolver = resolver
        self.sender = sender
        self.channel_id = channel_id
        self.log = logger or create_logger(rule.name)

    def handle(self, event):
        log = self.log.with_context(request_id=event.event_id, document_id=event.document_id)
        name = self.rule.name

        target = self.rule.extract(event)
        if target is None:
            log.info(f"{name}: {self.rule.skip_reason}, skipping")
            return self.rule.skip_outcome

        token = self.resolver.resolve(target.identity_key, target.inline_token)
        if not token:
            log.info(f"{name}: no fcm token available", {
                "riderId": target.identity_key,
                "orderId": target.order_id
            })
            return NotificationOutcome.NO_TOKEN

        payload = self.rule.build(token, target.order_id, self.channel_id)
        log.debug(f"{name}: FCM message structure", payload.to_log_dict())

        try:
            message_id = self.sender.send(payload)
        except messaging.UnregisteredError as e:
            log.error(f"{name}: fcm token is no longer registered", {
                "riderId": target.identity_key,
                "orderId": target.order_id,
                "error_type": type(e).__name__,
                "error": str(e)
            })
            return NotificationOutcome.SEND_FAILED
        except Exception as e:
            log.error(f"{name}: error sending notification", {
                "riderId": target.identity_key,
                "orderId": target.order_id,
                "error_type": type(e).__name__,
                "error": str(e)
            }, exc_info=True)
            return NotificationOutcome.SEND_FAILED

        log.info(f"{name}: notification sent", {
            "riderId": target.identity_key,
            "orderId": target.order_id,
            "type": payload.notification_type,
            "message_id": message_id
        })
        return NotificationOutcome.SENT


def create_notifier(rule, clients, settings):
    """Wire a notifier to Firestore and FCM."""
    directory = FirestoreDirectory(clients.db, settings.drivers_collection)
    return AssignmentNotifier(
        rule=rule,
        resolver=TokenResolver(directory),
        sender=MessagingSender(app=clients.app, dry_run=settings.dry_run),
        channel_id=settings.android_channel_id,
    )
