import functools

import functions_framework
from firebase_functions import firestore_fn

from utils.assignment_notifier import create_notifier
from utils.assignment_rules import ManualAssignmentRule
from utils.config import load_settings
from utils.events import (
    UnsupportedEventError,
    updated_event_from_cloud_event,
    updated_event_from_firestore,
)
from utils.firebase_client import create_firebase_clients
from utils.logging_utils import create_logger, log_function_call, setup_cloud_logging

settings = load_settings()
log = create_logger('send_manual_assignment_notification')

ID_PARAM = 'orderId'


@functools.lru_cache(maxsize=1)
def get_notifier():
    """Build the notifier once per function instance."""
    if settings.enable_cloud_logging:
        setup_cloud_logging(settings.log_level)
    clients = create_firebase_clients(settings)
    return create_notifier(ManualAssignmentRule(id_param=ID_PARAM), clients, settings)


@firestore_fn.on_document_updated(document=f"{settings.orders_collection}/{{{ID_PARAM}}}")
@log_function_call(log)
def send_manual_assignment_notification(event):
    """Orders/{orderId} updated: notify the rider the order was just assigned to.

    Fires only when the assignee (assignedTo, riderId, assignedRider,
    driverId or assigned_driver_email) changes to a non-empty value.
    """
    return get_notifier().handle(updated_event_from_firestore(event))


@functions_framework.cloud_event
@log_function_call(log)
def send_manual_assignment_notification_event(cloud_event):
    try:
        event = updated_event_from_cloud_event(cloud_event, ID_PARAM)
    except UnsupportedEventError as e:
        log.error(f"sendManualAssignmentNotification: unreadable event: {str(e)}")
        return None
    return get_notifier().handle(event)
