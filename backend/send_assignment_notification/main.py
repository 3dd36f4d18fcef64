import functools

import functions_framework
from firebase_functions import firestore_fn

from utils.assignment_notifier import create_notifier
from utils.assignment_rules import AssignmentRequestRule
from utils.config import load_settings
from utils.events import (
    UnsupportedEventError,
    created_event_from_cloud_event,
    created_event_from_firestore,
)
from utils.firebase_client import create_firebase_clients
from utils.logging_utils import create_logger, log_function_call, setup_cloud_logging

settings = load_settings()
log = create_logger('send_assignment_notification')

ID_PARAM = 'assignmentId'


@functools.lru_cache(maxsize=1)
def get_notifier():
    """Build the notifier once per function instance."""
    if settings.enable_cloud_logging:
        setup_cloud_logging(settings.log_level)
    clients = create_firebase_clients(settings)
    return create_notifier(AssignmentRequestRule(), clients, settings)


@firestore_fn.on_document_created(document=f"{settings.assignments_collection}/{{{ID_PARAM}}}")
@log_function_call(log)
def send_assignment_notification(event):
    """New rider_assignments document: offer the order to the rider.

    Uses the token written on the assignment if present, otherwise the one
    stored on Drivers/{riderId}.
    """
    return get_notifier().handle(created_event_from_firestore(event))


@functions_framework.cloud_event
@log_function_call(log)
def send_assignment_notification_event(cloud_event):
    """Same trigger for Eventarc deployments with a JSON event body."""
    try:
        event = created_event_from_cloud_event(cloud_event, ID_PARAM)
    except UnsupportedEventError as e:
        log.error(f"sendAssignmentNotification: unreadable event: {str(e)}")
        return None
    return get_notifier().handle(event)
