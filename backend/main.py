# Re-exports the trigger functions so `firebase deploy` finds them in main.py

from send_assignment_notification.main import send_assignment_notification
from send_manual_assignment_notification.main import send_manual_assignment_notification

__all__ = ["send_assignment_notification", "send_manual_assignment_notification"]
