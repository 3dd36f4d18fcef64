import json
from dataclasses import dataclass

import firebase_admin
from firebase_admin import credentials, firestore, messaging

from .logging_utils import create_logger

log = create_logger('firebase_client')


def get_firebase_credentials(secret_name):
    """Load a service account JSON from Secret Manager."""
    from google.cloud import secretmanager

    client = secretmanager.SecretManagerServiceClient()
    response = client.access_secret_version(name=secret_name)
    return json.loads(response.payload.data.decode("UTF-8"))


def initialize_firebase(settings):
    """Return the default Firebase app, initializing it on first use."""
    try:
        app = firebase_admin.get_app()
        log.info(f"✅ Firebase already initialized: {app.name}")
        return app
    except ValueError:
        pass

    options = {'projectId': settings.project_id} if settings.project_id else None
    if settings.credentials_secret:
        cred = credentials.Certificate(get_firebase_credentials(settings.credentials_secret))
        app = firebase_admin.initialize_app(cred, options)
        log.info("✅ Firebase initialized with service account from Secret Manager")
    else:
        app = firebase_admin.initialize_app(options=options)
        log.info("✅ Firebase initialized with application default credentials")
    return app


@dataclass(frozen=True)
class FirebaseClients:
    """Platform handles shared by the token resolver and the notifier."""
    app: object
    db: object


def create_firebase_clients(settings):
    app = initialize_firebase(settings)
    db = firestore.client(app=app, database_id=settings.database_id)
    return FirebaseClients(app=app, db=db)


class FirestoreDirectory:
    """Rider profiles keyed by rider id, read-only."""

    def __init__(self, db, collection):
        self.db = db
        self.collection = collection

    def lookup(self, key):
        doc = self.db.collection(self.collection).document(key).get()
        if not doc.exists:
            return None
        return doc.to_dict() or {}


class MessagingSender:
    """Send NotificationPayloads through FCM."""

    def __init__(self, app=None, dry_run=False):
        self.app = app
        self.dry_run = dry_run

    def send(self, payload):
        """Send one payload and return the FCM message id."""
        return messaging.send(payload.to_message(), dry_run=self.dry_run, app=self.app)
