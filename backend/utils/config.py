import logging
import os
from dataclasses import dataclass
from typing import Optional

DEFAULT_DATABASE = '(default)'
DEFAULT_ASSIGNMENTS_COLLECTION = 'rider_assignments'
DEFAULT_ORDERS_COLLECTION = 'Orders'
DEFAULT_DRIVERS_COLLECTION = 'Drivers'
DEFAULT_ANDROID_CHANNEL_ID = 'rider-assignment'

TRUE_VALUES = ('1', 'true', 'yes', 'on')


def _env_flag(environ, name, default):
    value = environ.get(name)
    if value is None or value.strip() == '':
        return default
    return value.strip().lower() in TRUE_VALUES


@dataclass(frozen=True)
class Settings:
    """Runtime configuration for the notification triggers."""
    project_id: Optional[str] = None
    database: str = DEFAULT_DATABASE
    assignments_collection: str = DEFAULT_ASSIGNMENTS_COLLECTION
    orders_collection: str = DEFAULT_ORDERS_COLLECTION
    drivers_collection: str = DEFAULT_DRIVERS_COLLECTION
    android_channel_id: str = DEFAULT_ANDROID_CHANNEL_ID
    credentials_secret: Optional[str] = None
    dry_run: bool = False
    enable_cloud_logging: bool = False
    log_level: int = logging.INFO

    @property
    def database_id(self):
        """Database id for the Firestore client, None for the default database."""
        if not self.database or self.database == DEFAULT_DATABASE:
            return None
        return self.database


def load_settings(environ=None):
    """Build Settings from environment variables."""
    environ = os.environ if environ is None else environ

    log_level = logging.getLevelName(environ.get('LOG_LEVEL', 'INFO').upper())
    if not isinstance(log_level, int):
        log_level = logging.INFO

    return Settings(
        project_id=environ.get('GOOGLE_CLOUD_PROJECT') or environ.get('GCP_PROJECT') or None,
        database=environ.get('FIRESTORE_DATABASE') or DEFAULT_DATABASE,
        assignments_collection=environ.get('ASSIGNMENTS_COLLECTION') or DEFAULT_ASSIGNMENTS_COLLECTION,
        orders_collection=environ.get('ORDERS_COLLECTION') or DEFAULT_ORDERS_COLLECTION,
        drivers_collection=environ.get('DRIVERS_COLLECTION') or DEFAULT_DRIVERS_COLLECTION,
        android_channel_id=environ.get('ANDROID_CHANNEL_ID') or DEFAULT_ANDROID_CHANNEL_ID,
        credentials_secret=environ.get('FIREBASE_CREDENTIALS_SECRET') or None,
        dry_run=_env_flag(environ, 'NOTIFIER_DRY_RUN', False),
        # K_SERVICE is set by Cloud Functions / Cloud Run
        enable_cloud_logging=_env_flag(environ, 'ENABLE_CLOUD_LOGGING', bool(environ.get('K_SERVICE'))),
        log_level=log_level,
    )
