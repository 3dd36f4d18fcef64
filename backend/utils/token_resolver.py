from collections.abc import Mapping
from typing import Optional

from .field_aliases import DIRECTORY_TOKEN_FIELDS, first_non_empty
from .logging_utils import create_logger

log = create_logger('token_resolver')


class TokenResolver:
    """Resolve an FCM token for a rider.

    Prefers a token written on the triggering document; otherwise looks the
    rider up in the directory (``Drivers/{riderId}``). Lookup failures are
    logged and resolve to None so a notification never fails the write.
    """

    def __init__(self, directory, token_fields=DIRECTORY_TOKEN_FIELDS, logger=None):
        self.directory = directory
        self.token_fields = tuple(token_fields)
        self.log = logger or log

    def resolve(self, identity_key: Optional[str], inline_token: Optional[str] = None) -> Optional[str]:
        if inline_token:
            return str(inline_token)
        if not identity_key:
            return None

        try:
            record = self.directory.lookup(identity_key)
            if record is None:
                return None
            if not isinstance(record, Mapping):
                raise TypeError(f"directory record for {identity_key} is {type(record).__name__}, expected a mapping")
            token = first_non_empty(record, self.token_fields)
        except Exception as e:
            self.log.error(f"resolve_fcm_token: lookup error: {str(e)}", {
                "riderId": identity_key,
                "error_type": type(e).__name__
            })
            return None

        return str(token) if token is not None else None
