"""Firestore change events as plain Python values.

Two sources feed the notifier:

* ``firebase_functions.firestore_fn`` events, whose ``data`` is a
  DocumentSnapshot (create) or a Change of snapshots (update).
* Raw CloudEvents delivered through functions-framework with a JSON body,
  where documents arrive as REST-style typed values::

    {"value": {"name": "projects/p/databases/(default)/documents/Orders/o1",
               "fields": {"riderId": {"stringValue": "r1"}}},
     "oldValue": {...}}
"""
from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class CreatedEvent:
    document_id: Optional[str]
    fields: Dict[str, Any]
    event_id: Optional[str] = None
    params: Dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class UpdatedEvent:
    document_id: Optional[str]
    before: Dict[str, Any]
    after: Dict[str, Any]
    event_id: Optional[str] = None
    params: Dict[str, str] = field(default_factory=dict)


class UnsupportedEventError(ValueError):
    """Raised when a CloudEvent body cannot be read as a Firestore document event."""


def snapshot_to_dict(snapshot):
    """Return a snapshot's fields, or {} for a missing or deleted document."""
    if snapshot is None:
        return {}
    to_dict = getattr(snapshot, 'to_dict', None)
    if to_dict is None:
        return {}
    return to_dict() or {}


def created_event_from_firestore(event):
    """Convert a firestore_fn on_document_created event."""
    snapshot = event.data
    return CreatedEvent(
        document_id=getattr(snapshot, 'id', None),
        fields=snapshot_to_dict(snapshot),
        event_id=getattr(event, 'id', None),
        params=dict(getattr(event, 'params', None) or {}),
    )


def updated_event_from_firestore(event):
    """Convert a firestore_fn on_document_updated event."""
    change = event.data
    before = getattr(change, 'before', None)
    after = getattr(change, 'after', None)
    return UpdatedEvent(
        document_id=getattr(after, 'id', None),
        before=snapshot_to_dict(before),
        after=snapshot_to_dict(after),
        event_id=getattr(event, 'id', None),
        params=dict(getattr(event, 'params', None) or {}),
    )


def decode_value(value):
    """Decode one REST-style Firestore typed value."""
    if not isinstance(value, dict):
        return value
    if 'nullValue' in value:
        return None
    if 'stringValue' in value:
        return value['stringValue']
    if 'integerValue' in value:
        return int(value['integerValue'])
    if 'doubleValue' in value:
        return float(value['doubleValue'])
    if 'booleanValue' in value:
        return bool(value['booleanValue'])
    if 'timestampValue' in value:
        return value['timestampValue']
    if 'referenceValue' in value:
        return value['referenceValue']
    if 'bytesValue' in value:
        return value['bytesValue']
    if 'geoPointValue' in value:
        return dict(value['geoPointValue'])
    if 'mapValue' in value:
        return decode_fields(value['mapValue'].get('fields', {}))
    if 'arrayValue' in value:
        return [decode_value(item) for item in value['arrayValue'].get('values', [])]
    raise UnsupportedEventError(f"Unknown Firestore value type: {sorted(value)}")


def decode_fields(fields):
    return {key: decode_value(value) for key, value in (fields or {}).items()}


def document_id_from_name(name):
    """Last path segment of projects/{p}/databases/{d}/documents/{collection}/{id}."""
    if not name:
        return None
    return name.rstrip('/').split('/')[-1]


def _event_body(cloud_event):
    data = getattr(cloud_event, 'data', None)
    if isinstance(data, (bytes, bytearray)):
        raise UnsupportedEventError("Binary (protobuf) event payloads are not supported; deploy with a JSON content type")
    if not isinstance(data, dict):
        raise UnsupportedEventError(f"Expected a dict event body, got {type(data).__name__}")
    return data


def _cloud_event_id(cloud_event):
    try:
        return cloud_event['id']
    except (KeyError, TypeError):
        return getattr(cloud_event, 'id', None)


def created_event_from_cloud_event(cloud_event, id_param):
    """Convert a raw JSON CloudEvent for a document creation."""
    body = _event_body(cloud_event)
    value = body.get('value') or {}
    document_id = document_id_from_name(value.get('name'))
    return CreatedEvent(
        document_id=document_id,
        fields=decode_fields(value.get('fields')),
        event_id=_cloud_event_id(cloud_event),
        params={id_param: document_id} if document_id else {},
    )


def updated_event_from_cloud_event(cloud_event, id_param):
    """Convert a raw JSON CloudEvent for a document update."""
    body = _event_body(cloud_event)
    value = body.get('value') or {}
    old_value = body.get('oldValue') or {}
    document_id = document_id_from_name(value.get('name') or old_value.get('name'))
    return UpdatedEvent(
        document_id=document_id,
        before=decode_fields(old_value.get('fields')),
        after=decode_fields(value.get('fields')),
        event_id=_cloud_event_id(cloud_event),
        params={id_param: document_id} if document_id else {},
    )
