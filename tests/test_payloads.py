"""
Tests for notification payloads and their FCM message form.
"""

import pytest
from firebase_admin import messaging

from utils.payloads import (
    ASSIGNMENT_REQUEST,
    CLICK_ACTION,
    MANUAL_ASSIGNMENT,
    MANUAL_BODY,
    MANUAL_TITLE,
    NotificationPayload,
    OFFER_ALERT_BODY,
    OFFER_ALERT_TITLE,
    OFFER_TITLE,
    build_manual_assignment_payload,
    build_offer_payload,
)


class TestOfferPayload:

    def test_data_map(self):
        payload = build_offer_payload("tok1", "o1")

        assert payload.token == "tok1"
        assert dict(payload.data) == {
            "type": ASSIGNMENT_REQUEST,
            "orderId": "o1",
            "click_action": CLICK_ACTION,
        }
        assert payload.title == OFFER_TITLE

    def test_order_id_coerced_to_string(self):
        payload = build_offer_payload("tok1", 1234)

        assert payload.data["orderId"] == "1234"
        assert not hasattr(payload, "order_id")

    def test_data_is_read_only(self):
        payload = build_offer_payload("tok1", "o1")

        with pytest.raises(TypeError):
            payload.data["type"] = "other"

    def test_empty_token_rejected(self):
        with pytest.raises(ValueError):
            build_offer_payload("", "o1")


class TestManualAssignmentPayload:

    def test_text_and_type(self):
        payload = build_manual_assignment_payload("tok42", "o9")

        assert payload.notification_type == MANUAL_ASSIGNMENT
        assert payload.title == MANUAL_TITLE
        assert payload.body == MANUAL_BODY
        assert payload.hints.alert_title == MANUAL_TITLE


class TestMessageConversion:

    def test_android_config(self):
        message = build_offer_payload("tok1", "o1", channel_id="custom-channel").to_message()

        assert isinstance(message, messaging.Message)
        assert message.token == "tok1"
        assert message.android.priority == "high"
        assert message.android.ttl == 0
        assert message.android.notification.channel_id == "custom-channel"
        assert message.android.notification.priority == "max"
        assert message.android.notification.visibility == "public"
        assert message.android.notification.default_sound is True

    def test_apns_config(self):
        message = build_offer_payload("tok1", "o1").to_message()

        assert message.apns.headers == {
            "apns-priority": "10",
            "apns-expiration": "0",
            "apns-push-type": "alert",
        }
        assert message.apns.payload.aps.alert.title == OFFER_ALERT_TITLE
        assert message.apns.payload.aps.sound == "default"

    def test_offer_alert_body_copy(self):
        message = build_offer_payload("tok1", "o1").to_message()

        assert message.apns.payload.aps.alert.body == "Tap to accept \u2014 2 min"
        assert OFFER_ALERT_BODY == "Tap to accept \u2014 2 min"

    def test_message_data_is_plain_dict(self):
        message = build_manual_assignment_payload("tok42", "o9").to_message()

        assert message.data == {
            "type": MANUAL_ASSIGNMENT,
            "orderId": "o9",
            "click_action": CLICK_ACTION,
        }
        assert message.notification.title == MANUAL_TITLE

    def test_payload_without_hints(self):
        message = NotificationPayload(token="t", title="a", body="b", data={"type": "x"}).to_message()

        assert message.android is None
        assert message.apns is None
