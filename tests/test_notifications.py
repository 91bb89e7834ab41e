import pytest
import requests

from warranty_hub.services.mail_client import MailClient, MailError, to_recipient
from warranty_hub.services.notification_service import NotificationService


class RecordingMailClient:
    def __init__(self, fail=False):
        self.fail = fail
        self.messages = []

    def send(self, to, subject, html):
        if self.fail:
            raise requests.ConnectionError("mailjet down")
        self.messages.append((to, subject, html))
        return {}


def test_to_recipient():
    assert to_recipient("Jan Kowalski <jan@example.com>") == {"Email": "jan@example.com", "Name": "Jan Kowalski"}
    assert to_recipient(" jan@example.com ") == {"Email": "jan@example.com"}


def test_build_payload():
    payload = MailClient(api_key="k", api_secret="s").build_payload("a@b.io", "Hello", "<p>x</p>")
    message = payload["Messages"][0]
    assert message["To"] == [{"Email": "a@b.io"}]
    assert message["Subject"] == "Hello"
    assert message["HTMLPart"] == "<p>x</p>"


def test_send_without_credentials():
    client = MailClient()
    client.api_key = None
    client.api_secret = None
    with pytest.raises(MailError):
        client.send("a@b.io", "Hello", "<p>x</p>")


def test_warranty_registered_notifies_requester_and_desk():
    mail = RecordingMailClient()
    NotificationService(mail_client=mail, notify_email="desk@example.com").warranty_registered(
        user_name="<Ann>", user_email="ann@example.com", serial="SN1", product_name="ThinkPad"
    )

    recipients = [to for to, _, _ in mail.messages]
    assert recipients == ["ann@example.com", "desk@example.com"]
    # user input is escaped in the HTML body
    assert "&lt;Ann&gt;" in mail.messages[0][2]


def test_status_change_mail():
    mail = RecordingMailClient()
    NotificationService(mail_client=mail).warranty_status_changed(
        user_name="Ann", user_email="ann@example.com", serial="SN1", status="rejected"
    )
    assert mail.messages[0][1] == "Your warranty registration was rejected"


def test_delivery_failure_is_not_raised():
    mail = RecordingMailClient(fail=True)
    NotificationService(mail_client=mail, notify_email="desk@example.com").contact_received(
        name="Ann", email="ann@example.com", phone="1", message="hi"
    )
    assert mail.messages == []


def test_missing_recipient_is_skipped():
    mail = RecordingMailClient()
    NotificationService(mail_client=mail, notify_email=None).contact_received(
        name="Ann", email="ann@example.com", phone="1", message="hi"
    )
    assert mail.messages == []
