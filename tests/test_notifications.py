"""Tests for the outbound notification client and donor outreach."""

import json

import httpx
import pytest

from lifeline.core.errors import DependencyError, ValidationError
from lifeline.services.donations import DonationService
from lifeline.services.notifications import NotificationService
from tests.utils import make_donation


def _service(handler, *, url="https://notify.test/send", token="secret") -> NotificationService:
    return NotificationService(url=url, token=token, client=httpx.Client(transport=httpx.MockTransport(handler)))


class TestNotificationService:
    def test_posts_recipients_subject_and_message(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["auth"] = request.headers.get("Authorization")
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"ok": True})

        _service(handler).send(emails=["a@example.com"], subject="Need O+", message="Please come in")

        assert seen["auth"] == "Bearer secret"
        assert seen["body"] == {"emails": ["a@example.com"], "subject": "Need O+", "message": "Please come in"}

    def test_omits_authorization_without_token(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["auth"] = request.headers.get("Authorization")
            return httpx.Response(204)

        _service(handler, token=None).send(emails=["a@example.com"], subject="s", message="m")

        assert seen["auth"] is None

    def test_error_response_is_dependency_error(self):
        service = _service(lambda request: httpx.Response(500, text="mailer down"))

        with pytest.raises(DependencyError, match="mailer down"):
            service.send(emails=["a@example.com"], subject="s", message="m")

    def test_transport_error_is_dependency_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(DependencyError):
            _service(handler).send(emails=["a@example.com"], subject="s", message="m")

    def test_requires_configured_url(self):
        with pytest.raises(DependencyError):
            NotificationService(url=None).send(emails=["a@example.com"], subject="s", message="m")


class TestDonationOutreach:
    def test_lists_donations_for_blood_type_with_names(self, db_session, donor, hospital):
        make_donation(db_session, donor_id=donor.id, hospital_id=hospital.id, blood_type="O+", units=2)
        make_donation(db_session, donor_id="anonymous", hospital_id=hospital.id, blood_type="O+")
        make_donation(db_session, donor_id=donor.id, hospital_id=hospital.id, blood_type="A+")

        service = DonationService(notification_service=NotificationService(url=None), session=db_session)
        rows = service.for_blood_type(hospital_id=hospital.id, blood_type="O+")

        assert sorted(row.donor_name for row in rows) == ["Ada Okafor", "anonymous"]

    def test_request_emails_distinct_donors_of_blood_type(self, db_session, donor, second_donor, hospital):
        make_donation(db_session, donor_id=donor.id, hospital_id=hospital.id, blood_type="O+")
        make_donation(db_session, donor_id=donor.id, hospital_id=hospital.id, blood_type="O+")
        make_donation(db_session, donor_id=second_donor.id, hospital_id=hospital.id, blood_type="O+")
        sent = []

        def handler(request: httpx.Request) -> httpx.Response:
            sent.append(json.loads(request.content))
            return httpx.Response(200)

        service = DonationService(notification_service=_service(handler), session=db_session)
        recipients = service.request_donations(
            hospital_id=hospital.id, blood_type="O+", subject="Blood Donation Request", message="Stocks are low"
        )

        assert recipients == ["ada@example.com", "ben@example.com"]
        assert len(sent) == 1
        assert sent[0]["emails"] == recipients

    def test_request_without_recipients(self, db_session, hospital):
        service = DonationService(notification_service=NotificationService(url=None), session=db_session)

        with pytest.raises(ValidationError):
            service.request_donations(hospital_id=hospital.id, blood_type="AB-", subject="s", message="m")
