from unittest import mock

import pytest
import requests

from sheet_import.config import CRMConfig
from sheet_import.crm_client import CRMClient
from sheet_import.errors import CRMRequestError


def make_response(status, payload=b'{"contact": {"id": "abc"}}'):
    resp = requests.Response()
    resp.status_code = status
    resp._content = payload
    return resp


@pytest.fixture
def client():
    return CRMClient(CRMConfig(api_key="secret", base_url="https://crm.test/"), timeout=5)


def test_session_headers(client):
    headers = client.session.headers
    assert headers["Authorization"] == "Bearer secret"
    assert headers["Version"] == "2021-07-28"
    assert headers["Content-Type"] == "application/json"


def test_upsert_posts_contact_once(client):
    contact = {"email": "a@x.com", "locationId": "loc", "source": "Google Sheet Import: Leads"}
    with mock.patch.object(client.session, "request", return_value=make_response(200)) as req:
        data = client.upsert_contact(contact)
    req.assert_called_once_with("POST", "https://crm.test/contacts/upsert", timeout=5, json=contact)
    assert data == {"contact": {"id": "abc"}}


def test_http_error_raises_without_retry(client):
    with mock.patch.object(client.session, "request", return_value=make_response(503, b"busy")) as req:
        with pytest.raises(CRMRequestError) as exc:
            client.upsert_contact({"email": "a@x.com"})
    assert req.call_count == 1
    assert exc.value.status == 503


def test_transport_error_is_wrapped(client):
    with mock.patch.object(client.session, "request", side_effect=requests.ConnectionError("refused")):
        with pytest.raises(CRMRequestError, match="refused"):
            client.upsert_contact({"phone": "1"})


def test_empty_or_non_json_body(client):
    with mock.patch.object(client.session, "request", return_value=make_response(200, b"")):
        assert client.upsert_contact({"phone": "1"}) == {}
    with mock.patch.object(client.session, "request", return_value=make_response(201, b"ok")):
        assert client.upsert_contact({"phone": "1"}) == {}
