import pytest
import requests

from xeroclient.core.client import XeroClient, parse_token_response
from xeroclient.core.exceptions import InvalidOptionsError, XeroError
from xeroclient.core.models import TenantConnection

from tests.conftest import FakeAdapter, random_guid, random_string


def test_missing_base_uri_fails_without_network(make_config, adapter):
    config = make_config()
    del config["base_uri"]
    config["handler"] = adapter

    with pytest.raises(InvalidOptionsError, match="API URL is not valid"):
        XeroClient(config)
    assert adapter.requests == []


@pytest.mark.parametrize(
    "overrides,message",
    [
        ({"base_uri": "https://example.com/api.xro/2.0/"}, "API URL is not valid"),
        ({"consumer_key": None}, "consumer_key"),
        ({"consumer_secret": ""}, "consumer_secret"),
        ({"private_key": None}, "private_key"),
        ({"private_key": "/does/not/exist.pem"}, "private_key"),
        ({"scheme": "basic"}, "Invalid scheme provided"),
    ],
)
def test_invalid_options(make_config, overrides, message):
    with pytest.raises(InvalidOptionsError, match=message):
        XeroClient(make_config(application="private", **overrides))


def test_private_key_directory_is_rejected(make_config, tmp_path):
    with pytest.raises(InvalidOptionsError, match="private_key"):
        XeroClient(make_config(application="private", private_key=str(tmp_path)))


def test_private_application_signs_with_rsa(make_config, adapter):
    config = make_config(application="private", handler=adapter)
    adapter.add(200, {"Contacts": []})

    client = XeroClient(config)
    response = client.get("Contacts")

    assert response.status_code == 200
    request = adapter.requests[0]
    assert request.url == "https://api.xero.com/api.xro/2.0/Contacts"
    authorization = request.headers["Authorization"]
    assert authorization.startswith("OAuth ")
    assert 'oauth_signature_method="RSA-SHA1"' in authorization
    assert f'oauth_consumer_key="{config["consumer_key"]}"' in authorization
    assert f'oauth_token="{config["consumer_key"]}"' in authorization


def test_public_application_signs_with_hmac(make_config, adapter):
    config = make_config(application="public", handler=adapter)
    adapter.add(200, {"Invoices": []})

    XeroClient(config).get("Invoices")

    authorization = adapter.requests[0].headers["Authorization"]
    assert 'oauth_signature_method="HMAC-SHA1"' in authorization
    assert f'oauth_token="{config["token"]}"' in authorization
    assert f'oauth_verifier="{config["verifier"]}"' in authorization


def test_oauth2_client_sends_bearer_and_tenant(adapter):
    adapter.add(200, {"Organisations": []})
    client = XeroClient({
        "base_uri": "https://api.xero.com/api.xro/2.0/",
        "scheme": "oauth2",
        "auth_token": "access-token",
        "tenant": "tenant-guid",
        "handler": adapter,
        "options": {"headers": {"Accept": "application/json"}},
    })

    client.get("Organisation")

    headers = adapter.requests[0].headers
    assert headers["Authorization"] == "Bearer access-token"
    assert headers["xero-tenant-id"] == "tenant-guid"
    assert headers["Accept"] == "application/json"
    assert client.scheme == "oauth2"


def test_caller_headers_cannot_replace_auth(adapter):
    adapter.add(200, {})
    client = XeroClient({
        "base_uri": "https://api.xero.com/api.xro/2.0/",
        "scheme": "oauth2",
        "auth_token": "access-token",
        "handler": adapter,
    })

    client.get("Organisation", headers={"Authorization": "Bearer other"})

    assert adapter.requests[0].headers["Authorization"] == "Bearer access-token"


def test_transport_options(adapter):
    seen = []
    adapter.add(200, {})
    client = XeroClient({
        "base_uri": "https://api.xero.com/api.xro/2.0/",
        "scheme": "oauth2",
        "auth_token": "t",
        "handler": adapter,
        "options": {
            "params": {"summaryOnly": "true"},
            "timeout": 12,
            "hooks": {"response": lambda r, *args, **kwargs: seen.append(r.status_code)},
        },
    })

    client.get("Invoices", params=client.compile_conditions())

    assert client.timeout == 12
    assert adapter.requests[0].url == "https://api.xero.com/api.xro/2.0/Invoices?summaryOnly=true"
    assert seen == [200]


def test_query_helper_on_client(adapter):
    adapter.add(200, {"Contacts": []})
    client = XeroClient({
        "base_uri": "https://api.xero.com/api.xro/2.0/",
        "scheme": "oauth2",
        "auth_token": "t",
        "handler": adapter,
    })
    client.add_condition("IsSupplier", True).add_operator("AND").add_condition("Name", "A", "StartsWith")
    params = {**client.compile_conditions(), **client.order_by("Name", "DESC")}

    client.get("Contacts", params=params)

    prepared = requests.Request("GET", "https://api.xero.com/api.xro/2.0/Contacts", params={
        "where": 'IsSupplier=="true" AND Name.StartsWith("A")',
        "order": "Name DESC",
    }).prepare()
    assert adapter.requests[0].url == prepared.url


@pytest.mark.parametrize("status", [400, 401, 404, 500])
def test_http_errors_propagate(adapter, status):
    adapter.add(status, {"Message": "nope"})
    client = XeroClient({
        "base_uri": "https://api.xero.com/api.xro/2.0/",
        "scheme": "oauth2",
        "auth_token": "t",
        "handler": adapter,
    })
    with pytest.raises(requests.HTTPError) as exc_info:
        client.get("Invoices")
    assert exc_info.value.response.status_code == status


@pytest.mark.parametrize("method", ["post", "put", "delete"])
def test_verbs(adapter, method):
    adapter.add(200, {"Id": "1"})
    client = XeroClient({
        "base_uri": "https://api.xero.com/api.xro/2.0/",
        "scheme": "oauth2",
        "auth_token": "t",
        "handler": adapter,
    })

    response = getattr(client, method)("/Contacts/1")

    assert response.json() == {"Id": "1"}
    assert adapter.requests[0].method == method.upper()
    assert adapter.requests[0].url == "https://api.xero.com/api.xro/2.0/Contacts/1"


def test_valid_url_helpers(private_key_file):
    assert "https://api.xero.com/api.xro/2.0/" in XeroClient.get_valid_urls()
    assert XeroClient.is_valid_url("https://api.xero.com/oauth/AccessToken")
    assert XeroClient.is_valid_private_key(str(private_key_file))


def test_get_request_token(make_config, adapter):
    config = make_config(application="public", handler=adapter, callback="https://example.com/callback")
    expected = {"oauth_token": config["token"], "oauth_token_secret": config["token_secret"]}
    adapter.add(200, f"oauth_token={config['token']}&oauth_token_secret={config['token_secret']}")

    tokens = XeroClient.get_request_token(config["consumer_key"], config["consumer_secret"], config)

    assert tokens == expected
    request = adapter.requests[0]
    assert request.method == "POST"
    assert request.url == "https://api.xero.com/oauth/RequestToken"
    assert 'oauth_signature_method="HMAC-SHA1"' in request.headers["Authorization"]


def test_get_request_token_ignores_private_application(make_config, adapter):
    """Exchange always runs as a public application, whatever options say."""
    config = make_config(application="private", handler=adapter, base_uri="https://example.com/")
    adapter.add(200, "oauth_token=A&oauth_token_secret=B&oauth_callback_confirmed=true")

    tokens = XeroClient.get_request_token("key", "secret", config)

    assert tokens == {"oauth_token": "A", "oauth_token_secret": "B", "oauth_callback_confirmed": "true"}
    authorization = adapter.requests[0].headers["Authorization"]
    assert 'oauth_consumer_key="key"' in authorization
    assert "HMAC-SHA1" in authorization


def test_get_access_token(adapter):
    token, secret, verifier = random_string(), random_string(), random_string()
    adapter.add(200, "oauth_token=access%20token&oauth_token_secret=s%3D%3D&oauth_expires_in=1800")

    tokens = XeroClient.get_access_token("key", "secret", token, secret, verifier, {"handler": adapter})

    assert tokens == {"oauth_token": "access token", "oauth_token_secret": "s==", "oauth_expires_in": "1800"}
    request = adapter.requests[0]
    assert request.url == "https://api.xero.com/oauth/AccessToken"
    assert f'oauth_verifier="{verifier}"' in request.headers["Authorization"]
    assert f'oauth_token="{token}"' in request.headers["Authorization"]


def test_token_exchange_error_propagates(adapter):
    adapter.add(401, "oauth_problem=signature_invalid")
    with pytest.raises(requests.HTTPError):
        XeroClient.get_request_token("key", "secret", {"handler": adapter})


def test_parse_token_response():
    assert parse_token_response("oauth_token=A&oauth_token_secret=B==") == {
        "oauth_token": "A",
        "oauth_token_secret": "B==",
    }


@pytest.mark.parametrize(
    "status,body,expected_count",
    [
        (200, [], 0),
        (200, [{"id": random_guid(), "tenantId": random_guid(), "tenantType": "ORGANISATION"}], 1),
        (
            200,
            [
                {"id": random_guid(), "tenantId": random_guid(), "tenantType": "ORGANISATION"},
                {"id": random_guid(), "tenantId": random_guid(), "tenantType": "PRACTICE"},
            ],
            2,
        ),
    ],
)
def test_get_connections(adapter, status, body, expected_count):
    adapter.add(status, body)
    client = XeroClient({
        "base_uri": "https://api.xero.com/connections",
        "scheme": "oauth2",
        "auth_token": "t",
        "handler": adapter,
    })

    connections = client.get_connections()

    assert len(connections) == expected_count
    assert all(isinstance(c, TenantConnection) for c in connections)
    assert adapter.requests[0].url == "https://api.xero.com/connections"


def test_get_connections_raises_on_http_error(adapter):
    adapter.add(403, {"title": "Forbidden"})
    client = XeroClient({
        "base_uri": "https://api.xero.com/api.xro/2.0/",
        "scheme": "oauth2",
        "auth_token": "t",
        "handler": adapter,
    })
    with pytest.raises(requests.HTTPError):
        client.get_connections()


def test_get_connections_rejects_non_list_body(adapter):
    adapter.add(200, {"tenantId": random_guid()})
    client = XeroClient({
        "base_uri": "https://api.xero.com/api.xro/2.0/",
        "scheme": "oauth2",
        "auth_token": "t",
        "handler": adapter,
    })
    with pytest.raises(XeroError, match="Expected a list of connections, got dict"):
        client.get_connections()


def test_get_connections_empty_on_connection_failure():
    class BrokenAdapter(FakeAdapter):
        def send(self, request, **kwargs):
            raise requests.ConnectionError("connection reset")

    client = XeroClient({
        "base_uri": "https://api.xero.com/api.xro/2.0/",
        "scheme": "oauth2",
        "auth_token": "t",
        "handler": BrokenAdapter(),
    })
    assert client.get_connections() == []


def test_new_client_has_no_token_state(make_config):
    client = XeroClient(make_config())
    assert client.get_tenant_ids() == []
    assert client.get_refreshed_token() is None
