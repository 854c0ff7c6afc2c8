import httpx
import pytest

from services.errors import UpstreamServiceError
from services.tally_service import TallyClient, CONNECTION_REFUSED_MESSAGE

TALLY_URL = "http://tally.test:9000"
COMPANIES_REPLY = "<ENVELOPE><BODY><COMPANY>Fleet Ops Ltd</COMPANY></BODY></ENVELOPE>"


def tally_client(handler) -> TallyClient:
    return TallyClient(TALLY_URL, transport=httpx.MockTransport(handler))


@pytest.fixture
def use_tally(app):
    def install(handler):
        app.state.tally_client = tally_client(handler)
    return install


def test_proxy_relays_xml(auth_client, use_tally):
    seen = {}

    def handler(request):
        seen["body"] = request.content.decode()
        seen["content_type"] = request.headers["content-type"]
        return httpx.Response(200, text=COMPANIES_REPLY)

    use_tally(handler)
    response = auth_client.post("/api/tally/proxy", json={"xml": "<ENVELOPE>ping</ENVELOPE>"})

    assert response.status_code == 200
    assert response.text == COMPANIES_REPLY
    assert response.headers["content-type"].startswith("application/xml")
    assert seen == {"body": "<ENVELOPE>ping</ENVELOPE>", "content_type": "application/xml"}


def test_proxy_requires_xml(auth_client, use_tally):
    use_tally(lambda request: httpx.Response(200, text=COMPANIES_REPLY))

    assert auth_client.post("/api/tally/proxy", json={}).status_code == 400
    response = auth_client.post("/api/tally/proxy", json={"xml": "   "})
    assert response.status_code == 400
    assert response.json()["detail"] == "Missing XML"


def test_proxy_upstream_error_is_502(auth_client, use_tally):
    use_tally(lambda request: httpx.Response(500, text="boom"))

    response = auth_client.post("/api/tally/proxy", json={"xml": "<ENVELOPE/>"})

    assert response.status_code == 502
    assert response.json()["detail"] == "Tally server responded with status: 500"


def test_connection_refused_is_502(auth_client, use_tally):
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    use_tally(handler)
    response = auth_client.get("/api/tally/test")

    assert response.status_code == 502
    assert response.json()["detail"] == CONNECTION_REFUSED_MESSAGE


def test_connection_test_success(auth_client, use_tally):
    use_tally(lambda request: httpx.Response(200, text=COMPANIES_REPLY))

    response = auth_client.get("/api/tally/test")

    assert response.status_code == 200
    assert response.json() == {"status": "success", "message": "Tally connection successful!"}


def test_connection_test_rejects_foreign_service():
    client = tally_client(lambda request: httpx.Response(200, text="<html>router login</html>"))

    with pytest.raises(UpstreamServiceError) as excinfo:
        client.test_connection()

    assert excinfo.value.status_code == 502


def test_timeout_maps_to_upstream_error():
    def handler(request):
        raise httpx.ReadTimeout("slow", request=request)

    with pytest.raises(UpstreamServiceError) as excinfo:
        tally_client(handler).proxy("<ENVELOPE/>")

    assert "did not respond" in excinfo.value.detail
