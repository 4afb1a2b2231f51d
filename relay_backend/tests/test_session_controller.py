import json

import httpx
from fastapi.testclient import TestClient

from relay_backend.src.api.main import create_app
from relay_backend.src.api.settings import RelaySettings
from relay_backend.src.db.config import get_entities_client
from relay_backend.src.db.service import EntitiesClient
from relay_backend.src.webclient import (
    FetchOutcome,
    OutcomeKind,
    SessionController,
    SessionView,
    UIState,
    classify_response,
    render,
)

API_URL = "http://gateway.test/api"
LOGOUT_URL = "http://gateway.test/logout"
LOGIN_PAGE = "http://idp.test/realms/app/login"


def _controller(handler, follow_redirects=True, cookies=None):
    navigated = []
    http = httpx.Client(transport=httpx.MockTransport(handler), follow_redirects=follow_redirects, cookies=cookies)
    controller = SessionController(api_url=API_URL, logout_url=LOGOUT_URL, http_client=http, navigate=navigated.append)
    return controller, navigated


def _json(status, payload):
    return lambda request: httpx.Response(status, json=payload)


def test_initial_state_is_logged_out():
    controller, _ = _controller(_json(200, []))
    assert controller.state is UIState.LOGGED_OUT
    page = controller.page()
    assert page.login_visible and not page.data_visible
    assert page.data_text == "" and page.error_text == ""


def test_success_logs_in_and_renders_rows():
    controller, _ = _controller(_json(200, [{"id": 1}]))
    assert controller.start() is UIState.LOGGED_IN
    page = controller.page()
    assert page.data_visible and not page.login_visible
    assert page.user_name == "Gebruiker"
    assert '"id": 1' in page.data_text
    assert json.loads(page.data_text) == [{"id": 1}]
    assert page.error_text == ""


def test_empty_result_shows_no_data_message():
    controller, _ = _controller(_json(200, []))
    assert controller.fetch_data() is UIState.LOGGED_IN
    assert controller.page().data_text == "Geen data gevonden."


def test_status_302_logs_out_and_clears_regions():
    responses = iter([httpx.Response(200, json=[{"id": 1}]), httpx.Response(302)])
    controller, _ = _controller(lambda request: next(responses), follow_redirects=False)
    assert controller.start() is UIState.LOGGED_IN

    assert controller.fetch_data() is UIState.LOGGED_OUT
    page = controller.page()
    assert page.login_visible and not page.data_visible
    assert page.data_text == ""
    assert page.error_text == ""


def test_followed_redirect_to_login_page_logs_out():
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.host == "gateway.test":
            return httpx.Response(302, headers={"Location": LOGIN_PAGE})
        return httpx.Response(200, text="<html>login</html>")

    controller, _ = _controller(handler)
    assert controller.check_session_via_data_fetch() is UIState.LOGGED_OUT
    assert controller.page().error_text == ""


def test_server_error_shows_message():
    controller, _ = _controller(_json(500, {"message": "boom"}))
    assert controller.fetch_data() is UIState.LOGGED_OUT
    page = controller.page()
    assert "boom" in page.error_text
    assert page.data_text == ""


def test_error_without_json_uses_generic_message():
    controller, _ = _controller(lambda request: httpx.Response(403, text="Forbidden"))
    assert controller.fetch_data() is UIState.LOGGED_OUT
    assert controller.page().error_text == "Fout: Fout bij ophalen data"


def test_network_error_degrades_to_logged_out():
    def handler(request):
        raise httpx.ConnectError("Connection refused", request=request)

    controller, _ = _controller(handler)
    assert controller.start() is UIState.LOGGED_OUT
    assert controller.page().error_text == "Fout: Netwerkfout bij ophalen data"


def test_invalid_json_on_success_degrades_to_logged_out():
    controller, _ = _controller(lambda request: httpx.Response(200, text="<html>not json</html>"))
    assert controller.start() is UIState.LOGGED_OUT
    assert controller.page().error_text.startswith("Fout: ")


def test_cookies_are_sent_with_every_check():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request.headers.get("cookie"))
        return httpx.Response(200, json=[])

    controller, _ = _controller(handler, cookies={"session": "abc"})
    controller.start()
    controller.fetch_data()
    assert seen == ["session=abc", "session=abc"]


def test_login_navigates_to_data_endpoint():
    controller, navigated = _controller(_json(200, []))
    assert controller.login() == "http://gateway.test/api/data"
    assert navigated == ["http://gateway.test/api/data"]
    assert controller.state is UIState.LOGGED_OUT


def test_logout_navigates_to_gateway_logout():
    controller, navigated = _controller(_json(200, []))
    controller.start()
    assert controller.logout() == LOGOUT_URL
    assert navigated == [LOGOUT_URL]


def test_classify_prefers_redirect_over_success():
    request = httpx.Request("GET", "http://gateway.test/api/data")
    redirect = httpx.Response(302, headers={"Location": LOGIN_PAGE}, request=request)
    final = httpx.Response(200, text="login page", request=httpx.Request("GET", LOGIN_PAGE))
    final.history = [redirect]
    assert classify_response(final).kind is OutcomeKind.REDIRECTED


def test_render_is_pure():
    view = SessionView(state=UIState.LOGGED_IN, payload=[{"id": 2}])
    assert render(view) == render(view)
    assert render(SessionView()).login_visible


def test_apply_uses_outcome_message():
    controller, _ = _controller(_json(200, []))
    state = controller.apply(FetchOutcome(OutcomeKind.HTTP_ERROR, message="upstream down", status_code=500))
    assert state is UIState.LOGGED_OUT
    assert controller.view.error == "Fout: upstream down"


def test_against_relay_app():
    """Drive the controller against the relay itself with a fake database service."""
    app = create_app(RelaySettings())
    transport = httpx.MockTransport(lambda request: httpx.Response(200, json=[{"id": 7, "name": "x"}]))
    app.dependency_overrides[get_entities_client] = lambda: EntitiesClient("https://db.test", "k", transport=transport)

    with TestClient(app) as http:
        controller = SessionController(api_url="http://testserver/api", http_client=http, navigate=lambda url: None)
        assert controller.start() is UIState.LOGGED_IN
        assert json.loads(controller.page().data_text) == [{"id": 7, "name": "x"}]

    failing = httpx.MockTransport(lambda request: httpx.Response(500, json={"message": "db offline"}))
    app.dependency_overrides[get_entities_client] = lambda: EntitiesClient("https://db.test", "k", transport=failing)
    with TestClient(app) as http:
        controller = SessionController(api_url="http://testserver/api", http_client=http, navigate=lambda url: None)
        assert controller.fetch_data() is UIState.LOGGED_OUT
        assert "db offline" in controller.page().error_text


def test_close_leaves_caller_supplied_client_open():
    controller, _ = _controller(lambda request: httpx.Response(200, json=[]))
    http = controller._http
    controller.close()
    assert not http.is_closed
    http.close()


def test_close_shuts_down_client_it_created():
    controller = SessionController(api_url=API_URL, logout_url=LOGOUT_URL, navigate=lambda url: None)
    with controller:
        pass
    assert controller._http.is_closed
