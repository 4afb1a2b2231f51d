import webbrowser

import httpx

from relay_backend import run_client
from relay_backend.src.webclient import RenderedPage


def test_format_page_logged_in():
    page = RenderedPage(login_visible=False, data_visible=True, user_name="Gebruiker", data_text="[]", error_text="")
    out = run_client.format_page(page)
    assert "Gebruiker" in out
    assert "[]" in out


def test_format_page_logged_out_with_error():
    page = RenderedPage(login_visible=True, data_visible=False, user_name="", data_text="", error_text="Fout: boom")
    out = run_client.format_page(page)
    assert "niet ingelogd" in out
    assert "Fout: boom" in out


def test_login_action_opens_browser(monkeypatch, capsys):
    opened = []
    monkeypatch.setattr(webbrowser, "open", opened.append)
    monkeypatch.setenv("RELAY_API_URL", "http://gw.test/api")

    assert run_client.main(["login"]) == 0
    assert opened == ["http://gw.test/api/data"]
    assert "http://gw.test/api/data" in capsys.readouterr().out


def test_fetch_action_prints_error_when_unreachable(monkeypatch, capsys):
    def refuse(self, url, **kwargs):
        raise httpx.ConnectError("Connection refused")

    monkeypatch.setattr(httpx.Client, "get", refuse)
    assert run_client.main([]) == 0
    assert "Netwerkfout" in capsys.readouterr().out


def test_unknown_action():
    assert run_client.main(["dance"]) == 2
