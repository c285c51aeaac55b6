"""API server entry point — tests that sps-api starts uvicorn with configured host/port."""

from surveillance_pseudonym import serve
from surveillance_pseudonym.config import Settings


def test_main_runs_app_with_configured_address(monkeypatch):
    monkeypatch.setenv("SPS_API_HOST", "127.0.0.1")
    monkeypatch.setenv("SPS_API_PORT", "9090")
    monkeypatch.setattr(serve, "get_settings", Settings)

    calls = []
    monkeypatch.setattr(
        serve.uvicorn, "run", lambda app, **kwargs: calls.append((app, kwargs)),
    )

    serve.main()

    [(app, kwargs)] = calls
    assert app == "surveillance_pseudonym.main:app"
    assert kwargs["host"] == "127.0.0.1"
    assert kwargs["port"] == 9090
