# tests/test_probe.py
import httpx
import pytest

from periscope.probe import DEFAULT_URL, ProbeError, format_report, probe


def _client(handler):
    return httpx.Client(transport=httpx.MockTransport(handler))


def test_default_url_points_at_files_route():
    assert DEFAULT_URL == "http://127.0.0.1:3001/files"


def test_probe_finds_needle():
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(200, json={"files": [{"path": "src/app/page.tsx", "content": "", "timestamp": 1.0}]})

    result = probe("http://vessel.test/files", "page.tsx", client=_client(handler))

    assert len(calls) == 1
    assert calls[0].method == "GET"
    assert result.status_code == 200
    assert result.found is True
    assert "SUCCESS: page.tsx found" in format_report(result)


def test_probe_reports_snippet_on_miss():
    body = '{"files": []}' + " " * 500

    result = probe("http://vessel.test/files", "page.tsx", client=_client(lambda r: httpx.Response(200, text=body)))

    assert result.found is False
    assert result.body_length == len(body)
    assert result.snippet == body[:200]
    report = format_report(result)
    assert "FAILURE: page.tsx NOT found" in report
    assert 'Snippet: {"files": []}' in report


def test_probe_connection_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(ProbeError):
        probe("http://vessel.test/files", client=_client(handler))
