"""Tests for the analysis engine client."""

import asyncio
import json
import time

import httpx
import pytest

from analysis import AnalysisEngineClient
from exceptions import UpstreamFailureError
from workflow import AnalysisOption


def create_client(handler) -> AnalysisEngineClient:
    return AnalysisEngineClient(base_url="http://engine.test", timeout_seconds=5, transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
class TestAnalysisEngineClient:
    async def test_analyze_request(self):
        requests = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(200, json={"images": [["aGVsbG8=", "pie_chart"]], "cleaned_csv": "https://blobs.test/clean.csv"})

        response = await create_client(handler).run(AnalysisOption.CLEAN_AND_GENERATE, "https://blobs.test/data.csv", "ecommerce")

        assert requests[0].url.path == "/analyze-data"
        assert json.loads(requests[0].content) == {"cloudinary_url": "https://blobs.test/data.csv", "domainType": "ecommerce"}
        assert response.images == [["aGVsbG8=", "pie_chart"]]
        assert response.cleaned_csv == "https://blobs.test/clean.csv"

    async def test_clean_request(self):
        requests = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(200, json={"cleaned_csv": "https://blobs.test/clean.csv"})

        response = await create_client(handler).run(AnalysisOption.CLEAN_ONLY, "https://blobs.test/data.csv", "HR")

        assert requests[0].url.path == "/clean-data"
        assert json.loads(requests[0].content) == {"cloudinary_url": "https://blobs.test/data.csv"}
        assert response.images == []

    async def test_timeout(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        with pytest.raises(UpstreamFailureError) as exc_info:
            await create_client(handler).run(AnalysisOption.CLEAN_AND_GENERATE, "https://blobs.test/data.csv", "HR")
        assert "timed out" in exc_info.value.message

    async def test_error_status(self):
        with pytest.raises(UpstreamFailureError) as exc_info:
            await create_client(lambda request: httpx.Response(500, text="boom")).run(AnalysisOption.CLEAN_ONLY, "u", None)
        assert "500" in exc_info.value.message

    async def test_connection_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(UpstreamFailureError):
            await create_client(handler).run(AnalysisOption.CLEAN_ONLY, "u", None)

    @pytest.mark.parametrize(
        "option, response",
        [
            (AnalysisOption.CLEAN_AND_GENERATE, httpx.Response(200, text="<html>")),
            (AnalysisOption.CLEAN_AND_GENERATE, httpx.Response(200, json=["not", "an", "object"])),
            (AnalysisOption.CLEAN_AND_GENERATE, httpx.Response(200, json={"cleaned_csv": "u"})),
            (AnalysisOption.CLEAN_AND_GENERATE, httpx.Response(200, json={"images": [["payload"]]})),
            (AnalysisOption.CLEAN_AND_GENERATE, httpx.Response(200, json={"images": ["payload"]})),
            (AnalysisOption.CLEAN_AND_GENERATE, httpx.Response(200, json={"images": [["payload", 7]]})),
            (AnalysisOption.CLEAN_ONLY, httpx.Response(200, json={"images": []})),
        ],
    )
    async def test_malformed_responses(self, option, response):
        with pytest.raises(UpstreamFailureError):
            await create_client(lambda request: response).run(option, "u", "HR")


@pytest.fixture
def no_proxy(monkeypatch):
    for name in ("HTTP_PROXY", "HTTPS_PROXY", "ALL_PROXY", "http_proxy", "https_proxy", "all_proxy"):
        monkeypatch.delenv(name, raising=False)


@pytest.mark.asyncio
async def test_deadline_covers_slowly_streamed_response(no_proxy):
    """A body trickling in faster than the read timeout must still hit the overall deadline."""
    body = json.dumps({"cleaned_csv": "https://blobs.test/clean.csv"}).encode()

    async def trickle(reader: asyncio.StreamReader, writer: asyncio.StreamWriter) -> None:
        await reader.readuntil(b"\r\n\r\n")
        writer.write(b"HTTP/1.1 200 OK\r\nContent-Type: application/json\r\nContent-Length: %d\r\n\r\n" % len(body))
        try:
            for byte in body:
                writer.write(bytes([byte]))
                await writer.drain()
                await asyncio.sleep(0.05)
        except ConnectionError:
            pass
        finally:
            writer.close()

    server = await asyncio.start_server(trickle, "127.0.0.1", 0)
    port = server.sockets[0].getsockname()[1]
    client = AnalysisEngineClient(base_url=f"http://127.0.0.1:{port}", timeout_seconds=0.3)

    started = time.monotonic()
    try:
        with pytest.raises(UpstreamFailureError) as exc_info:
            await client.run(AnalysisOption.CLEAN_ONLY, "https://blobs.test/data.csv", None)
    finally:
        server.close()

    assert time.monotonic() - started < 1.0
    assert "timed out" in exc_info.value.message
