"""End-to-end range behaviour through the HTTP surface."""

from __future__ import annotations

from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient

from application.use_cases.media_use_cases import ServeMediaUseCase
from interfaces.api.main import app
from interfaces.dependencies import get_container
from tests.mocks import OWNER_ID, VALID_TOKEN, FakeContainer, MediaStack

AUTH = {"Authorization": f"Bearer {VALID_TOKEN}"}
LARGE_PATH = f"{OWNER_ID}/1714060800000.mp4"
SMALL_PATH = f"{OWNER_ID}/1714060800001.webm"


@pytest.fixture
def stack(tokens, small_video, large_video) -> MediaStack:
    return MediaStack({LARGE_PATH: large_video, SMALL_PATH: small_video}, tokens)


@pytest.fixture
def client(stack: MediaStack) -> Iterator[TestClient]:
    app.dependency_overrides[get_container] = lambda: FakeContainer(
        {ServeMediaUseCase: stack.serve},
    )
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


class TestRangeScenarios:
    """Range requests against known objects."""

    def test_open_range_on_large_object(self, client: TestClient, large_video) -> None:
        response = client.get(f"/media/{LARGE_PATH}", headers={**AUTH, "Range": "bytes=500000-"})

        assert response.status_code == 206
        assert response.headers["content-range"] == "bytes 500000-999999/1000000"
        assert len(response.content) == 500_000
        assert response.content == large_video[500_000:]

    def test_suffix_range_on_small_object(self, client: TestClient, small_video) -> None:
        response = client.get(f"/media/{SMALL_PATH}", headers={**AUTH, "Range": "bytes=-10"})

        assert response.status_code == 206
        assert response.headers["content-range"] == "bytes 90-99/100"
        assert response.headers["content-type"] == "video/webm"
        assert response.content == small_video[90:]

    def test_range_beyond_small_object(self, client: TestClient) -> None:
        response = client.get(f"/media/{SMALL_PATH}", headers={**AUTH, "Range": "bytes=150-200"})

        assert response.status_code == 416
        assert response.headers["content-range"] == "bytes */100"
        assert response.content == b""

    def test_head_never_streams(self, client: TestClient, stack: MediaStack) -> None:
        response = client.head(f"/media/{LARGE_PATH}", headers=AUTH)

        assert response.status_code == 200
        assert response.headers["content-length"] == "1000000"
        assert response.headers["content-type"] == "video/mp4"
        assert response.content == b""
        assert stack.media_fetcher.open_calls == []

    def test_unauthenticated_makes_no_store_calls(self, client: TestClient, stack) -> None:
        for method in (client.get, client.head):
            response = method(f"/media/{LARGE_PATH}", headers={"Range": "bytes=0-"})
            assert response.status_code == 401

        assert stack.store_calls == 0

    @pytest.mark.parametrize(
        "path",
        [
            f"/media/{OWNER_ID}/%2E%2E/other/clip.mp4",
            f"/media/{OWNER_ID}/%2e%2e/%2e%2e/secret.mp4",
            "/media//etc/passwd",
        ],
    )
    def test_traversal_rejected_before_store(self, client: TestClient, stack, path) -> None:
        response = client.get(path, headers=AUTH)

        assert response.status_code == 400
        assert stack.store_calls == 0


class TestRangeProperties:
    """Invariants over many ranges of one object."""

    @pytest.mark.parametrize(
        ("start", "end"),
        [(0, 0), (0, 99), (1, 1), (37, 63), (98, 99), (99, 99), (50, 5000)],
    )
    def test_partial_body_matches_object_slice(
        self,
        client: TestClient,
        small_video,
        start: int,
        end: int,
    ) -> None:
        """Test body, Content-Length and Content-Range agree with the object."""
        response = client.get(
            f"/media/{SMALL_PATH}",
            headers={**AUTH, "Range": f"bytes={start}-{end}"},
        )

        served_end = min(end, 99)
        assert response.status_code == 206
        assert response.content == small_video[start : served_end + 1]
        assert int(response.headers["content-length"]) == served_end - start + 1
        assert response.headers["content-range"] == f"bytes {start}-{served_end}/100"

    def test_chunked_reads_reassemble_object(self, tokens, large_video) -> None:
        """Test following Content-Range chunk by chunk rebuilds the whole object."""
        stack = MediaStack({LARGE_PATH: large_video}, tokens, chunk_ceiling=300_000)
        app.dependency_overrides[get_container] = lambda: FakeContainer(
            {ServeMediaUseCase: stack.serve},
        )
        try:
            client = TestClient(app)
            received = bytearray()
            while len(received) < len(large_video):
                response = client.get(
                    f"/media/{LARGE_PATH}",
                    headers={**AUTH, "Range": f"bytes={len(received)}-"},
                )
                assert response.status_code == 206
                assert len(response.content) <= 300_000
                received.extend(response.content)
        finally:
            app.dependency_overrides.clear()

        assert bytes(received) == large_video
        assert len(stack.media_fetcher.open_calls) == 4

    def test_repeated_requests_are_identical(self, client: TestClient) -> None:
        headers = {**AUTH, "Range": "bytes=10-20"}

        first = client.get(f"/media/{SMALL_PATH}", headers=headers)
        second = client.get(f"/media/{SMALL_PATH}", headers=headers)

        assert first.status_code == second.status_code == 206
        assert first.content == second.content
        assert first.headers["content-range"] == second.headers["content-range"]
