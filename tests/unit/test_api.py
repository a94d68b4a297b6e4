"""Tests for the HTTP surface."""

from __future__ import annotations

from typing import Iterator

import pytest
from fastapi.testclient import TestClient

from playground.api.deps import create_controller
from playground.catalogue import templates
from playground.main import create_app
from playground.state.schema import Language


@pytest.fixture
def client(store, fake_sandbox) -> Iterator[TestClient]:
    app = create_app(
        controller_factory=lambda notifications: create_controller(
            notifications=notifications,
            store=store,
            sandbox=fake_sandbox,
        )
    )
    with TestClient(app) as test_client:
        yield test_client


def notes(response) -> list[str]:
    return [n["message"] for n in response.json()["notifications"]]


class TestHealth:
    def test_health(self, client: TestClient) -> None:
        response = client.get("/api/v1/health")
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["sandbox_state"] == "uninitialized"


class TestPlaygroundRoutes:
    def test_initial_snapshot(self, client: TestClient) -> None:
        body = client.get("/api/v1/playground").json()
        assert body["playground"]["language"] == "native"
        assert body["playground"]["buffer"] == templates.DEFAULT_NATIVE
        assert body["playground"]["output_placeholder"] is True
        assert body["notifications"] == []

    def test_edit_and_run(self, client: TestClient) -> None:
        client.put("/api/v1/playground/buffer", json={"code": "print('hi')"})
        response = client.post("/api/v1/playground/run")
        body = response.json()
        assert body["result"]["success"] is True
        texts = [line["text"] for line in body["playground"]["output"]]
        assert texts == [f"Running {Language.NATIVE.label} code...", "hi"]

    def test_blank_run_notifies(self, client: TestClient) -> None:
        client.put("/api/v1/playground/buffer", json={"code": ""})
        response = client.post("/api/v1/playground/run")
        assert response.json()["result"] is None
        assert notes(response) == ["Please enter some code to run"]

    def test_notifications_are_drained(self, client: TestClient) -> None:
        assert notes(client.post("/api/v1/playground/save")) == ["Code saved locally"]
        assert notes(client.get("/api/v1/playground")) == []

    def test_switch_language(self, client: TestClient, fake_sandbox) -> None:
        response = client.post("/api/v1/playground/language", json={"language": "sandboxed"})
        body = response.json()
        assert body["result"] == {"switched": True}
        assert body["playground"]["language"] == "sandboxed"
        assert body["playground"]["sandbox_state"] == "ready"
        assert notes(response) == [f"Switched to {Language.SANDBOXED.label}"]
        assert fake_sandbox.init_calls == 1

    def test_unknown_language_is_rejected(self, client: TestClient) -> None:
        response = client.post("/api/v1/playground/language", json={"language": "cobol"})
        assert response.status_code == 422

    def test_reset_requires_confirmation(self, client: TestClient) -> None:
        client.put("/api/v1/playground/buffer", json={"code": "print('mine')"})
        declined = client.post("/api/v1/playground/reset", json={})
        assert declined.json()["result"] == {"reset": False}
        assert declined.json()["playground"]["buffer"] == "print('mine')"

        accepted = client.post("/api/v1/playground/reset", json={"confirm": True})
        assert accepted.json()["playground"]["buffer"] == templates.DEFAULT_NATIVE

    def test_theme(self, client: TestClient) -> None:
        response = client.put("/api/v1/playground/theme", json={"theme": "monokai"})
        assert response.json()["playground"]["editor_theme"] == "monokai"

    def test_clear_output(self, client: TestClient) -> None:
        client.post("/api/v1/playground/run")
        body = client.post("/api/v1/playground/output/clear").json()
        assert body["playground"]["output"] == []
        assert body["playground"]["output_placeholder"] is True


class TestShareRoutes:
    def test_share_then_load(self, client: TestClient) -> None:
        client.put("/api/v1/playground/buffer", json={"code": "print('shared')"})
        shared = client.post("/api/v1/playground/share", json={"base_url": "https://example.com/p"})
        url = shared.json()["result"]["url"]
        assert notes(shared) == [f"Share URL (copy this): {url}"]

        client.put("/api/v1/playground/buffer", json={"code": "print('other')"})
        token = url.split("shared=", 1)[1]
        loaded = client.post("/api/v1/playground/shared", params={"shared": token})
        assert loaded.json()["result"] == {"loaded": True}
        assert loaded.json()["playground"]["buffer"] == "print('shared')"
        assert notes(loaded)[-1] == "Shared code loaded!"

    def test_invalid_share_token(self, client: TestClient) -> None:
        response = client.post("/api/v1/playground/shared", params={"shared": "!!!"})
        assert response.json()["result"] == {"loaded": False}
        assert notes(response) == ["Invalid share URL"]


class TestCatalogueRoutes:
    def test_list_challenges(self, client: TestClient) -> None:
        ids = [entry["id"] for entry in client.get("/api/v1/catalogue/challenges").json()]
        assert ids == ["fizzbuzz", "palindrome", "sorting", "calculator", "tree", "nqueens"]

    def test_list_snippets(self, client: TestClient) -> None:
        entries = {e["id"]: e for e in client.get("/api/v1/catalogue/snippets").json()}
        assert entries["plotting"]["languages"] == ["sandboxed"]

    def test_load_challenge(self, client: TestClient) -> None:
        response = client.post("/api/v1/catalogue/challenges/fizzbuzz/load")
        assert response.json()["playground"]["buffer"] == templates.FIZZBUZZ
        assert notes(response) == ["Loaded challenge: FizzBuzz Classic"]

    def test_load_unknown_snippet(self, client: TestClient) -> None:
        response = client.post("/api/v1/catalogue/snippets/nope/load")
        assert response.json()["result"] == {"loaded": False}
        assert notes(response) == ["Unknown snippet: nope"]
