"""End-to-end tests for the voting API.

Runs the real app with in-memory storage and mock identities:
`Bearer test-token:<user>` authenticates as `<user>`.
"""

from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.exc import InterfaceError, OperationalError

from jamvote.adapter.oauth.identity import MockIdentityResolver
from jamvote.application.usecase.theme import (
    ImportThemesRequest,
    ImportThemesResponse,
    ImportThemesUseCase,
)
from jamvote.domain.error import IdentityProviderUnavailableError
from jamvote.interface.api.app import create_app
from jamvote.persistence.repository.inmemory import (
    InMemoryThemeRepository,
    InMemoryVoteRepository,
)
from tests.conftest import AUTH_A, AUTH_B
from tests.di import build_test_container


@pytest.fixture
def client():
    """Create test client with test container."""
    app_instance = create_app(build_test_container(with_fastapi=True))
    with TestClient(app_instance) as test_client:
        yield test_client


def import_themes(client: TestClient, *lines: str) -> ImportThemesResponse:
    """Run the theme import against the app's own storage."""

    async def _import() -> ImportThemesResponse:
        async with client.app.state.dishka_container() as request_container:
            use_case = await request_container.get(ImportThemesUseCase)
            return await use_case.execute(ImportThemesRequest(lines=list(lines)))

    return client.portal.call(_import)


def unavailable() -> OperationalError:
    return OperationalError("SELECT", None, ConnectionRefusedError("db down"))


class TestListThemes:
    def test_lists_themes_in_creation_order(self, client):
        import_themes(client, "Roots", "Loops")

        response = client.get("/themes", headers=AUTH_A)

        assert response.status_code == 200
        body = response.json()
        assert [t["content"] for t in body] == ["Roots", "Loops"]
        assert body[0]["id"] < body[1]["id"]
        assert {"id", "content", "created_at"} <= set(body[0])

    def test_empty_list(self, client):
        response = client.get("/themes", headers=AUTH_A)

        assert response.status_code == 200
        assert response.json() == []

    def test_import_round_trip(self, client):
        """A theme loaded from a file shows up in the listing."""
        result = import_themes(client, "# candidates", "", "Should jam be 48h?")

        response = client.get("/themes", headers=AUTH_A)

        assert result.loaded == 1
        assert [t["content"] for t in response.json()] == ["Should jam be 48h?"]

    def test_requires_authentication(self, client):
        assert client.get("/themes").status_code == 401
        assert (
            client.get("/themes", headers={"Authorization": "Bearer nope"}).status_code
            == 401
        )
        assert (
            client.get("/themes", headers={"Authorization": "Basic abc"}).status_code
            == 401
        )

    def test_storage_outage_is_503(self, client):
        with patch.object(
            InMemoryThemeRepository, "find_all", side_effect=unavailable()
        ):
            response = client.get("/themes", headers=AUTH_A)

        assert response.status_code == 503
        assert "Retry-After" in response.headers


class TestSubmitVote:
    def test_vote_scenario(self, client):
        """A votes yes, A's change of mind is rejected, B votes independently."""
        import_themes(client, "Roots")
        theme_id = client.get("/themes", headers=AUTH_A).json()[0]["id"]

        first = client.post(
            "/votes", json={"theme_id": theme_id, "vote_type": "yes"}, headers=AUTH_A
        )
        again = client.post(
            "/votes", json={"theme_id": theme_id, "vote_type": "no"}, headers=AUTH_A
        )
        other = client.post(
            "/votes", json={"theme_id": theme_id, "vote_type": "yes"}, headers=AUTH_B
        )

        assert first.status_code == 201
        assert {"id", "created_at"} <= set(first.json())
        assert again.status_code == 409
        assert other.status_code == 201
        assert other.json()["id"] != first.json()["id"]

    def test_unknown_theme_is_404(self, client):
        response = client.post(
            "/votes", json={"theme_id": 12345, "vote_type": "yes"}, headers=AUTH_A
        )

        assert response.status_code == 404

    @pytest.mark.parametrize("theme_id", [2**31, 2**63, 0, -1])
    def test_theme_id_outside_serial_range_is_404(self, client, theme_id):
        import_themes(client, "Roots")

        # What the driver raises for an argument that does not fit INTEGER
        overflow = InterfaceError(
            "SELECT", None, OverflowError("value out of int32 range")
        )
        with patch.object(
            InMemoryThemeRepository, "find_by_id", side_effect=overflow
        ):
            response = client.post(
                "/votes",
                json={"theme_id": theme_id, "vote_type": "yes"},
                headers=AUTH_A,
            )

        assert response.status_code == 404
        assert "Retry-After" not in response.headers

    def test_invalid_vote_type_is_400(self, client):
        import_themes(client, "Roots")

        response = client.post(
            "/votes", json={"theme_id": 1, "vote_type": "maybe"}, headers=AUTH_A
        )

        assert response.status_code == 400

    @pytest.mark.parametrize(
        "body",
        [
            {"vote_type": "yes"},
            {"theme_id": 1},
            {"theme_id": "not-a-number", "vote_type": "yes"},
        ],
    )
    def test_malformed_body_is_400(self, client, body):
        response = client.post("/votes", json=body, headers=AUTH_A)

        assert response.status_code == 400

    def test_unparseable_json_is_400(self, client):
        response = client.post(
            "/votes",
            content=b"{not json",
            headers={**AUTH_A, "Content-Type": "application/json"},
        )

        assert response.status_code == 400

    def test_requires_authentication(self, client):
        import_themes(client, "Roots")

        response = client.post("/votes", json={"theme_id": 1, "vote_type": "yes"})

        assert response.status_code == 401

    def test_storage_outage_is_503(self, client):
        import_themes(client, "Roots")

        with patch.object(
            InMemoryVoteRepository, "create", side_effect=unavailable()
        ):
            response = client.post(
                "/votes", json={"theme_id": 1, "vote_type": "yes"}, headers=AUTH_A
            )

        assert response.status_code == 503

    def test_identity_provider_outage_is_503(self, client):
        with patch.object(
            MockIdentityResolver,
            "resolve",
            side_effect=IdentityProviderUnavailableError("provider down"),
        ):
            response = client.post(
                "/votes", json={"theme_id": 1, "vote_type": "yes"}, headers=AUTH_A
            )

        assert response.status_code == 503


class TestNextTheme:
    def test_progress_through_themes(self, client):
        import_themes(client, "Roots", "Loops")

        first = client.get("/themes/next", headers=AUTH_A).json()
        client.post(
            "/votes",
            json={"theme_id": first["theme"]["id"], "vote_type": "skip"},
            headers=AUTH_A,
        )
        second = client.get("/themes/next", headers=AUTH_A).json()
        client.post(
            "/votes",
            json={"theme_id": second["theme"]["id"], "vote_type": "no"},
            headers=AUTH_A,
        )
        done = client.get("/themes/next", headers=AUTH_A).json()

        assert (first["total"], first["seen"]) == (2, 0)
        assert second["theme"]["id"] != first["theme"]["id"]
        assert (second["total"], second["seen"]) == (2, 1)
        assert done == {"theme": None, "total": 2, "seen": 2}

    def test_requires_authentication(self, client):
        assert client.get("/themes/next").status_code == 401


class TestThemeResults:
    def test_tallies_votes_per_theme(self, client):
        import_themes(client, "Roots", "Loops", "Echoes")
        votes = [
            (AUTH_A, 2, "yes"),
            (AUTH_B, 2, "yes"),
            (AUTH_A, 1, "no"),
            (AUTH_B, 1, "skip"),
        ]
        for headers, theme_id, vote_type in votes:
            response = client.post(
                "/votes",
                json={"theme_id": theme_id, "vote_type": vote_type},
                headers=headers,
            )
            assert response.status_code == 201

        response = client.get("/themes/results", headers=AUTH_A)

        assert response.status_code == 200
        assert response.json() == [
            {
                "theme_id": 2,
                "content": "Loops",
                "yes_votes": 2,
                "no_votes": 0,
                "skip_votes": 0,
                "total_votes": 2,
            },
            {
                "theme_id": 1,
                "content": "Roots",
                "yes_votes": 0,
                "no_votes": 1,
                "skip_votes": 1,
                "total_votes": 2,
            },
            {
                "theme_id": 3,
                "content": "Echoes",
                "yes_votes": 0,
                "no_votes": 0,
                "skip_votes": 0,
                "total_votes": 0,
            },
        ]

    def test_requires_authentication(self, client):
        assert client.get("/themes/results").status_code == 401

    def test_storage_outage_is_503(self, client):
        with patch.object(
            InMemoryVoteRepository, "tally_by_theme", side_effect=unavailable()
        ):
            response = client.get("/themes/results", headers=AUTH_A)

        assert response.status_code == 503


class TestHealth:
    def test_reports_connected_database(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["database"] == "connected"

    def test_reports_disconnected_database(self, client):
        with patch.object(InMemoryThemeRepository, "count", side_effect=unavailable()):
            response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["database"] == "disconnected"
