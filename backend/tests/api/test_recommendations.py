"""Tests for recommendation endpoints."""
import pytest
from httpx import AsyncClient

from conftest import ALICE, BOB, CAROL, AuthState
from schemas.identity import Identity


@pytest.fixture
async def provisioned(client: AsyncClient, auth: AuthState) -> None:
    """Provision Alice (admin), Bob and Carol, then sign out."""
    for identity in (ALICE, BOB, CAROL):
        auth.identity = identity
        response = await client.post("/users/me")
        assert response.status_code == 200
    auth.identity = None


async def _add(client: AsyncClient, **overrides: str | None) -> dict:
    payload = {"title": "Dune", "genre": "Books", "link": "", "blurb": ""}
    payload.update(overrides)
    response = await client.post("/recommendations/", json=payload)
    assert response.status_code == 201, response.text
    return response.json()


async def test__scenario__admin_override_and_staff_pick_denied(
    client: AsyncClient, auth: AuthState,
) -> None:
    """First user is admin, second is not; admin deletes another user's record."""
    auth.identity = ALICE
    assert (await client.post("/users/me")).json()["role"] == "admin"
    auth.identity = BOB
    assert (await client.post("/users/me")).json()["role"] == "user"

    rec = await _add(client, title="Dune", genre="Books", link="", blurb="Great book")
    assert rec["author_name"] == "Bob"
    assert rec["is_staff_pick"] is False

    response = await client.post(f"/recommendations/{rec['id']}/staff-pick")
    assert response.status_code == 403
    assert response.json()["code"] == "PERMISSION_DENIED"

    auth.identity = ALICE
    response = await client.delete(f"/recommendations/{rec['id']}")
    assert response.status_code == 204
    assert (await client.get("/recommendations/")).json() == []


@pytest.mark.usefixtures("provisioned")
class TestAddRecommendation:
    """Tests for POST /recommendations/."""

    async def test__add__signed_out(self, client: AsyncClient) -> None:
        response = await client.post(
            "/recommendations/", json={"title": "Dune", "genre": "Books"},
        )
        assert response.status_code == 401
        assert response.json()["code"] == "AUTH_REQUIRED"

    async def test__add__not_provisioned(self, client: AsyncClient, auth: AuthState) -> None:
        auth.identity = Identity(subject="user_new", name="New")
        response = await client.post(
            "/recommendations/", json={"title": "Dune", "genre": "Books"},
        )
        assert response.status_code == 401

    async def test__add__optional_fields_default_empty(
        self, client: AsyncClient, auth: AuthState,
    ) -> None:
        auth.identity = BOB
        response = await client.post(
            "/recommendations/", json={"title": "Dune", "genre": "Books"},
        )
        assert response.status_code == 201
        data = response.json()
        assert data["link"] == ""
        assert data["blurb"] == ""
        assert data["user_id"] == BOB.subject

    @pytest.mark.parametrize(
        ("overrides", "code"),
        [
            ({"title": ""}, "INVALID_TITLE"),
            ({"title": "x" * 201}, "INVALID_TITLE"),
            ({"blurb": "x" * 501}, "INVALID_BLURB"),
            ({"link": "javascript:alert(1)"}, "INVALID_LINK"),
            ({"genre": "Podcasts"}, "INVALID_GENRE"),
        ],
    )
    async def test__add__invalid_field(
        self, client: AsyncClient, auth: AuthState, overrides: dict, code: str,
    ) -> None:
        auth.identity = BOB
        payload = {"title": "Dune", "genre": "Books", "link": "", "blurb": ""} | overrides
        response = await client.post("/recommendations/", json=payload)
        assert response.status_code == 400
        assert response.json()["code"] == code
        assert (await client.get("/recommendations/")).json() == []

    @pytest.mark.parametrize(
        ("payload", "code"),
        [
            ({"genre": "Books"}, "INVALID_TITLE"),
            ({"title": None, "genre": "Books"}, "INVALID_TITLE"),
            ({"title": "Dune"}, "INVALID_GENRE"),
            ({"title": "Dune", "genre": None}, "INVALID_GENRE"),
        ],
    )
    async def test__add__missing_or_null_field(
        self, client: AsyncClient, auth: AuthState, payload: dict, code: str,
    ) -> None:
        """Absent and null required fields get the same error code as invalid values."""
        auth.identity = BOB
        response = await client.post("/recommendations/", json=payload)
        assert response.status_code == 400
        assert response.json()["code"] == code

    async def test__add__null_optional_fields_stored_empty(
        self, client: AsyncClient, auth: AuthState,
    ) -> None:
        auth.identity = BOB
        rec = await _add(client, link=None, blurb=None)
        assert rec["link"] == ""
        assert rec["blurb"] == ""

    async def test__add__sanitizes_markup(self, client: AsyncClient, auth: AuthState) -> None:
        auth.identity = BOB
        rec = await _add(
            client, title="<b>Dune</b><script>alert(1)</script>", blurb=" <i>Spice</i> ",
        )
        assert rec["title"] == "Dune"
        assert rec["blurb"] == "Spice"


@pytest.mark.usefixtures("provisioned")
class TestDeleteRecommendation:
    """Tests for DELETE /recommendations/{id}."""

    async def test__delete__owner(self, client: AsyncClient, auth: AuthState) -> None:
        auth.identity = BOB
        rec = await _add(client)
        assert (await client.delete(f"/recommendations/{rec['id']}")).status_code == 204

    async def test__delete__other_user_denied(self, client: AsyncClient, auth: AuthState) -> None:
        auth.identity = BOB
        rec = await _add(client)

        auth.identity = CAROL
        response = await client.delete(f"/recommendations/{rec['id']}")
        assert response.status_code == 403
        assert len((await client.get("/recommendations/")).json()) == 1

    async def test__delete__missing(self, client: AsyncClient, auth: AuthState) -> None:
        auth.identity = ALICE
        response = await client.delete("/recommendations/12345")
        assert response.status_code == 404
        assert response.json() == {"detail": "Resource not found", "code": "NOT_FOUND"}

    async def test__delete__signed_out(self, client: AsyncClient, auth: AuthState) -> None:
        auth.identity = BOB
        rec = await _add(client)
        auth.identity = None
        assert (await client.delete(f"/recommendations/{rec['id']}")).status_code == 401


@pytest.mark.usefixtures("provisioned")
class TestToggleStaffPick:
    """Tests for POST /recommendations/{id}/staff-pick."""

    async def test__toggle__admin_twice_restores(
        self, client: AsyncClient, auth: AuthState,
    ) -> None:
        auth.identity = BOB
        rec = await _add(client)

        auth.identity = ALICE
        assert (await client.post(f"/recommendations/{rec['id']}/staff-pick")).status_code == 204
        assert (await client.get("/recommendations/")).json()[0]["is_staff_pick"] is True

        assert (await client.post(f"/recommendations/{rec['id']}/staff-pick")).status_code == 204
        assert (await client.get("/recommendations/")).json()[0]["is_staff_pick"] is False

    async def test__toggle__missing(self, client: AsyncClient, auth: AuthState) -> None:
        auth.identity = ALICE
        response = await client.post("/recommendations/12345/staff-pick")
        assert response.status_code == 404


@pytest.mark.usefixtures("provisioned")
class TestListRecommendations:
    """Tests for GET /recommendations/."""

    async def test__list__public_and_newest_first(
        self, client: AsyncClient, auth: AuthState,
    ) -> None:
        auth.identity = BOB
        first = await _add(client, title="One", genre="Books")
        second = await _add(client, title="Two", genre="Music")
        third = await _add(client, title="Three", genre="Books")
        auth.identity = None

        response = await client.get("/recommendations/")
        assert response.status_code == 200
        assert [r["id"] for r in response.json()] == [third["id"], second["id"], first["id"]]

        all_response = await client.get("/recommendations/", params={"genre": "all"})
        assert all_response.json() == response.json()

        books = (await client.get("/recommendations/", params={"genre": "Books"})).json()
        assert [r["id"] for r in books] == [third["id"], first["id"]]

    async def test__list__genre_with_ampersand(
        self, client: AsyncClient, auth: AuthState,
    ) -> None:
        auth.identity = CAROL
        rec = await _add(client, title="Ramen", genre="Food & Drinks")

        response = await client.get("/recommendations/", params={"genre": "Food & Drinks"})
        assert [r["id"] for r in response.json()] == [rec["id"]]
        assert response.json()[0]["author_name"] == "carol@example.com"


async def test__list_genres(client: AsyncClient) -> None:
    response = await client.get("/recommendations/genres")
    assert response.status_code == 200
    genres = response.json()["genres"]
    assert genres[0] == "Movies & TV"
    assert "Books" in genres
    assert len(genres) == 8
