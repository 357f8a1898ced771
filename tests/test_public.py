"""Public portfolio page tests."""

import pytest
from httpx import AsyncClient


async def _published_portfolio(client: AsyncClient, headers: dict, **extra) -> dict:
    resp = await client.post("/v1/portfolios", json={
        "title": "Showcase", "is_published": True, **extra,
    }, headers=headers)
    assert resp.status_code == 201, resp.text
    return resp.json()


@pytest.mark.asyncio
async def test_public_page_renders_sections(client: AsyncClient, register_user):
    account = await register_user("artist")
    headers = account["headers"]
    portfolio = await _published_portfolio(client, headers, subtitle="Selected work")

    await client.patch("/v1/profile", json={"job_title": "Illustrator"}, headers=headers)
    await client.post("/v1/skills", json={"name": "Drawing", "order": 1}, headers=headers)
    await client.post("/v1/skills", json={"name": "Painting", "order": 0}, headers=headers)
    await client.post("/v1/projects", json={
        "title": "Mural", "description": "A large outdoor mural.", "is_featured": True,
    }, headers=headers)
    await client.post("/v1/social-links", json={
        "platform": "website", "url": "https://artist.example.com/",
    }, headers=headers)

    resp = await client.get("/v1/p/artist/showcase")
    assert resp.status_code == 200, resp.text
    data = resp.json()

    assert data["portfolio"]["id"] == portfolio["id"]
    assert data["portfolio"]["subtitle"] == "Selected work"
    assert data["owner"]["username"] == "artist"
    assert data["owner"]["job_title"] == "Illustrator"
    assert "email" not in data["owner"]
    assert [s["name"] for s in data["skills"]] == ["Painting", "Drawing"]
    assert data["projects"][0]["title"] == "Mural"
    assert data["social_links"][0]["platform"] == "website"
    assert data["experiences"] == []
    assert data["theme"] is None


@pytest.mark.asyncio
async def test_public_page_counts_views(client: AsyncClient, register_user):
    account = await register_user("artist")
    await _published_portfolio(client, account["headers"])

    first = await client.get("/v1/p/artist/showcase")
    second = await client.get("/v1/p/artist/showcase")

    assert first.json()["portfolio"]["view_count"] == 1
    assert second.json()["portfolio"]["view_count"] == 2


@pytest.mark.asyncio
async def test_unpublished_and_unknown_are_404(client: AsyncClient, register_user):
    account = await register_user("artist")
    resp = await client.post("/v1/portfolios", json={"title": "Draft"}, headers=account["headers"])
    assert resp.json()["is_published"] is False

    assert (await client.get("/v1/p/artist/draft")).status_code == 404
    assert (await client.get("/v1/p/artist/missing")).status_code == 404
    assert (await client.get("/v1/p/nobody/draft")).status_code == 404


@pytest.mark.asyncio
async def test_same_slug_under_two_owners(client: AsyncClient, register_user):
    alice = await register_user("alice")
    bob = await register_user("bob")
    a = await _published_portfolio(client, alice["headers"])
    b = await _published_portfolio(client, bob["headers"])

    resp_a = await client.get("/v1/p/alice/showcase")
    resp_b = await client.get("/v1/p/bob/showcase")

    assert resp_a.json()["portfolio"]["id"] == a["id"]
    assert resp_b.json()["portfolio"]["id"] == b["id"]
