from app.catalog import CHARACTERS, base_prompt_for, get_characters_by_category


def test_list_all_characters(client):
    response = client.get("/api/characters")

    assert response.status_code == 200
    body = response.json()
    assert len(body) == len(CHARACTERS)
    assert body[0]["id"] == "naruto"
    assert body[0]["imageUrl"].startswith("https://images.unsplash.com/")
    assert "basePrompt" in body[0]


def test_filter_characters_by_category(client):
    response = client.get("/api/characters", params={"category": "games"})

    assert response.status_code == 200
    assert {character["category"] for character in response.json()} == {"games"}
    assert [c["id"] for c in response.json()] == [c.id for c in get_characters_by_category("games")]


def test_unknown_category_is_rejected(client):
    response = client.get("/api/characters", params={"category": "cartoons"})

    assert response.status_code == 400


def test_read_single_character(client):
    response = client.get("/api/characters/mario")

    assert response.status_code == 200
    assert response.json()["name"] == "Mario"


def test_unknown_character_returns_404(client):
    response = client.get("/api/characters/shrek")

    assert response.status_code == 404


def test_base_prompt_falls_back_for_unknown_ids():
    assert base_prompt_for("mario") == "red cap with M logo, blue overalls, mustache, cheerful jumping pose"
    assert base_prompt_for("shrek") == "shrek character"
