from fastapi.testclient import TestClient


def _as(user_id: str) -> dict[str, str]:
    return {"X-User-Id": user_id}


def test_create_review_returns_201(client: TestClient, social_graph) -> None:
    response = client.post(
        "/books/book-1/reviews",
        json={"rating": 5, "review_text": "Spice must flow"},
        headers=_as("carol"),
    )

    assert response.status_code == 201
    data = response.json()
    assert data["user_id"] == "carol"
    assert data["book"] == {"id": "book-1", "title": "Dune"}
    assert data["like_count"] == 0

    interaction = client.get("/books/book-1/interaction", headers=_as("carol")).json()
    assert interaction["rating"] == 5
    assert interaction["is_read"] is True


def test_create_review_without_identity_returns_401(client: TestClient, social_graph) -> None:
    response = client.post("/books/book-1/reviews", json={"rating": 5})

    assert response.status_code == 401
    assert response.json() == {
        "detail": "Missing or empty X-User-Id header",
        "error": "unauthenticated",
        "retryable": False,
    }


def test_unknown_user_returns_401(client: TestClient, social_graph) -> None:
    response = client.post("/books/book-1/reviews", json={"rating": 5}, headers=_as("mallory"))

    assert response.status_code == 401


def test_duplicate_review_returns_409(client: TestClient, social_graph) -> None:
    response = client.post("/books/book-1/reviews", json={"rating": 3}, headers=_as("alice"))

    assert response.status_code == 409
    assert response.json()["error"] == "conflict"


def test_invalid_rating_returns_422(client: TestClient, social_graph) -> None:
    response = client.post("/books/book-1/reviews", json={"rating": 6}, headers=_as("carol"))

    assert response.status_code == 422


def test_get_missing_review_returns_404(client: TestClient, social_graph) -> None:
    response = client.get("/reviews/review-404")

    assert response.status_code == 404
    assert response.json()["error"] == "not_found"


def test_list_book_reviews_is_public(client: TestClient, social_graph) -> None:
    response = client.get("/books/book-1/reviews", params={"page": 1, "size": 5})

    assert response.status_code == 200
    data = response.json()
    assert data["total"] == 1
    assert data["items"][0]["id"] == "review-1"
    assert data["items"][0]["liked_by_viewer"] is False


def test_list_book_reviews_rejects_oversized_page(client: TestClient, social_graph) -> None:
    response = client.get("/books/book-1/reviews", params={"size": 1000})

    assert response.status_code == 422


def test_patch_review_by_other_user_returns_403(client: TestClient, social_graph) -> None:
    response = client.patch("/reviews/review-1", json={"rating": 1}, headers=_as("bob"))

    assert response.status_code == 403
    assert response.json()["error"] == "unauthorized"


def test_patch_review_by_author(client: TestClient, social_graph) -> None:
    response = client.patch("/reviews/review-1", json={"rating": 2}, headers=_as("alice"))

    assert response.status_code == 200
    assert response.json()["rating"] == 2


def test_delete_review_then_gone(client: TestClient, social_graph) -> None:
    client.post("/reviews/review-1/comments", json={"text": "Nice"}, headers=_as("bob"))

    response = client.delete("/reviews/review-1", headers=_as("alice"))

    assert response.status_code == 204
    assert client.get("/reviews/review-1").status_code == 404
    assert client.get("/reviews/review-1/comments").status_code == 404


def test_like_review_is_idempotent(client: TestClient, social_graph) -> None:
    first = client.put("/reviews/review-1/like", headers=_as("bob"))
    second = client.put("/reviews/review-1/like", headers=_as("bob"))

    assert first.json() == {
        "target_kind": "review",
        "target_id": "review-1",
        "liked": True,
        "changed": True,
    }
    assert second.json()["changed"] is False

    review = client.get("/reviews/review-1", headers=_as("bob")).json()
    assert review["like_count"] == 1
    assert review["liked_by_viewer"] is True

    notifications = client.get("/notifications", headers=_as("alice")).json()
    assert notifications["total"] == 1


def test_unlike_review(client: TestClient, social_graph) -> None:
    client.put("/reviews/review-1/like", headers=_as("bob"))

    response = client.delete("/reviews/review-1/like", headers=_as("bob"))

    assert response.status_code == 200
    assert response.json()["liked"] is False
    assert response.json()["changed"] is True


def test_comment_on_review_and_list_thread(client: TestClient, social_graph) -> None:
    created = client.post(
        "/reviews/review-1/comments", json={"text": "Great take"}, headers=_as("bob")
    )
    assert created.status_code == 201
    reply = client.post(
        "/reviews/review-1/comments",
        json={"text": "Agreed", "parent_comment_id": created.json()["id"]},
        headers=_as("carol"),
    )
    assert reply.status_code == 201

    thread = client.get("/reviews/review-1/comments").json()

    assert thread["total"] == 1
    [top] = thread["items"]
    assert top["text"] == "Great take"
    assert [r["id"] for r in top["replies"]] == [reply.json()["id"]]


def test_empty_comment_returns_422(client: TestClient, social_graph) -> None:
    response = client.post("/reviews/review-1/comments", json={"text": ""}, headers=_as("bob"))

    assert response.status_code == 422
