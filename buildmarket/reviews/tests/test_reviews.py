from buildmarket.reviews.crud import calculate_rating, update_user_rating
from buildmarket.reviews.models import Review
from buildmarket.scripts.recalculate_ratings import recalculate_all_ratings
from buildmarket.users.models import User


def test_calculate_rating_rounds_half_up():
    assert calculate_rating([5, 4, 5]) == 5
    assert calculate_rating([4, 5]) == 5
    assert calculate_rating([3, 4]) == 4
    assert calculate_rating([1, 2, 2]) == 2
    assert calculate_rating([]) == 0


def test_review_updates_rating(client, register):
    target, _ = register("contractor")
    for index, rating in enumerate([5, 4, 5]):
        _, headers = register(f"customer{index}")
        response = client.post(
            "/api/reviews",
            json={"reviewee_id": target["id"], "rating": rating, "comment": "Good job"},
            headers=headers,
        )
        assert response.status_code == 201

    assert client.get(f"/api/users/{target['id']}").json()["rating"] == 5

    reviews = client.get(f"/api/users/{target['id']}/reviews").json()
    assert sorted(r["rating"] for r in reviews) == [4, 5, 5]
    assert reviews[0]["reviewer"]["username"].startswith("customer")


def test_review_validation(client, register):
    target, headers = register("contractor")
    _, other_headers = register("customer")

    assert client.post("/api/reviews", json={"reviewee_id": target["id"], "rating": 5}, headers=headers).status_code == 400
    assert client.post("/api/reviews", json={"reviewee_id": 999, "rating": 5}, headers=other_headers).status_code == 404
    for rating in (0, 6):
        response = client.post("/api/reviews", json={"reviewee_id": target["id"], "rating": rating}, headers=other_headers)
        assert response.status_code == 400
    assert client.post("/api/reviews", json={"reviewee_id": target["id"], "rating": 5}).status_code == 401


def test_update_user_rating_and_script(db, register):
    target, _ = register("contractor")
    reviewer, _ = register("customer")
    for rating in (5, 4, 5):
        db.add(Review(reviewer_id=reviewer["id"], reviewee_id=target["id"], rating=rating))
    db.commit()

    assert update_user_rating(db, target["id"]) == 5
    db.rollback()

    ratings = recalculate_all_ratings(db)
    assert ratings == {target["id"]: 5, reviewer["id"]: 0}
    assert db.query(User).filter(User.id == target["id"]).one().rating == 5
