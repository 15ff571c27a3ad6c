from flashcards.models.deck import Card, DeckType
from flashcards.repositories import study as study_store


def _start(client, headers, deck_id):
    response = client.post(f"/api/v1/decks/{deck_id}/study", headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


def _review(client, headers, session_id, card_id, rating):
    response = client.post(
        f"/api/v1/study/{session_id}/reviews",
        headers=headers,
        json={"cardId": card_id, "rating": rating},
    )
    assert response.status_code == 201, response.text
    return response.json()


def _complete(client, headers, session_id):
    return client.post(f"/api/v1/study/{session_id}/complete", headers=headers)


def test_start_session_returns_every_card(client, auth_headers, make_deck):
    headers, user_id = auth_headers()
    deck_id, card_ids = make_deck(user_id, cards=[("Q1", "A1"), ("Q2", None), ("Q3", "A3")])

    body = _start(client, headers, deck_id)

    assert body["deckId"] == deck_id
    assert body["deckName"] == "Biology"
    assert body["totalCards"] == 3
    assert sorted(card["id"] for card in body["cards"]) == sorted(card_ids)
    assert {card["backText"] for card in body["cards"]} == {"A1", "", "A3"}


def test_start_session_on_empty_deck_is_bad_request(client, auth_headers, make_deck):
    headers, user_id = auth_headers()
    deck_id, _ = make_deck(user_id, cards=[])

    response = client.post(f"/api/v1/decks/{deck_id}/study", headers=headers)

    assert response.status_code == 400
    assert response.json()["error"] == "EMPTY_DECK"


def test_start_session_on_missing_deck_is_not_found(client, auth_headers):
    headers, _ = auth_headers()

    response = client.post("/api/v1/decks/does-not-exist/study", headers=headers)

    assert response.status_code == 404
    assert response.json()["error"] == "DECK_NOT_FOUND"


def test_other_users_deck_is_not_found(client, auth_headers, make_deck):
    _, owner_id = auth_headers(email="owner@example.com", display_name="Owner")
    intruder_headers, _ = auth_headers(email="intruder@example.com", display_name="Intruder")
    deck_id, _ = make_deck(owner_id)

    response = client.post(f"/api/v1/decks/{deck_id}/study", headers=intruder_headers)

    assert response.status_code == 404


def test_completion_summary_aggregates_ratings(client, auth_headers, make_deck):
    headers, user_id = auth_headers()
    deck_id, (first, second, third) = make_deck(user_id)
    session_id = _start(client, headers, deck_id)["sessionId"]

    _review(client, headers, session_id, first, "EASY")
    _review(client, headers, session_id, second, "EASY")
    _review(client, headers, session_id, third, "HARD")

    response = _complete(client, headers, session_id)

    assert response.status_code == 200
    summary = response.json()
    assert summary["easyCount"] == 2
    assert summary["hardCount"] == 1
    assert summary["againCount"] == 0
    assert summary["totalCards"] == 3
    assert summary["missedCount"] == 1
    assert summary["parentSessionId"] is None
    assert summary["retakeType"] is None


def test_repeat_ratings_accumulate(client, auth_headers, make_deck):
    headers, user_id = auth_headers()
    deck_id, (card_id, *_) = make_deck(user_id)
    session_id = _start(client, headers, deck_id)["sessionId"]

    _review(client, headers, session_id, card_id, "AGAIN")
    _review(client, headers, session_id, card_id, "AGAIN")
    _review(client, headers, session_id, card_id, "EASY")

    summary = _complete(client, headers, session_id).json()
    assert summary["againCount"] == 2
    assert summary["easyCount"] == 1
    assert summary["totalCards"] == 3
    assert summary["missedCount"] == 2


def test_completing_twice_is_conflict(client, auth_headers, make_deck):
    headers, user_id = auth_headers()
    deck_id, _ = make_deck(user_id)
    session_id = _start(client, headers, deck_id)["sessionId"]

    assert _complete(client, headers, session_id).status_code == 200
    second = _complete(client, headers, session_id)

    assert second.status_code == 409
    assert second.json()["error"] == "SESSION_ALREADY_COMPLETED"


def test_review_on_unknown_session_is_not_found(client, auth_headers, make_deck):
    headers, user_id = auth_headers()
    _, (card_id, *_) = make_deck(user_id)

    response = client.post(
        "/api/v1/study/missing/reviews",
        headers=headers,
        json={"cardId": card_id, "rating": "EASY"},
    )

    assert response.status_code == 404
    assert response.json()["error"] == "SESSION_NOT_FOUND"


def test_review_of_card_from_another_deck_is_not_found(client, auth_headers, make_deck):
    headers, user_id = auth_headers()
    deck_id, _ = make_deck(user_id)
    _, (foreign_card, *_) = make_deck(user_id, name="Other")
    session_id = _start(client, headers, deck_id)["sessionId"]

    response = client.post(
        f"/api/v1/study/{session_id}/reviews",
        headers=headers,
        json={"cardId": foreign_card, "rating": "EASY"},
    )

    assert response.status_code == 404
    assert response.json()["error"] == "CARD_NOT_FOUND"


def test_review_with_unknown_rating_is_validation_error(client, auth_headers, make_deck):
    headers, user_id = auth_headers()
    deck_id, (card_id, *_) = make_deck(user_id)
    session_id = _start(client, headers, deck_id)["sessionId"]

    response = client.post(
        f"/api/v1/study/{session_id}/reviews",
        headers=headers,
        json={"cardId": card_id, "rating": "MEDIUM"},
    )

    assert response.status_code == 400
    assert response.json()["error"] == "VALIDATION_ERROR"
    assert response.json()["field"] == "rating"


def test_retake_missed_links_parent_and_returns_missed_cards(client, auth_headers, make_deck):
    headers, user_id = auth_headers()
    deck_id, (easy, hard, again) = make_deck(user_id)
    session_id = _start(client, headers, deck_id)["sessionId"]
    _review(client, headers, session_id, easy, "EASY")
    _review(client, headers, session_id, hard, "HARD")
    _review(client, headers, session_id, again, "AGAIN")
    _complete(client, headers, session_id)

    response = client.post(f"/api/v1/study/{session_id}/retake-missed", headers=headers)

    assert response.status_code == 201
    body = response.json()
    assert body["parentSessionId"] == session_id
    assert body["retakeType"] == "MISSED_ONLY"
    assert sorted(card["id"] for card in body["cards"]) == sorted([hard, again])
    assert body["totalCards"] == 2
    assert body["originalSessionCards"] == 3

    retake_summary = _complete(client, headers, body["sessionId"]).json()
    assert retake_summary["parentSessionId"] == session_id
    assert retake_summary["retakeType"] == "MISSED_ONLY"


def test_retake_requires_completed_session(client, auth_headers, make_deck):
    headers, user_id = auth_headers()
    deck_id, (card_id, *_) = make_deck(user_id)
    session_id = _start(client, headers, deck_id)["sessionId"]
    _review(client, headers, session_id, card_id, "HARD")

    response = client.post(f"/api/v1/study/{session_id}/retake-missed", headers=headers)

    assert response.status_code == 400
    assert response.json()["error"] == "SESSION_NOT_COMPLETED"


def test_retake_without_missed_cards_is_rejected(client, auth_headers, make_deck):
    headers, user_id = auth_headers()
    deck_id, (card_id, *_) = make_deck(user_id)
    session_id = _start(client, headers, deck_id)["sessionId"]
    _review(client, headers, session_id, card_id, "EASY")
    _complete(client, headers, session_id)

    response = client.post(f"/api/v1/study/{session_id}/retake-missed", headers=headers)

    assert response.status_code == 400
    assert response.json()["error"] == "NO_MISSED_CARDS"


def test_missed_cards_are_distinct_and_skip_deleted_cards(client, auth_headers, make_deck, session_factory):
    headers, user_id = auth_headers()
    deck_id, (kept, deleted, easy) = make_deck(user_id)
    session_id = _start(client, headers, deck_id)["sessionId"]
    _review(client, headers, session_id, kept, "HARD")
    _review(client, headers, session_id, kept, "AGAIN")
    _review(client, headers, session_id, deleted, "AGAIN")
    _review(client, headers, session_id, easy, "EASY")

    db = session_factory()
    try:
        db.query(Card).filter(Card.id == deleted).delete(synchronize_session=False)
        db.commit()

        missed = study_store.find_missed_cards(db, session_id)
        assert [card.id for card in missed] == [kept]
        assert study_store.count_missed_cards(db, session_id) == 1
        assert study_store.count_total_reviews(db, session_id) == 2
    finally:
        db.close()

    summary = _complete(client, headers, session_id).json()
    assert summary["hardCount"] == 1
    assert summary["againCount"] == 1
    assert summary["easyCount"] == 1


def test_flash_review_session_is_not_a_study_session(client, auth_headers, make_deck):
    headers, user_id = auth_headers()
    deck_id, _ = make_deck(user_id, deck_type=DeckType.FLASH_REVIEW)
    session_id = client.post(f"/api/v1/decks/{deck_id}/flash-review", headers=headers).json()["sessionId"]

    response = _complete(client, headers, session_id)

    assert response.status_code == 404


def test_missed_count_counts_hard_and_again_ratings(client, auth_headers, make_deck):
    headers, user_id = auth_headers()
    deck_id, (card_id, *_) = make_deck(user_id)
    session_id = _start(client, headers, deck_id)["sessionId"]

    _review(client, headers, session_id, card_id, "HARD")
    _review(client, headers, session_id, card_id, "AGAIN")

    summary = _complete(client, headers, session_id).json()
    assert summary["hardCount"] == 1
    assert summary["againCount"] == 1
    assert summary["missedCount"] == summary["hardCount"] + summary["againCount"] == 2


def test_retake_after_missed_cards_were_deleted_is_rejected(client, auth_headers, make_deck, session_factory):
    headers, user_id = auth_headers()
    deck_id, (missed, easy, _) = make_deck(user_id)
    session_id = _start(client, headers, deck_id)["sessionId"]
    _review(client, headers, session_id, missed, "AGAIN")
    _review(client, headers, session_id, easy, "EASY")
    _complete(client, headers, session_id)

    db = session_factory()
    try:
        db.query(Card).filter(Card.id == missed).delete(synchronize_session=False)
        db.commit()
    finally:
        db.close()

    response = client.post(f"/api/v1/study/{session_id}/retake-missed", headers=headers)

    assert response.status_code == 400
    assert response.json()["error"] == "NO_MISSED_CARDS"
    assert "deleted" in response.json()["message"]
