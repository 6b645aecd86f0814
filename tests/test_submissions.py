def test_submission_requires_existing_contest(client):
    response = client.post("/submittedTask", json={
        "contest_id": "5f0c9b1e2a3b4c5d6e7f8a9b",
        "participant_email": "alice@example.com",
        "task": "my entry"
    })

    assert response.status_code == 400
    assert response.json()["message"] == "Contest not found"


def test_submission_with_malformed_contest_id(client):
    response = client.post("/submittedTask", json={
        "contest_id": "not-an-id",
        "participant_email": "alice@example.com",
        "task": "my entry"
    })

    assert response.status_code == 400


def test_submission_starts_without_result(client, make_contest, submit):
    contest_id = make_contest(title="Logo Design")

    submission = submit(contest_id, "alice@example.com")

    assert submission["contest_title"] == "Logo Design"
    assert submission["winner_email"] is None
    assert submission["result"] is None


def test_late_submission_inherits_declared_result(client, make_contest, submit, declare):
    contest_id = make_contest()
    submit(contest_id, "alice@example.com")
    declare(contest_id, "alice@example.com")

    late = submit(contest_id, "bob@example.com")

    assert late["winner_email"] == "alice@example.com"


def test_list_and_filter_submissions(client, make_contest, submit):
    first = make_contest(title="First")
    second = make_contest(title="Second")
    submit(first, "alice@example.com")
    submit(first, "bob@example.com")
    submit(second, "alice@example.com")

    everything = client.get("/submittedTask").json()["data"]
    for_first = client.get(f"/contestSubmitDetails/{first}").json()["data"]

    assert len(everything) == 3
    assert sorted(s["participant_email"] for s in for_first) == ["alice@example.com", "bob@example.com"]
