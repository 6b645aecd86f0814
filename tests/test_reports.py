import asyncio


def test_win_rate_for_unknown_participant_is_zero(client):
    response = client.get("/userWin/ghost@example.com")

    assert response.json()["data"] == {"attemptedCount": 0, "completedCount": 0}


def test_win_rate_counts_attempts_and_wins(client, make_contest, submit, declare):
    won = make_contest(title="Won")
    lost = make_contest(title="Lost")
    open_contest = make_contest(title="Open")
    submit(won, "alice@example.com")
    submit(lost, "alice@example.com")
    submit(lost, "bob@example.com")
    submit(open_contest, "alice@example.com")
    declare(won, "alice@example.com")
    declare(lost, "bob@example.com")

    alice = client.get("/userWin/alice@example.com").json()["data"]
    bob = client.get("/userWin/bob@example.com").json()["data"]

    assert alice == {"attemptedCount": 3, "completedCount": 1}
    assert bob == {"attemptedCount": 1, "completedCount": 1}


def test_declare_win_updates_contest_submissions_and_payments(client, make_contest, submit):
    target = make_contest(title="Target")
    other = make_contest(title="Other")
    submit(target, "alice@example.com")
    submit(target, "bob@example.com")
    submit(other, "carol@example.com")
    client.post("/payments", json={"contest_id": target, "email": "alice@example.com", "price": 10, "transaction_id": "pi_a"})
    client.post("/payments", json={"contest_id": target, "email": "bob@example.com", "price": 10, "transaction_id": "pi_b"})
    client.post("/payments", json={"contest_id": other, "email": "carol@example.com", "price": 10, "transaction_id": "pi_c"})

    response = client.patch("/declareWin", json={
        "contest_id": target,
        "result": "Winner",
        "winner_name": "Alice",
        "winner_email": "alice@example.com",
        "winner_image": "https://example.com/alice.png"
    })

    assert response.status_code == 200
    report = response.json()["data"]
    assert report["completed_stages"] == ["contest", "submissions", "payments"]
    assert report["submissions_updated"] == 2
    assert report["payments_updated"] == 2

    expected = {
        "result": "Winner",
        "winner_name": "Alice",
        "winner_email": "alice@example.com",
        "winner_image": "https://example.com/alice.png"
    }
    contest = client.get(f"/contestDetails/{target}").json()["data"]
    assert {k: contest[k] for k in expected} == expected

    for submission in client.get("/submittedTask").json()["data"]:
        fields = {k: submission[k] for k in expected}
        if submission["contest_id"] == target:
            assert fields == expected
        else:
            assert submission["winner_email"] is None

    for email in ("alice@example.com", "bob@example.com"):
        payment = client.get(f"/payments/{email}").json()["data"][0]
        assert {k: payment[k] for k in expected} == expected
    carol_payment = client.get("/payments/carol@example.com").json()["data"][0]
    assert carol_payment["result"] is None


def test_declare_win_twice_converges(client, make_contest, submit, declare):
    contest_id = make_contest()
    submit(contest_id, "alice@example.com")
    declare(contest_id, "bob@example.com")

    declare(contest_id, "alice@example.com")

    submission = client.get(f"/contestSubmitDetails/{contest_id}").json()["data"][0]
    assert submission["winner_email"] == "alice@example.com"


def test_declare_win_for_unknown_contest(client):
    response = client.patch("/declareWin", json={
        "contest_id": "5f0c9b1e2a3b4c5d6e7f8a9b",
        "result": "Winner",
        "winner_email": "alice@example.com"
    })

    assert response.status_code == 404


def test_leaderboard_sorted_by_wins_without_zero_win_users(client, make_contest, submit, declare):
    client.put("/user", json={"email": "alice@example.com", "name": "Alice Profile"})
    contests = [make_contest(title=f"Contest {i}") for i in range(4)]
    for contest_id in contests:
        submit(contest_id, "alice@example.com")
        submit(contest_id, "bob@example.com")
        submit(contest_id, "carol@example.com")
    declare(contests[0], "bob@example.com", name="Bob")
    declare(contests[1], "alice@example.com")
    declare(contests[2], "alice@example.com")

    leaderboard = client.get("/leaderBoard").json()["data"]

    assert [(row["email"], row["wins"]) for row in leaderboard] == [
        ("alice@example.com", 2),
        ("bob@example.com", 1),
    ]
    assert [row["rank"] for row in leaderboard] == [1, 2]
    # live profile name wins over the copy, copy is the fallback
    assert leaderboard[0]["name"] == "Alice Profile"
    assert leaderboard[1]["name"] == "Bob"


def test_leaderboard_empty_without_declarations(client, make_contest, submit):
    submit(make_contest(), "alice@example.com")

    assert client.get("/leaderBoard").json()["data"] == []


def test_top_creators_limited_and_sorted(client, make_contest, pay):
    counts = [3, 0, 9, 1, 4, 7, 2]
    for i, count in enumerate(counts):
        contest_id = make_contest(title=f"Contest {i}")
        pay(contest_id, count)

    top = client.get("/topCreators").json()["data"]

    assert [c["participation_count"] for c in top] == [9, 7, 4, 3, 2]


def test_latest_winner_is_newest_declared_contest(client, make_contest, submit, declare):
    older = make_contest(title="Older")
    newer = make_contest(title="Newer")
    make_contest(title="Undecided")
    declare(newer, "bob@example.com")
    declare(older, "alice@example.com")

    latest = client.get("/latestWinner").json()["data"]

    assert latest["_id"] == newer
    assert latest["winner_email"] == "bob@example.com"


def test_latest_winner_is_null_before_any_declaration(client, make_contest):
    make_contest()

    assert client.get("/latestWinner").json()["data"] is None


def test_winning_contests_for_user(client, make_contest, declare):
    won = make_contest(title="Won")
    make_contest(title="Other")
    declare(won, "alice@example.com")

    contests = client.get("/winningContest/alice@example.com").json()["data"]

    assert [c["_id"] for c in contests] == [won]


def test_resync_rebuilds_copies_from_contest(client, db, make_contest, submit, declare):
    contest_id = make_contest()
    submit(contest_id, "alice@example.com")
    declare(contest_id, "alice@example.com")
    # a stale copy left behind by an interrupted declaration
    asyncio.run(db.submissions.update_many({"contest_id": contest_id}, {"$set": {"winner_email": "stale@example.com"}}))

    response = client.post(f"/declareWin/resync/{contest_id}")

    assert response.status_code == 200
    submission = client.get(f"/contestSubmitDetails/{contest_id}").json()["data"][0]
    assert submission["winner_email"] == "alice@example.com"


def test_resync_clears_copies_of_undecided_contest(client, db, make_contest, submit):
    contest_id = make_contest()
    submit(contest_id, "alice@example.com")
    asyncio.run(db.submissions.update_many({"contest_id": contest_id}, {"$set": {"result": "Winner", "winner_email": "x@example.com"}}))

    client.post(f"/declareWin/resync/{contest_id}")

    submission = client.get(f"/contestSubmitDetails/{contest_id}").json()["data"][0]
    assert submission["result"] is None
    assert submission["winner_email"] is None


def test_mixed_case_emails_are_reported_as_sent(client, make_contest, submit, declare):
    contest_id = make_contest(creator_email="Carol@Example.COM")
    submit(contest_id, "Bob@Example.COM")
    declare(contest_id, "Bob@Example.COM")
    client.post("/payments", json={"contest_id": contest_id, "email": "Bob@Example.COM", "price": 10})

    win_rate = client.get("/userWin/Bob@Example.COM").json()["data"]
    winning = client.get("/winningContest/Bob@Example.COM").json()["data"]
    payments = client.get("/payments/Bob@Example.COM").json()["data"]
    created = client.get("/myContest/Carol@Example.COM").json()["data"]

    assert win_rate == {"attemptedCount": 1, "completedCount": 1}
    assert [c["_id"] for c in winning] == [contest_id]
    assert [p["email"] for p in payments] == ["Bob@Example.COM"]
    assert [c["_id"] for c in created] == [contest_id]
    assert client.get("/leaderBoard").json()["data"][0]["email"] == "Bob@Example.COM"
