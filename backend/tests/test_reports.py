def _expense(gid, payer, amount, split_type="EQUAL", shares=None):
    body = {
        "group_id": gid, "paid_by_user_id": payer, "amount": amount,
        "description": "Expense", "date": "2024-05-01", "split_type": split_type,
    }
    if shares is not None:
        body["shares"] = [{"user_id": uid, "value": v} for uid, v in shares]
    return body


def _balances(client, gid):
    res = client.get(f"/reports/groups/{gid}/balances")
    assert res.status_code == 200
    return {b["user_id"]: b["net_balance"] for b in res.json()}


def test_balances_two_members_equal_split(client, setup_group):
    gid, uid1, uid2 = setup_group
    client.post("/expenses", json=_expense(gid, uid1, 150.0))
    res = client.get(f"/reports/groups/{gid}/balances")
    assert res.status_code == 200
    entries = res.json()
    assert entries[0] == {"group_id": gid, "user_id": uid1, "user_name": "Alice", "net_balance": 75.0}
    assert entries[1] == {"group_id": gid, "user_id": uid2, "user_name": "Bob", "net_balance": -75.0}


def test_settlement_plan_two_members(client, setup_group):
    gid, uid1, uid2 = setup_group
    client.post("/expenses", json=_expense(gid, uid1, 150.0))
    res = client.get(f"/reports/groups/{gid}/settlement-plan")
    assert res.status_code == 200
    assert res.json() == {
        "group_id": gid,
        "suggestions": [{"from_user_id": uid2, "to_user_id": uid1, "amount": 75.0}],
        "transaction_count": 1,
    }


def test_single_member_pays_for_themselves(client, make_user, make_group):
    uid = make_user("Solo")
    gid = make_group([uid])
    client.post("/expenses", json=_expense(gid, uid, 50.0))
    assert _balances(client, gid) == {uid: 0.0}
    plan = client.get(f"/reports/groups/{gid}/settlement-plan").json()
    assert plan["suggestions"] == []
    assert plan["transaction_count"] == 0


def test_settlements_move_balances(client, setup_group):
    gid, uid1, uid2 = setup_group
    client.post("/expenses", json=_expense(gid, uid1, 100.0))
    client.post("/settlements", json={
        "group_id": gid, "from_user_id": uid2, "to_user_id": uid1, "amount": 20.0, "date": "2024-05-02"
    })
    assert _balances(client, gid) == {uid1: 30.0, uid2: -30.0}


def test_deleted_expense_no_longer_counts(client, setup_group):
    gid, uid1, uid2 = setup_group
    eid = client.post("/expenses", json=_expense(gid, uid1, 100.0)).json()["id"]
    client.delete(f"/expenses/{eid}")
    assert _balances(client, gid) == {uid1: 0.0, uid2: 0.0}


def test_applying_plan_settles_everyone(client, make_user, make_group):
    ids = [make_user(name) for name in ["Ann", "Ben", "Cat", "Dan"]]
    gid = make_group(ids)
    a, b, c, d = ids
    client.post("/expenses", json=_expense(gid, a, 100.0))
    client.post("/expenses", json=_expense(gid, b, 45.5, "EXACT", [(a, 10), (c, 20.5), (d, 15)]))
    client.post("/expenses", json=_expense(gid, c, 80.0, "PERCENT", [(a, 12.5), (b, 37.5), (d, 50)]))

    balances = _balances(client, gid)
    assert abs(sum(balances.values())) < 0.01

    plan = client.get(f"/reports/groups/{gid}/settlement-plan").json()
    assert plan["transaction_count"] == len(plan["suggestions"])
    assert all(s["amount"] > 0 for s in plan["suggestions"])
    positive = sum(v for v in balances.values() if v > 0)
    assert abs(sum(s["amount"] for s in plan["suggestions"]) - positive) < 0.01

    for s in plan["suggestions"]:
        res = client.post("/settlements", json={
            "group_id": gid, "from_user_id": s["from_user_id"], "to_user_id": s["to_user_id"],
            "amount": s["amount"], "date": "2024-06-01",
        })
        assert res.status_code == 201
    assert all(v == 0 for v in _balances(client, gid).values())
    assert client.get(f"/reports/groups/{gid}/settlement-plan").json()["transaction_count"] == 0


def test_balances_are_stable_across_reads(client, setup_group):
    gid, uid1, uid2 = setup_group
    client.post("/expenses", json=_expense(gid, uid2, 33.33))
    first = client.get(f"/reports/groups/{gid}/balances").json()
    second = client.get(f"/reports/groups/{gid}/balances").json()
    assert first == second


def test_balances_unknown_group(client):
    assert client.get("/reports/groups/99999/balances").status_code == 404


def test_settlement_plan_unknown_group(client):
    assert client.get("/reports/groups/99999/settlement-plan").status_code == 404


def test_sub_cent_exact_shares_keep_group_balanced(client, make_user, make_group):
    ids = [make_user(name) for name in ["Ann", "Ben", "Cat"]]
    gid = make_group(ids)
    a, b, c = ids
    res = client.post("/expenses", json=_expense(gid, a, 100.0, "EXACT", [(a, 33.335), (b, 33.335), (c, 33.335)]))
    assert res.status_code == 201
    assert sum(s["owed_amount"] for s in res.json()["shares"]) == 100.0

    balances = _balances(client, gid)
    assert balances == {a: 66.67, b: -33.33, c: -33.34}

    plan = client.get(f"/reports/groups/{gid}/settlement-plan").json()
    for s in plan["suggestions"]:
        client.post("/settlements", json={
            "group_id": gid, "from_user_id": s["from_user_id"], "to_user_id": s["to_user_id"],
            "amount": s["amount"], "date": "2024-06-01",
        })
    assert all(v == 0 for v in _balances(client, gid).values())
