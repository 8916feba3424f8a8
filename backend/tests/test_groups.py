def test_create_group(client, make_user):
    uid1 = make_user("Alice")
    uid2 = make_user("Bob")
    res = client.post("/groups", json={
        "name": "Trip to Paris", "description": "Summer vacation", "member_ids": [uid1, uid2]
    })
    assert res.status_code == 201
    data = res.json()
    assert data["name"] == "Trip to Paris"
    assert data["member_ids"] == [uid1, uid2]
    assert [m["name"] for m in data["members"]] == ["Alice", "Bob"]


def test_create_group_missing_name(client):
    res = client.post("/groups", json={"description": "No name"})
    assert res.status_code == 400


def test_create_group_unknown_member(client):
    res = client.post("/groups", json={"name": "G", "member_ids": [99999]})
    assert res.status_code == 400


def test_list_groups(client, make_group):
    make_group([], name="G1")
    make_group([], name="G2")
    res = client.get("/groups")
    assert res.status_code == 200
    assert len(res.json()) == 2


def test_get_group_not_found(client):
    assert client.get("/groups/99999").status_code == 404


def test_update_group(client, make_group):
    gid = make_group([], name="Old")
    res = client.patch(f"/groups/{gid}", json={"name": "New"})
    assert res.status_code == 200
    assert res.json()["name"] == "New"


def test_delete_group(client, make_group):
    gid = make_group([], name="Del")
    res = client.delete(f"/groups/{gid}")
    assert res.status_code == 204
    assert client.get(f"/groups/{gid}").status_code == 404


def test_add_member(client, setup_group, make_user):
    gid, _, _ = setup_group
    uid3 = make_user("Carol")
    res = client.post(f"/groups/{gid}/members/{uid3}")
    assert res.status_code == 200
    assert res.json()["message"] == "Member added successfully"
    assert uid3 in client.get(f"/groups/{gid}").json()["member_ids"]


def test_add_member_twice(client, setup_group):
    gid, uid1, _ = setup_group
    res = client.post(f"/groups/{gid}/members/{uid1}")
    assert res.status_code == 400


def test_add_member_group_not_found(client, make_user):
    uid = make_user("Alice")
    res = client.post(f"/groups/99999/members/{uid}")
    assert res.status_code == 404


def test_remove_member(client, setup_group, make_user):
    gid, _, _ = setup_group
    uid3 = make_user("Carol")
    client.post(f"/groups/{gid}/members/{uid3}")
    res = client.delete(f"/groups/{gid}/members/{uid3}")
    assert res.status_code == 200
    assert res.json()["message"] == "Member removed successfully"
    assert len(client.get(f"/groups/{gid}").json()["member_ids"]) == 2


def test_remove_member_not_in_group(client, setup_group):
    gid, _, _ = setup_group
    res = client.delete(f"/groups/{gid}/members/99999")
    assert res.status_code == 404


def test_remove_member_with_outstanding_balance(client, setup_group):
    gid, uid1, uid2 = setup_group
    client.post("/expenses", json={
        "group_id": gid, "paid_by_user_id": uid1, "amount": 40.0,
        "date": "2024-05-01", "split_type": "EQUAL"
    })
    res = client.delete(f"/groups/{gid}/members/{uid2}")
    assert res.status_code == 400
    assert uid2 in client.get(f"/groups/{gid}").json()["member_ids"]
