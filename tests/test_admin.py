from conftest import API


def test_admin_routes_require_admin(client, alice, bob):
    for method, path in (
        ("get", "/admin/users"),
        ("get", "/admin/swaps"),
        ("get", "/admin/feedback"),
        ("put", f"/admin/users/ban/{bob['id']}"),
        ("post", f"/admin/make-admin/{bob['id']}"),
    ):
        anonymous = getattr(client, method)(f"{API}{path}")
        assert anonymous.status_code == 401, path
        regular = getattr(client, method)(f"{API}{path}", headers=alice["headers"])
        assert regular.status_code == 403, path
        assert regular.json() == {"msg": "Access denied: Not an administrator."}


def test_admin_sees_all_users_without_passwords(client, alice, bob, make_admin):
    make_admin(alice)
    client.put(f"{API}/users/profile", headers=bob["headers"], json={"isPublic": False})

    resp = client.get(f"{API}/admin/users", headers=alice["headers"])
    assert resp.status_code == 200
    users = {u["username"]: u for u in resp.json()}
    assert set(users) == {"alice", "bob"}
    assert users["bob"]["isPublic"] is False
    assert users["bob"]["email"] == "bob@x.com"
    assert users["alice"]["isAdmin"] is True
    assert all("password" not in u for u in users.values())


def test_ban_toggles(client, alice, bob, make_admin):
    make_admin(alice)
    url = f"{API}/admin/users/ban/{bob['id']}"

    banned = client.put(url, headers=alice["headers"])
    assert banned.status_code == 200
    assert banned.json()["msg"] == "User bob ban status updated to true."
    assert banned.json()["user"]["isBanned"] is True

    lifted = client.put(url, headers=alice["headers"])
    assert lifted.json()["msg"] == "User bob ban status updated to false."
    assert lifted.json()["user"]["isBanned"] is False
    assert client.get(f"{API}/users/profile", headers=bob["headers"]).status_code == 200


def test_ban_guards(client, alice, bob, make_admin):
    make_admin(alice)
    make_admin(bob)

    self_ban = client.put(f"{API}/admin/users/ban/{alice['id']}", headers=alice["headers"])
    assert self_ban.status_code == 400
    assert self_ban.json() == {"msg": "You cannot ban yourself."}

    other_admin = client.put(f"{API}/admin/users/ban/{bob['id']}", headers=alice["headers"])
    assert other_admin.status_code == 400
    assert other_admin.json() == {"msg": "Cannot ban another administrator."}

    for user_id in ("9999", "abc"):
        missing = client.put(f"{API}/admin/users/ban/{user_id}", headers=alice["headers"])
        assert missing.status_code == 404


def test_make_admin_grants_console_access(client, alice, bob, make_admin):
    make_admin(alice)
    resp = client.post(f"{API}/admin/make-admin/{bob['id']}", headers=alice["headers"])
    assert resp.status_code == 200
    assert resp.json() == {"msg": "bob is now an administrator."}

    # Bob's existing token now works for the console.
    assert client.get(f"{API}/admin/users", headers=bob["headers"]).status_code == 200
    assert client.post(f"{API}/admin/make-admin/9999", headers=alice["headers"]).status_code == 404


def test_admin_lists_swaps_and_feedback(client, alice, bob, carol, make_admin, request_swap):
    make_admin(carol)
    swap = request_swap(alice, bob)
    client.put(f"{API}/swaps/{swap['id']}/accept", headers=bob["headers"])
    request_swap(bob, alice, offered="Cooking", wanted="Guitar")
    client.post(
        f"{API}/swaps/{swap['id']}/feedback",
        json={"rating": 4, "comment": "Nice"},
        headers=alice["headers"],
    )

    swaps = client.get(f"{API}/admin/swaps", headers=carol["headers"]).json()
    assert len(swaps) == 2
    assert {s["status"] for s in swaps} == {"accepted", "pending"}
    assert all(s["requester"] and s["responder"] for s in swaps)

    feedback = client.get(f"{API}/admin/feedback", headers=carol["headers"]).json()
    assert len(feedback) == 1
    entry = feedback[0]
    assert entry["giver"]["username"] == "alice"
    assert entry["receiver"]["username"] == "bob"
    assert entry["swapRequest"] == {
        "id": swap["id"],
        "skillOfferedByRequester": "Guitar",
        "skillWantedByRequester": "Cooking",
    }
