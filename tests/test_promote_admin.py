import promote_admin
from conftest import API


def test_grant_and_revoke_from_command_line(client, settings, alice):
    argv = ["--db", settings.database_url, "--email", alice["email"]]

    assert promote_admin.main(argv) == 0
    assert client.get(f"{API}/admin/users", headers=alice["headers"]).status_code == 200

    assert promote_admin.main(argv + ["--revoke"]) == 0
    assert client.get(f"{API}/admin/users", headers=alice["headers"]).status_code == 403


def test_email_lookup_is_case_insensitive(db, alice):
    assert promote_admin.set_admin(db, "  ALICE@X.com ", True) == "alice"


def test_unknown_email_exits_with_error(client, settings):
    argv = ["--db", settings.database_url, "--email", "ghost@x.com"]
    assert promote_admin.main(argv) == 2
