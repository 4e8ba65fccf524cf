"""
Whole-directory export/import.
"""

import pytest

from src.schemas.snapshot import StateSnapshot, UserSnapshot
from src.services.accounts import create_user, user_exists
from src.services.communities import create_community, join_community, list_members
from src.services.errors import ErrorCode, SocialError
from src.services.friends import accept_request, list_friends, list_pending_requests, request_friendship
from src.services.messages import read_note, send_note
from src.services.profile import edit_profile, get_attribute
from src.services.relations import admire_user, declare_crush, declare_enemy, list_fans
from src.services.snapshot import export_state, import_state, load_snapshot, reset_state, save_snapshot


@pytest.fixture
def populated(db, users):
    request_friendship(db, "joao", "maria")
    accept_request(db, "maria", "joao")
    request_friendship(db, "carla", "joao")
    request_friendship(db, "ana", "joao")
    admire_user(db, "ana", "joao")
    declare_crush(db, "bruno", "ana")
    declare_enemy(db, "carla", "bruno")
    send_note(db, "ana", "maria", "one")
    send_note(db, "joao", "maria", "two")
    edit_profile(db, "joao", "cidade", "Recife")
    create_community(db, "joao", "forro", "Forro fans")
    join_community(db, "maria", "forro")
    return db


class TestExport:

    def test_captures_state(self, populated):
        snap = export_state(populated)
        by_login = {u.login: u for u in snap.users}

        assert by_login["joao"].friends == ["maria"]
        assert by_login["maria"].friends == ["joao"]
        assert by_login["joao"].pending == ["carla", "ana"]
        assert by_login["joao"].attributes == {"cidade": "Recife"}
        assert by_login["ana"].idols == ["joao"]
        assert [n.text for n in by_login["maria"].notes] == ["one", "two"]
        assert by_login["maria"].notes[0].sender == "ana"
        assert snap.communities[0].members == ["joao", "maria"]


class TestImport:

    def test_round_trip(self, populated):
        snap = export_state(populated)

        reset_state(populated)
        assert not user_exists(populated, "joao")

        import_state(populated, snap)

        assert export_state(populated) == snap
        assert list_pending_requests(populated, "joao") == ["carla", "ana"]
        assert list_fans(populated, "joao") == ["ana"]
        assert read_note(populated, "maria") == "one"
        assert get_attribute(populated, "joao", "cidade") == "Recife"

    def test_replaces_existing_state(self, populated):
        snap = StateSnapshot(users=[UserSnapshot(login="zeca", password="pw", name="Zeca")])

        import_state(populated, snap)

        assert user_exists(populated, "zeca")
        assert not user_exists(populated, "joao")

    def test_unknown_reference_rejected_without_changes(self, populated):
        before = export_state(populated)
        snap = StateSnapshot(users=[UserSnapshot(login="zeca", password="pw", friends=["ghost"])])

        with pytest.raises(SocialError) as exc:
            import_state(populated, snap)

        assert exc.value.code is ErrorCode.USER_NOT_FOUND
        assert export_state(populated) == before

    def test_self_reference_rejected(self, db):
        snap = StateSnapshot(users=[UserSnapshot(login="zeca", password="pw", enemies=["zeca"])])
        with pytest.raises(SocialError) as exc:
            import_state(db, snap)
        assert exc.value.code is ErrorCode.SELF_ENEMY

    def test_duplicate_login_rejected(self, db):
        snap = StateSnapshot(users=[
            UserSnapshot(login="zeca", password="pw"),
            UserSnapshot(login="zeca", password="other"),
        ])
        with pytest.raises(SocialError) as exc:
            import_state(db, snap)
        assert exc.value.code is ErrorCode.LOGIN_TAKEN

    @pytest.mark.parametrize("a, b", [
        ({"friends": ["b"], "pending": ["b"]}, {}),
        ({"pending": ["b"]}, {"friends": ["a"]}),
    ])
    def test_friend_and_pending_rejected(self, populated, a, b):
        before = export_state(populated)
        snap = StateSnapshot(users=[
            UserSnapshot(login="a", password="pw", **a),
            UserSnapshot(login="b", password="pw", **b),
        ])

        with pytest.raises(SocialError) as exc:
            import_state(populated, snap)

        assert exc.value.code is ErrorCode.ALREADY_FRIENDS
        assert export_state(populated) == before

    def test_pending_both_ways_rejected(self, db):
        snap = StateSnapshot(users=[
            UserSnapshot(login="a", password="pw", pending=["b"]),
            UserSnapshot(login="b", password="pw", pending=["a"]),
        ])
        with pytest.raises(SocialError) as exc:
            import_state(db, snap)
        assert exc.value.code is ErrorCode.REQUEST_ALREADY_PENDING
        assert not user_exists(db, "a")

    def test_attribute_keys_colliding_by_case_rejected(self, db):
        snap = StateSnapshot(users=[
            UserSnapshot(login="a", password="pw", attributes={"Cidade": "A", "cidade": "B"}),
        ])
        with pytest.raises(SocialError) as exc:
            import_state(db, snap)
        assert exc.value.code is ErrorCode.DUPLICATE_ATTRIBUTE
        assert not user_exists(db, "a")

    def test_one_sided_friend_list_is_made_symmetric(self, db):
        snap = StateSnapshot(users=[
            UserSnapshot(login="a", password="pw", friends=["b"]),
            UserSnapshot(login="b", password="pw"),
        ])
        import_state(db, snap)

        assert list_friends(db, "a") == ["b"]
        assert list_friends(db, "b") == ["a"]


class TestFiles:

    def test_save_and_load(self, populated, tmp_path):
        path = save_snapshot(populated, tmp_path / "state.json")
        before = export_state(populated)

        reset_state(populated)
        loaded = load_snapshot(populated, path)

        assert loaded == before
        assert export_state(populated) == before
        assert list_members(populated, "forro") == ["joao", "maria"]

    def test_missing_file_keeps_state(self, db, users, tmp_path):
        assert load_snapshot(db, tmp_path / "absent.json") is None
        assert user_exists(db, "joao")

    def test_reset_then_fresh_registration(self, populated):
        reset_state(populated)
        create_user(populated, "joao", "pw", "Joao")
        assert list_friends(populated, "joao") == []
