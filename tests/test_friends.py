"""
Friend-request protocol tests.

Covers the request/accept/reject state machine, the auto-accept rule for
opposite-direction requests, the order in which validation errors fire,
and the listing queries.
"""

import pytest

from src.services.errors import ErrorCode, ErrorKind, SocialError
from src.services.events import FRIENDSHIP_CREATED, FRIEND_REQUEST_SENT, list_user_events
from src.services.friends import (
    FriendRequestOutcome,
    accept_request,
    has_pending_request,
    is_friend,
    is_mutual_friend,
    list_friends,
    list_pending_requests,
    reject_request,
    request_friendship,
)
from src.services.relations import declare_enemy


def assert_error(code, fn, *args):
    with pytest.raises(SocialError) as exc:
        fn(*args)
    assert exc.value.code is code
    return exc.value


class TestRequestFriendship:

    def test_first_request_goes_to_target_pending(self, db, users):
        outcome = request_friendship(db, "maria", "joao")

        assert outcome is FriendRequestOutcome.requested
        assert list_pending_requests(db, "joao") == ["maria"]
        assert list_pending_requests(db, "maria") == []
        assert not is_friend(db, "joao", "maria")
        assert not is_friend(db, "maria", "joao")

    def test_opposite_request_is_treated_as_acceptance(self, db, users):
        request_friendship(db, "maria", "joao")

        outcome = request_friendship(db, "joao", "maria")

        assert outcome is FriendRequestOutcome.accepted
        assert list_friends(db, "joao") == ["maria"]
        assert list_friends(db, "maria") == ["joao"]
        assert list_pending_requests(db, "joao") == []
        assert list_pending_requests(db, "maria") == []

    def test_unknown_target(self, db, users):
        assert_error(ErrorCode.USER_NOT_FOUND, request_friendship, db, "joao", "ghost")

    def test_unknown_acting_login(self, db, users):
        assert_error(ErrorCode.USER_NOT_FOUND, request_friendship, db, "ghost", "joao")

    def test_blank_target_is_not_found(self, db, users):
        assert_error(ErrorCode.USER_NOT_FOUND, request_friendship, db, "joao", "  ")

    def test_self_request(self, db, users):
        err = assert_error(ErrorCode.SELF_FRIENDSHIP, request_friendship, db, "joao", "joao")
        assert err.kind is ErrorKind.invalid_operation
        assert list_pending_requests(db, "joao") == []

    def test_duplicate_request(self, db, users):
        request_friendship(db, "joao", "maria")
        err = assert_error(ErrorCode.REQUEST_ALREADY_PENDING, request_friendship, db, "joao", "maria")
        assert err.kind is ErrorKind.conflict
        assert list_pending_requests(db, "maria") == ["joao"]

    def test_already_friends(self, db, users):
        request_friendship(db, "joao", "maria")
        accept_request(db, "maria", "joao")

        assert_error(ErrorCode.ALREADY_FRIENDS, request_friendship, db, "joao", "maria")
        assert_error(ErrorCode.ALREADY_FRIENDS, request_friendship, db, "maria", "joao")

    def test_pending_keeps_arrival_order(self, db, users):
        request_friendship(db, "maria", "joao")
        request_friendship(db, "ana", "joao")
        request_friendship(db, "carla", "joao")

        assert list_pending_requests(db, "joao") == ["maria", "ana", "carla"]


class TestValidationPrecedence:

    def test_not_found_before_self(self, db, users):
        assert_error(ErrorCode.USER_NOT_FOUND, request_friendship, db, "ghost", "ghost")

    def test_enmity_before_already_friends(self, db, users):
        request_friendship(db, "joao", "maria")
        accept_request(db, "maria", "joao")
        declare_enemy(db, "maria", "joao")

        err = assert_error(ErrorCode.ENMITY_BLOCK, request_friendship, db, "joao", "maria")
        assert err.kind is ErrorKind.blocked

    def test_enmity_before_already_pending(self, db, users):
        request_friendship(db, "joao", "maria")
        declare_enemy(db, "joao", "maria")

        assert_error(ErrorCode.ENMITY_BLOCK, request_friendship, db, "joao", "maria")

    def test_enmity_blocks_auto_accept(self, db, users):
        request_friendship(db, "maria", "joao")
        declare_enemy(db, "maria", "joao")

        assert_error(ErrorCode.ENMITY_BLOCK, request_friendship, db, "joao", "maria")
        assert list_friends(db, "joao") == []
        assert list_pending_requests(db, "joao") == ["maria"]

    def test_enmity_is_mutual_block(self, db, users):
        declare_enemy(db, "ana", "bruno")

        assert_error(ErrorCode.ENMITY_BLOCK, request_friendship, db, "ana", "bruno")
        assert_error(ErrorCode.ENMITY_BLOCK, request_friendship, db, "bruno", "ana")
        assert list_pending_requests(db, "ana") == []
        assert list_pending_requests(db, "bruno") == []

    def test_enmity_message_names_target(self, db, users):
        declare_enemy(db, "bruno", "ana")
        err = assert_error(ErrorCode.ENMITY_BLOCK, request_friendship, db, "ana", "bruno")
        assert str(err) == "Invalid operation: Bruno is your enemy."


class TestAcceptAndReject:

    def test_accept_creates_symmetric_friendship(self, db, users):
        request_friendship(db, "maria", "joao")

        accept_request(db, "joao", "maria")

        assert is_friend(db, "joao", "maria")
        assert is_friend(db, "maria", "joao")
        assert is_mutual_friend(db, "joao", "maria")
        assert list_pending_requests(db, "joao") == []

    def test_auto_accept_matches_explicit_accept(self, db, users):
        request_friendship(db, "bruno", "ana")
        request_friendship(db, "ana", "bruno")

        request_friendship(db, "maria", "joao")
        accept_request(db, "joao", "maria")

        assert list_friends(db, "ana") == ["bruno"]
        assert list_friends(db, "bruno") == ["ana"]
        assert list_friends(db, "joao") == ["maria"]
        assert list_friends(db, "maria") == ["joao"]
        assert list_pending_requests(db, "ana") == list_pending_requests(db, "joao") == []

    def test_accept_without_request(self, db, users):
        err = assert_error(ErrorCode.USER_NOT_FOUND, accept_request, db, "joao", "maria")
        assert err.kind is ErrorKind.not_found
        assert list_friends(db, "joao") == []

    def test_accept_wrong_direction(self, db, users):
        request_friendship(db, "joao", "maria")
        assert_error(ErrorCode.USER_NOT_FOUND, accept_request, db, "joao", "maria")

    def test_accept_unknown_users(self, db, users):
        assert_error(ErrorCode.USER_NOT_FOUND, accept_request, db, "ghost", "maria")
        assert_error(ErrorCode.USER_NOT_FOUND, accept_request, db, "joao", "ghost")

    def test_reject_removes_request(self, db, users):
        request_friendship(db, "maria", "joao")

        assert reject_request(db, "joao", "maria") is True

        assert list_pending_requests(db, "joao") == []
        assert not is_friend(db, "joao", "maria")

    def test_reject_is_idempotent(self, db, users):
        assert reject_request(db, "joao", "maria") is False
        assert reject_request(db, "joao", "ghost") is False

    def test_request_can_be_resent_after_rejection(self, db, users):
        request_friendship(db, "maria", "joao")
        reject_request(db, "joao", "maria")

        assert request_friendship(db, "maria", "joao") is FriendRequestOutcome.requested
        assert list_pending_requests(db, "joao") == ["maria"]


class TestQueries:

    def test_friends_listed_alphabetically(self, db, users):
        for other in ("maria", "carla", "ana"):
            request_friendship(db, other, "joao")
            accept_request(db, "joao", other)

        assert list_friends(db, "joao") == ["ana", "carla", "maria"]

    def test_is_friend_unknown_other_is_false(self, db, users):
        assert is_friend(db, "joao", "ghost") is False

    def test_is_friend_unknown_login_raises(self, db, users):
        assert_error(ErrorCode.USER_NOT_FOUND, is_friend, db, "ghost", "joao")

    def test_is_mutual_friend_requires_both(self, db, users):
        assert_error(ErrorCode.USER_NOT_FOUND, is_mutual_friend, db, "joao", "ghost")

    def test_has_pending_request(self, db, users):
        request_friendship(db, "maria", "joao")

        assert has_pending_request(db, "maria", "joao")
        assert not has_pending_request(db, "joao", "maria")
        assert not has_pending_request(db, "ghost", "joao")

    def test_listing_unknown_user(self, db, users):
        assert_error(ErrorCode.USER_NOT_FOUND, list_friends, db, "ghost")
        assert_error(ErrorCode.USER_NOT_FOUND, list_pending_requests, db, "ghost")

    def test_events_recorded(self, db, users):
        request_friendship(db, "maria", "joao")
        request_friendship(db, "joao", "maria")

        types = [e.type for e in list_user_events(db, "joao")]
        assert types == [FRIENDSHIP_CREATED, FRIEND_REQUEST_SENT]

    def test_render_logins(self, db, users):
        from src.utils.user import render_logins

        assert render_logins(list_friends(db, "joao")) == "{}"
        request_friendship(db, "maria", "joao")
        request_friendship(db, "joao", "maria")
        request_friendship(db, "ana", "joao")
        accept_request(db, "joao", "ana")
        assert render_logins(list_friends(db, "joao")) == "{ana,maria}"
