# src/services/errors.py
# Закрытый перечень ошибок бизнес-правил. Сервисы бросают SocialError(ErrorCode.X),
# вызывающий решает, как показать ошибку пользователю.

from __future__ import annotations

import enum


class ErrorKind(enum.Enum):
    not_found = "not_found"
    invalid_operation = "invalid_operation"
    conflict = "conflict"
    blocked = "blocked"
    unauthorized = "unauthorized"


class ErrorCode(enum.Enum):
    # --- ядро отношений ---
    USER_NOT_FOUND = ("user_not_found", ErrorKind.not_found, "User is not registered.")
    SELF_FRIENDSHIP = ("self_friendship", ErrorKind.invalid_operation, "User cannot add themselves as a friend.")
    SELF_ADMIRATION = ("self_admiration", ErrorKind.invalid_operation, "User cannot be their own fan.")
    SELF_CRUSH = ("self_crush", ErrorKind.invalid_operation, "User cannot have a crush on themselves.")
    SELF_ENEMY = ("self_enemy", ErrorKind.invalid_operation, "User cannot be their own enemy.")
    ALREADY_FRIENDS = ("already_friends", ErrorKind.conflict, "User is already a friend.")
    REQUEST_ALREADY_PENDING = (
        "request_already_pending",
        ErrorKind.conflict,
        "User is already added as a friend, waiting for the invitation to be accepted.",
    )
    ALREADY_ADMIRING = ("already_admiring", ErrorKind.conflict, "User is already an idol.")
    ALREADY_CRUSHING = ("already_crushing", ErrorKind.conflict, "User is already a crush.")
    ALREADY_ENEMIES = ("already_enemies", ErrorKind.conflict, "User is already an enemy.")
    ENMITY_BLOCK = ("enmity_block", ErrorKind.blocked, "Invalid operation: {name} is your enemy.")

    # --- аккаунты, сессии, профиль ---
    INVALID_LOGIN = ("invalid_login", ErrorKind.invalid_operation, "Invalid login.")
    INVALID_PASSWORD = ("invalid_password", ErrorKind.invalid_operation, "Invalid password.")
    LOGIN_TAKEN = ("login_taken", ErrorKind.conflict, "An account with this login already exists.")
    INVALID_CREDENTIALS = ("invalid_credentials", ErrorKind.unauthorized, "Invalid login or password.")
    INVALID_SESSION = ("invalid_session", ErrorKind.unauthorized, "Invalid session.")
    ATTRIBUTE_NOT_SET = ("attribute_not_set", ErrorKind.not_found, "Attribute is not set.")
    DUPLICATE_ATTRIBUTE = ("duplicate_attribute", ErrorKind.conflict, "Attribute is defined more than once.")

    # --- сообщения ---
    SELF_NOTE = ("self_note", ErrorKind.invalid_operation, "User cannot send a note to themselves.")
    NO_NOTES = ("no_notes", ErrorKind.not_found, "There are no notes.")
    NO_MESSAGES = ("no_messages", ErrorKind.not_found, "There are no messages.")

    # --- сообщества ---
    COMMUNITY_EXISTS = ("community_exists", ErrorKind.conflict, "A community with this name already exists.")
    COMMUNITY_NOT_FOUND = ("community_not_found", ErrorKind.not_found, "Community does not exist.")
    ALREADY_MEMBER = ("already_member", ErrorKind.conflict, "User is already a member of this community.")

    def __init__(self, code: str, kind: ErrorKind, template: str):
        self.code = code
        self.kind = kind
        self.template = template


class SocialError(Exception):
    """
    Ошибка бизнес-правила. error.code — ErrorCode, error.kind — ErrorKind,
    str(error) — человекочитаемое сообщение.
    """

    def __init__(self, code: ErrorCode, **params: str):
        self.code = code
        self.params = params
        super().__init__(code.template.format(**params) if params else code.template)

    @property
    def kind(self) -> ErrorKind:
        return self.code.kind

    def __repr__(self) -> str:
        return f"SocialError({self.code.name})"
