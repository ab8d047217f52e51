# -*- coding: utf-8 -*-
"""Typed failures raised by the data layer.

Every failure path of the importer, the account lifecycle and the questionnaire
workflow maps to one of the classes below. Each carries a stable ``code`` and a
``context`` dict so callers can render a message without parsing text.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence


class NutriTrackError(Exception):
    code = "error"

    def __init__(self, message: str, **context: Any) -> None:
        super().__init__(message)
        self.message = message
        self.context: Dict[str, Any] = context

    def to_dict(self) -> Dict[str, Any]:
        return {"code": self.code, "message": self.message, **self.context}


# ---- Import ----


class MissingColumnError(NutriTrackError):
    code = "missing_column"

    def __init__(self, column: str, header: Sequence[str]) -> None:
        super().__init__(
            f"Missing column: {column}. Available: {list(header)}",
            column=column,
            header=list(header),
        )
        self.column = column
        self.header = list(header)


class ParseError(NutriTrackError):
    """A single unreadable score cell. Recorded on the import report, read as 0.0."""

    code = "parse_error"

    def __init__(self, *, field: str, row: int, raw: str) -> None:
        super().__init__(
            f"Row {row}: cannot read {field!r} from {raw!r}, using 0.0",
            field=field,
            row=row,
            raw=raw,
        )
        self.field = field
        self.row = row
        self.raw = raw


class SeedFileError(NutriTrackError):
    """The seed file could not be decoded. Fatal to the import, like a bad header."""

    code = "unreadable_seed_file"

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"Cannot read seed file {path}: {reason}", path=path)
        self.path = path


# ---- Accounts ----


class UnknownUser(NutriTrackError):
    code = "unknown_user"

    def __init__(self, user_id: str) -> None:
        super().__init__(f"No patient with user ID {user_id!r}", user_id=user_id)
        self.user_id = user_id


class AlreadyClaimed(NutriTrackError):
    code = "already_claimed"

    def __init__(self, user_id: str) -> None:
        super().__init__(f"Account {user_id!r} has already been claimed", user_id=user_id)
        self.user_id = user_id


class PhoneMismatch(NutriTrackError):
    code = "phone_mismatch"

    def __init__(self, user_id: str) -> None:
        # Never include the stored number.
        super().__init__(
            f"Phone number does not match the record for {user_id!r}",
            user_id=user_id,
            field="phone_number",
        )
        self.user_id = user_id


class InvalidPassword(NutriTrackError):
    code = "invalid_password"

    def __init__(self, reason: str, *, field: str = "password", min_length: Optional[int] = None) -> None:
        context: Dict[str, Any] = {"field": field}
        if min_length is not None:
            context["min_length"] = min_length
        super().__init__(reason, **context)
        self.field = field
        self.min_length = min_length


class WrongPassword(NutriTrackError):
    code = "wrong_password"

    def __init__(self, user_id: str, *, field: str = "password") -> None:
        super().__init__(f"Incorrect password for {user_id!r}", user_id=user_id, field=field)
        self.user_id = user_id
        self.field = field


class UnclaimedAccount(NutriTrackError):
    code = "unclaimed_account"

    def __init__(self, user_id: str) -> None:
        super().__init__(
            f"Account {user_id!r} has not been claimed yet; register it first",
            user_id=user_id,
        )
        self.user_id = user_id


# ---- Questionnaire ----


class InvalidQuestionnaire(NutriTrackError):
    code = "invalid_questionnaire"

    def __init__(self, problems: List[Dict[str, str]]) -> None:
        fields = sorted({p["field"] for p in problems})
        super().__init__(
            "Questionnaire is incomplete or inconsistent: " + "; ".join(p["message"] for p in problems),
            fields=fields,
            problems=problems,
        )
        self.problems = problems
        self.fields = fields


# ---- Collaborators ----


class CoachUnavailable(NutriTrackError):
    code = "coach_unavailable"

    def __init__(self, user_id: str, reason: str) -> None:
        super().__init__(f"AI tip could not be generated: {reason}", user_id=user_id)
        self.user_id = user_id
