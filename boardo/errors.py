"""Errors reported by the wagering game program."""

from __future__ import annotations

from enum import IntEnum


class ErrorCode(IntEnum):
    """Custom error numbers; the numbering starts at 6000 like any program error."""

    INSUFFICIENT_FUNDS = 6000
    INVALID_BET_AMOUNT = 6001
    GAME_NOT_WAITING_FOR_PLAYER2 = 6002
    GAME_ALREADY_FULL = 6003
    CANNOT_PLAY_AGAINST_SELF = 6004
    UNAUTHORIZED_ARBITER = 6005
    GAME_NOT_IN_PROGRESS = 6006
    INVALID_WINNER = 6007
    UNAUTHORIZED_PLAYER = 6008
    CANNOT_STOP_IN_PROGRESS_GAME = 6009
    GAME_ALREADY_FINISHED = 6010

    @property
    def message(self) -> str:
        """Human readable description of the error."""
        return _MESSAGES[self]

    @property
    def error_name(self) -> str:
        """CamelCase name of the error, e.g. ``InsufficientFunds``."""
        return "".join(part.capitalize() for part in self.name.split("_"))


_MESSAGES = {
    ErrorCode.INSUFFICIENT_FUNDS: "Insufficient funds in token account",
    ErrorCode.INVALID_BET_AMOUNT: "Invalid bet amount",
    ErrorCode.GAME_NOT_WAITING_FOR_PLAYER2: "Game is not waiting for player 2",
    ErrorCode.GAME_ALREADY_FULL: "Game is already full",
    ErrorCode.CANNOT_PLAY_AGAINST_SELF: "Cannot play against yourself",
    ErrorCode.UNAUTHORIZED_ARBITER: "Unauthorized arbiter",
    ErrorCode.GAME_NOT_IN_PROGRESS: "Game is not in progress",
    ErrorCode.INVALID_WINNER: "Invalid winner",
    ErrorCode.UNAUTHORIZED_PLAYER: "Unauthorized player",
    ErrorCode.CANNOT_STOP_IN_PROGRESS_GAME: "Cannot stop game that is in progress",
    ErrorCode.GAME_ALREADY_FINISHED: "Game is already finished",
}


class BoardoverseError(Exception):
    """Raised when an instruction is rejected by the program."""

    def __init__(self, code):
        self.code = ErrorCode(code)
        super().__init__(
            f"Error Code: {self.code.error_name}. "
            f"Error Number: {int(self.code)}. "
            f"Error Message: {self.code.message}."
        )

    @property
    def message(self) -> str:
        return self.code.message