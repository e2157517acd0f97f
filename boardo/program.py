"""The wagering game program: create, join, settle and cancel games."""

from __future__ import annotations

import hashlib
import logging
from contextlib import contextmanager
from dataclasses import replace

from .errors import BoardoverseError, ErrorCode
from .state import U64_MAX, Game, GameStatus, Pubkey, game_seeds

logger = logging.getLogger(__name__)

PROGRAM_ID = Pubkey.from_string("AJsNVAr3m5wGLwY9bALRDsX9zeg9VvDJNCAHnpgUwpoc")

_ACCOUNT_STORAGE_OVERHEAD = 128
_LAMPORTS_PER_BYTE_YEAR = 3480
_EXEMPTION_YEARS = 2

_FIELD_PRIME = 2**255 - 19
_EDWARDS_D = (-121665 * pow(121666, -1, _FIELD_PRIME)) % _FIELD_PRIME


def _rent_exempt_minimum(space: int) -> int:
    return (_ACCOUNT_STORAGE_OVERHEAD + space) * _LAMPORTS_PER_BYTE_YEAR * _EXEMPTION_YEARS


def _is_on_curve(data: bytes) -> bool:
    """Whether 32 bytes decompress to a point of the ed25519 curve."""
    p = _FIELD_PRIME
    y = (int.from_bytes(data, "little") & ((1 << 255) - 1)) % p
    y2 = y * y % p
    x2 = (y2 - 1) * pow((_EDWARDS_D * y2 + 1) % p, -1, p) % p
    return x2 == 0 or pow(x2, (p - 1) // 2, p) == 1


def _find_program_address(seeds, program_id: Pubkey) -> tuple[Pubkey, int]:
    for bump in range(255, 0, -1):
        digest = hashlib.sha256(
            b"".join(seeds) + bytes([bump]) + program_id.raw + b"ProgramDerivedAddress"
        ).digest()
        if not _is_on_curve(digest):
            return Pubkey(digest), bump
    raise ValueError("unable to find a viable program address bump seed")


def _check_u64(value: int, name: str) -> None:
    if not 0 <= value <= U64_MAX:
        raise ValueError(f"{name} must fit in an unsigned 64-bit integer")


class BoardoProgram:
    """A ledger of lamport balances together with the game accounts of the program."""

    def __init__(self, rent_per_account=None):
        if rent_per_account is None:
            rent_per_account = _rent_exempt_minimum(Game.SPACE)
        if rent_per_account < 0:
            raise ValueError("rent_per_account must not be negative")
        self.rent_per_account = rent_per_account
        self.program_id = PROGRAM_ID
        self._lamports: dict[Pubkey, int] = {}
        self._accounts: dict[Pubkey, bytes] = {}

    def deposit(self, key: Pubkey, amount: int) -> int:
        """Credit lamports to an account and return its new balance."""
        if amount < 0:
            raise ValueError("deposit amount must not be negative")
        self._credit(key, amount)
        return self.balance(key)

    def balance(self, key: Pubkey) -> int:
        return self._lamports.get(key, 0)

    def game(self, game_id: str) -> Game:
        """Current state of an open game; KeyError if there is none."""
        return self._load(game_id)[1]

    def create_game(self, player1: Pubkey, game_id: str, bet_amount: int, arbiter: Pubkey) -> Game:
        _check_u64(bet_amount, "bet_amount")
        with self._transaction():
            address, bump = _find_program_address(game_seeds(game_id), self.program_id)
            if address in self._accounts:
                raise ValueError(f"game account for {game_id!r} is already in use")
            self._transfer(player1, address, self.rent_per_account)

            game = Game(
                game_id=game_id,
                player1=player1,
                player2=Pubkey.default(),
                arbiter=arbiter,
                bet_amount=bet_amount,
                total_pot=bet_amount,
                status=GameStatus.WAITING_FOR_PLAYER2,
                winner=None,
                bump=bump,
            )
            if bet_amount <= 0:
                raise BoardoverseError(ErrorCode.INVALID_BET_AMOUNT)
            self._transfer(player1, address, bet_amount)
            self._accounts[address] = game.to_bytes()

        logger.info(
            "Game created with ID: %s, bet amount: %d lamports, waiting for player 2",
            game_id,
            bet_amount,
        )
        return replace(game)

    def join_game(self, player2: Pubkey, game_id: str) -> Game:
        with self._transaction():
            address, game = self._load(game_id)
            if game.status is not GameStatus.WAITING_FOR_PLAYER2:
                raise BoardoverseError(ErrorCode.GAME_NOT_WAITING_FOR_PLAYER2)
            if not game.player2.is_default():
                raise BoardoverseError(ErrorCode.GAME_ALREADY_FULL)
            if player2 == game.player1:
                raise BoardoverseError(ErrorCode.CANNOT_PLAY_AGAINST_SELF)

            game.player2 = player2
            game.total_pot += game.bet_amount
            if game.total_pot > U64_MAX:
                raise OverflowError("total pot overflows an unsigned 64-bit integer")
            game.status = GameStatus.IN_PROGRESS
            self._transfer(player2, address, game.bet_amount)
            self._accounts[address] = game.to_bytes()

        logger.info(
            "Player 2 joined game ID: %s, total pot: %d lamports", game.game_id, game.total_pot
        )
        return replace(game)

    def declare_winner(self, arbiter: Pubkey, winner: Pubkey, game_id: str) -> Game:
        """Pay the pot to the winner and close the game; returns its final state."""
        with self._transaction():
            address, game = self._load(game_id)
            if arbiter != game.arbiter:
                raise BoardoverseError(ErrorCode.UNAUTHORIZED_ARBITER)
            if game.status is not GameStatus.IN_PROGRESS:
                raise BoardoverseError(ErrorCode.GAME_NOT_IN_PROGRESS)
            if winner not in (game.player1, game.player2):
                raise BoardoverseError(ErrorCode.INVALID_WINNER)

            game.winner = winner
            game.status = GameStatus.FINISHED
            total_pot = game.total_pot
            self._transfer(address, winner, total_pot)
            game.total_pot = 0
            self._close(address, arbiter)

        logger.info(
            "Winner declared for game %s: %s, prize: %d lamports",
            game.game_id,
            winner,
            total_pot,
        )
        return game

    def stop_game(self, arbiter: Pubkey, game_id: str) -> Game:
        """Cancel the game, refund the bets and close it; returns its final state."""
        with self._transaction():
            address, game = self._load(game_id)
            if arbiter != game.arbiter:
                raise BoardoverseError(ErrorCode.UNAUTHORIZED_ARBITER)

            refund = game.bet_amount
            if game.status is GameStatus.WAITING_FOR_PLAYER2:
                self._transfer(address, game.player1, refund)
                note = "%d lamports refunded to player1"
            elif game.status is GameStatus.IN_PROGRESS:
                self._debit(address, game.total_pot)
                self._credit(game.player1, refund)
                self._credit(game.player2, refund)
                note = "%d lamports refunded to each player"
            else:
                raise BoardoverseError(ErrorCode.GAME_ALREADY_FINISHED)

            game.status = GameStatus.CANCELLED
            game.total_pot = 0
            self._close(address, arbiter)

        logger.info("Game %s cancelled by arbiter, " + note, game.game_id, refund)
        return game

    @contextmanager
    def _transaction(self):
        lamports = dict(self._lamports)
        accounts = dict(self._accounts)
        try:
            yield
        except BaseException:
            self._lamports = lamports
            self._accounts = accounts
            raise

    def _load(self, game_id: str) -> tuple[Pubkey, Game]:
        address, _ = _find_program_address(game_seeds(game_id), self.program_id)
        data = self._accounts.get(address)
        if data is None:
            raise KeyError(f"game {game_id!r} does not exist")
        return address, Game.from_bytes(data)

    def _debit(self, key: Pubkey, amount: int) -> None:
        current = self.balance(key)
        if current < amount:
            raise BoardoverseError(ErrorCode.INSUFFICIENT_FUNDS)
        self._lamports[key] = current - amount

    def _credit(self, key: Pubkey, amount: int) -> None:
        total = self.balance(key) + amount
        if total > U64_MAX:
            raise OverflowError("balance overflows an unsigned 64-bit integer")
        self._lamports[key] = total

    def _transfer(self, source: Pubkey, destination: Pubkey, amount: int) -> None:
        self._debit(source, amount)
        self._credit(destination, amount)

    def _close(self, address: Pubkey, destination: Pubkey) -> None:
        remaining = self._lamports.pop(address, 0)
        self._credit(destination, remaining)
        del self._accounts[address]