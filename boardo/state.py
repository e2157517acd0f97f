"""Account state of a wagered game and its on-chain layout."""

from __future__ import annotations

import hashlib
from dataclasses import dataclass
from enum import Enum
from typing import ClassVar

BOARDOVERSE_SEED = b"BOARDOVERSE"
MAX_SEED_LEN = 32
GAME_ID_MAX_LEN = 32
U64_MAX = 2**64 - 1

_B58_ALPHABET = "123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz"
_B58_INDEX = {char: index for index, char in enumerate(_B58_ALPHABET)}


@dataclass(frozen=True)
class Pubkey:
    """A 32-byte public key or account address."""

    raw: bytes

    LENGTH: ClassVar[int] = 32

    def __post_init__(self):
        raw = bytes(self.raw)
        if len(raw) != self.LENGTH:
            raise ValueError(f"public key must be {self.LENGTH} bytes, got {len(raw)}")
        object.__setattr__(self, "raw", raw)

    @classmethod
    def default(cls) -> Pubkey:
        """The all-zero key, used for an empty player slot."""
        return cls(bytes(cls.LENGTH))

    @classmethod
    def from_string(cls, text: str) -> Pubkey:
        """Parse a base58 encoded key."""
        number = 0
        for char in text:
            try:
                number = number * 58 + _B58_INDEX[char]
            except KeyError:
                raise ValueError(f"invalid base58 character {char!r}") from None
        leading = len(text) - len(text.lstrip("1"))
        body = number.to_bytes((number.bit_length() + 7) // 8, "big")
        return cls(bytes(leading) + body)

    def is_default(self) -> bool:
        return self.raw == bytes(self.LENGTH)

    def __bytes__(self) -> bytes:
        return self.raw

    def __str__(self) -> str:
        number = int.from_bytes(self.raw, "big")
        chars = []
        while number:
            number, rest = divmod(number, 58)
            chars.append(_B58_ALPHABET[rest])
        leading = len(self.raw) - len(self.raw.lstrip(b"\0"))
        return "1" * leading + "".join(reversed(chars))


class GameStatus(Enum):
    """Life cycle of a game; values are the serialized variant indices."""

    WAITING_FOR_PLAYER2 = 0
    IN_PROGRESS = 1
    FINISHED = 2
    CANCELLED = 3


class _Reader:
    def __init__(self, data: bytes):
        self._data = bytes(data)
        self._pos = 0

    def take(self, size: int) -> bytes:
        end = self._pos + size
        if end > len(self._data):
            raise ValueError("account data is truncated")
        chunk = self._data[self._pos:end]
        self._pos = end
        return chunk

    def u8(self) -> int:
        return self.take(1)[0]

    def u32(self) -> int:
        return int.from_bytes(self.take(4), "little")

    def u64(self) -> int:
        return int.from_bytes(self.take(8), "little")

    def pubkey(self) -> Pubkey:
        return Pubkey(self.take(Pubkey.LENGTH))


@dataclass
class Game:
    """State stored in a game account."""

    game_id: str
    player1: Pubkey
    player2: Pubkey
    arbiter: Pubkey
    bet_amount: int
    total_pot: int
    status: GameStatus
    winner: Pubkey | None
    bump: int

    DISCRIMINATOR: ClassVar[bytes] = hashlib.sha256(b"account:Game").digest()[:8]
    INIT_SPACE: ClassVar[int] = (
        4 + GAME_ID_MAX_LEN + 3 * Pubkey.LENGTH + 8 + 8 + 1 + 1 + Pubkey.LENGTH + 1
    )
    SPACE: ClassVar[int] = 8 + INIT_SPACE

    def to_bytes(self) -> bytes:
        """Serialize with the account discriminator in front."""
        game_id = self.game_id.encode("utf-8")
        winner = b"\x00" if self.winner is None else b"\x01" + self.winner.raw
        data = b"".join(
            (
                self.DISCRIMINATOR,
                len(game_id).to_bytes(4, "little"),
                game_id,
                self.player1.raw,
                self.player2.raw,
                self.arbiter.raw,
                self.bet_amount.to_bytes(8, "little"),
                self.total_pot.to_bytes(8, "little"),
                bytes([self.status.value]),
                winner,
                bytes([self.bump]),
            )
        )
        if len(data) > self.SPACE:
            raise ValueError(
                f"serialized game takes {len(data)} bytes, account holds {self.SPACE}"
            )
        return data

    @classmethod
    def from_bytes(cls, data) -> Game:
        """Deserialize account data; trailing padding is ignored."""
        reader = _Reader(data)
        if reader.take(8) != cls.DISCRIMINATOR:
            raise ValueError("account discriminator does not match Game")
        game_id = reader.take(reader.u32()).decode("utf-8")
        player1 = reader.pubkey()
        player2 = reader.pubkey()
        arbiter = reader.pubkey()
        bet_amount = reader.u64()
        total_pot = reader.u64()
        status_index = reader.u8()
        try:
            status = GameStatus(status_index)
        except ValueError:
            raise ValueError(f"invalid game status {status_index}") from None
        tag = reader.u8()
        if tag == 0:
            winner = None
        elif tag == 1:
            winner = reader.pubkey()
        else:
            raise ValueError(f"invalid option tag {tag}")
        bump = reader.u8()
        return cls(
            game_id=game_id,
            player1=player1,
            player2=player2,
            arbiter=arbiter,
            bet_amount=bet_amount,
            total_pot=total_pot,
            status=status,
            winner=winner,
            bump=bump,
        )


def game_seeds(game_id) -> tuple[bytes, bytes]:
    """Seeds of the program address that holds the game with this id."""
    encoded = game_id.encode("utf-8") if isinstance(game_id, str) else bytes(game_id)
    if len(encoded) > MAX_SEED_LEN:
        raise ValueError(
            f"game id is {len(encoded)} bytes, a seed holds at most {MAX_SEED_LEN}"
        )
    return BOARDOVERSE_SEED, encoded