# boardo

Escrowed wagers for two-player board games. One player opens a game with a
bet, a second player matches it, and an arbiter either declares the winner,
who takes the whole pot, or stops the game and refunds the stakes.

The package keeps every balance and every game account in memory, so the
full life of a game can be run and checked in plain Python.

## Installing

```
pip install .
```

For the tests:

```
pip install ".[test]"
pytest
```

## A game from start to finish

```python
from boardo.program import BoardoProgram
from boardo.state import GameStatus, Pubkey

alice = Pubkey(bytes([1]) * 32)
bob = Pubkey(bytes([2]) * 32)
referee = Pubkey(bytes([3]) * 32)

program = BoardoProgram(rent_per_account=0)
program.deposit(alice, 1_000)
program.deposit(bob, 1_000)

program.create_game(alice, "chess-42", 100, referee)
assert program.game("chess-42").status is GameStatus.WAITING_FOR_PLAYER2

program.join_game(bob, "chess-42")
assert program.game("chess-42").total_pot == 200

final = program.declare_winner(referee, alice, "chess-42")
assert final.status is GameStatus.FINISHED
assert program.balance(alice) == 1_100
assert program.balance(bob) == 900
```

`BoardoProgram` methods:

- `deposit(key, amount)` credits lamports to an account and returns the new
  balance; `balance(key)` reads it (0 for an unknown account).
- `create_game(player1, game_id, bet_amount, arbiter)` opens a game. The
  first player pays the account rent (`rent_per_account`) and the bet.
- `join_game(player2, game_id)` adds the second player, who pays the same
  bet; the game is then in progress.
- `declare_winner(arbiter, winner, game_id)` pays the whole pot to the
  winner, who must be one of the two players.
- `stop_game(arbiter, game_id)` cancels the game and refunds the bets.
- `game(game_id)` returns the current `Game` record of an open game.

When `rent_per_account` is not given, it defaults to the rent-exempt minimum
for the size of a game account. Declaring a winner or stopping a game closes
the game account: whatever is left on it, such as that rent, goes to the
arbiter, and the game can no longer be looked up. Both calls return the
game's final state.

Each successful call logs a line through the `boardo.program` logger.

## Stopping a game

`stop_game` may be called only by the game's arbiter. A game still waiting
for its second player refunds the bet to the first player; a game in
progress refunds each player's bet. A game that is already finished or
cancelled cannot be stopped.

## Errors

Every rule of the game raises `boardo.errors.BoardoverseError`. Its `code`
attribute is a member of `boardo.errors.ErrorCode`, for example
`ErrorCode.INVALID_BET_AMOUNT`, `ErrorCode.CANNOT_PLAY_AGAINST_SELF`,
`ErrorCode.UNAUTHORIZED_ARBITER` or `ErrorCode.INSUFFICIENT_FUNDS`, and its
`message` is the one the rule defines, such as "Invalid bet amount".

Other failures use the built-in exceptions:

- `KeyError` when no open game has the given id;
- `ValueError` when a game id is already in use, when a game id is longer
  than 32 bytes, or for a negative deposit or an out-of-range bet;
- `OverflowError` when a balance or pot would exceed an unsigned 64-bit
  integer.

Any call that fails leaves balances and games exactly as they were.

## Game accounts

`boardo.state.Game` holds a game's record. `Game.to_bytes` and
`Game.from_bytes` convert it to and from its stored binary layout, led by an
8-byte account discriminator. `boardo.state.game_seeds(game_id)` gives the
seeds that identify a game's account. `Pubkey` is a 32-byte key; it prints
as base58, `Pubkey.from_string` parses base58, and `Pubkey.default()` is the
all-zero key of an empty player slot.

## What it does not do

Everything lives in one `BoardoProgram` object in memory. There is no
command-line tool, no network access and no storage: balances and games are
gone when the object is.