import pytest

from boardo.errors import BoardoverseError, ErrorCode
from boardo.program import BoardoProgram
from boardo.state import Game, GameStatus, Pubkey

RENT = 1_000
BET = 5_000
START = 100_000


def key(n):
    return Pubkey(bytes([n]) * 32)


ALICE = key(1)
BOB = key(2)
REFEREE = key(3)
CAROL = key(4)


@pytest.fixture
def program():
    ledger = BoardoProgram(rent_per_account=RENT)
    for who in (ALICE, BOB, REFEREE, CAROL):
        ledger.deposit(who, START)
    return ledger


@pytest.fixture
def waiting(program):
    program.create_game(ALICE, "match", BET, REFEREE)
    return program


@pytest.fixture
def running(waiting):
    waiting.join_game(BOB, "match")
    return waiting


def total(program):
    return sum(program.balance(who) for who in (ALICE, BOB, REFEREE, CAROL))


def expect_error(code, call, *args):
    with pytest.raises(BoardoverseError) as info:
        call(*args)
    assert info.value.code is code


def test_create_game_records_state_and_takes_bet(program):
    game = program.create_game(ALICE, "match", BET, REFEREE)
    assert game.status is GameStatus.WAITING_FOR_PLAYER2
    assert game.player1 == ALICE
    assert game.player2.is_default()
    assert game.arbiter == REFEREE
    assert game.total_pot == BET
    assert game.winner is None
    assert program.game("match") == game
    assert program.balance(ALICE) == START - RENT - BET


def test_zero_bet_is_rejected_and_rolled_back(program):
    expect_error(ErrorCode.INVALID_BET_AMOUNT, program.create_game, ALICE, "match", 0, REFEREE)
    assert program.balance(ALICE) == START
    with pytest.raises(KeyError):
        program.game("match")


def test_insufficient_funds_rolls_back(program):
    poor = key(9)
    program.deposit(poor, RENT + BET - 1)
    expect_error(ErrorCode.INSUFFICIENT_FUNDS, program.create_game, poor, "match", BET, REFEREE)
    assert program.balance(poor) == RENT + BET - 1
    with pytest.raises(KeyError):
        program.game("match")


def test_duplicate_game_id_is_rejected(waiting):
    with pytest.raises(ValueError):
        waiting.create_game(BOB, "match", BET, REFEREE)
    assert waiting.balance(BOB) == START


def test_game_id_longer_than_seed_is_rejected(program):
    with pytest.raises(ValueError):
        program.create_game(ALICE, "z" * 33, BET, REFEREE)


def test_bet_must_fit_u64(program):
    with pytest.raises(ValueError):
        program.create_game(ALICE, "match", 2**64, REFEREE)


def test_bump_is_deterministic(program):
    game = program.create_game(ALICE, "match", BET, REFEREE)
    other = BoardoProgram(rent_per_account=RENT)
    other.deposit(BOB, START)
    assert other.create_game(BOB, "match", BET, REFEREE).bump == game.bump
    assert 1 <= game.bump <= 255


def test_default_rent_is_charged_on_create():
    ledger = BoardoProgram()
    ledger.deposit(ALICE, 10**10)
    ledger.create_game(ALICE, "match", BET, REFEREE)
    assert ledger.rent_per_account > 0
    assert ledger.balance(ALICE) == 10**10 - BET - ledger.rent_per_account


def test_negative_rent_is_rejected():
    with pytest.raises(ValueError):
        BoardoProgram(rent_per_account=-1)


def test_negative_deposit_is_rejected(program):
    with pytest.raises(ValueError):
        program.deposit(ALICE, -5)


def test_join_game_doubles_pot(waiting):
    game = waiting.join_game(BOB, "match")
    assert game.status is GameStatus.IN_PROGRESS
    assert game.player2 == BOB
    assert game.total_pot == 2 * BET
    assert waiting.balance(BOB) == START - BET
    assert waiting.game("match") == game


def test_cannot_join_own_game(waiting):
    expect_error(ErrorCode.CANNOT_PLAY_AGAINST_SELF, waiting.join_game, ALICE, "match")
    assert waiting.game("match").status is GameStatus.WAITING_FOR_PLAYER2


def test_cannot_join_running_game(running):
    expect_error(ErrorCode.GAME_NOT_WAITING_FOR_PLAYER2, running.join_game, CAROL, "match")
    assert running.balance(CAROL) == START


def test_join_without_funds_rolls_back(waiting):
    broke = key(8)
    expect_error(ErrorCode.INSUFFICIENT_FUNDS, waiting.join_game, broke, "match")
    assert waiting.game("match").player2.is_default()


def test_join_missing_game(program):
    with pytest.raises(KeyError):
        program.join_game(BOB, "nothing")


def test_declare_winner_pays_pot_and_closes(running):
    game = running.declare_winner(REFEREE, BOB, "match")
    assert game.status is GameStatus.FINISHED
    assert game.winner == BOB
    assert game.total_pot == 0
    assert running.balance(BOB) == START + BET
    assert running.balance(ALICE) == START - RENT - BET
    assert running.balance(REFEREE) == START + RENT
    with pytest.raises(KeyError):
        running.game("match")
    assert total(running) == 4 * START


def test_declare_winner_requires_arbiter(running):
    expect_error(ErrorCode.UNAUTHORIZED_ARBITER, running.declare_winner, ALICE, ALICE, "match")
    assert running.game("match").status is GameStatus.IN_PROGRESS


def test_declare_winner_requires_running_game(waiting):
    expect_error(ErrorCode.GAME_NOT_IN_PROGRESS, waiting.declare_winner, REFEREE, ALICE, "match")


def test_declare_winner_requires_a_player(running):
    expect_error(ErrorCode.INVALID_WINNER, running.declare_winner, REFEREE, CAROL, "match")
    assert running.balance(CAROL) == START


def test_stop_waiting_game_refunds_player1(waiting):
    game = waiting.stop_game(REFEREE, "match")
    assert game.status is GameStatus.CANCELLED
    assert game.total_pot == 0
    assert waiting.balance(ALICE) == START - RENT
    assert waiting.balance(REFEREE) == START + RENT
    with pytest.raises(KeyError):
        waiting.game("match")


def test_stop_running_game_refunds_both(running):
    game = running.stop_game(REFEREE, "match")
    assert game.status is GameStatus.CANCELLED
    assert running.balance(ALICE) == START - RENT
    assert running.balance(BOB) == START
    assert total(running) == 4 * START


def test_stop_requires_arbiter(running):
    expect_error(ErrorCode.UNAUTHORIZED_ARBITER, running.stop_game, BOB, "match")
    assert running.game("match").total_pot == 2 * BET


def test_stop_closed_game_is_missing(running):
    running.declare_winner(REFEREE, ALICE, "match")
    with pytest.raises(KeyError):
        running.stop_game(REFEREE, "match")


def test_game_id_can_be_reused_after_close(running):
    running.stop_game(REFEREE, "match")
    game = running.create_game(CAROL, "match", BET, REFEREE)
    assert game.player1 == CAROL
    assert running.game("match") == game


def test_returned_game_is_a_copy(waiting):
    game = waiting.game("match")
    game.total_pot = 0
    assert waiting.game("match").total_pot == BET
    assert isinstance(waiting.game("match"), Game)