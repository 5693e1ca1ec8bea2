"""Round state machine for the game singleton.

waiting -> category-splash -> active -> revealed -> (category-splash | active | game-over)

Each transition is one store transaction: the state row is re-read (and
locked where the database supports it) before the guard is evaluated, and
the write is checked against the row's version token on commit.
"""

from typing import List, Optional, Tuple

from flask import current_app
from sqlalchemy import update

from wager import db
from wager.models import (
    GAME_ID, WAITING, CATEGORY_SPLASH, ACTIVE, REVEALED, GAME_OVER,
    GameState, Player, new_id,
)
from .errors import NoActiveGame, NotHost
from .transactions import INSERT_RACE_RETRYABLE, run_transaction


def category_of(entry: dict) -> dict:
    return {
        'id': entry['category_id'],
        'name': entry['category_name'],
        'option1': entry['option1'],
        'option2': entry['option2'],
    }


def question_of(entry: dict) -> dict:
    question = dict(entry)
    question['options'] = [entry['option1'], entry['option2']]
    return question


def lock_game(session) -> GameState:
    game = session.get(GameState, GAME_ID, with_for_update=True)
    if game is None:
        raise NoActiveGame()
    return game


def require_host(game: GameState, host_id) -> None:
    if not host_id or game.host_id != host_id:
        raise NotHost()


def get_game() -> Optional[GameState]:
    return db.session.get(GameState, GAME_ID)


def start_game(host_id: str, playlist: List[dict]) -> Tuple[GameState, bool]:
    """Reset the singleton for a new game and advance into its first round.

    Every player's score goes back to 0. A fresh game key scopes the new
    game's ledger partitions, so submissions left over from a previous game
    are never read again.
    """
    def work(session):
        game = session.get(GameState, GAME_ID, with_for_update=True)
        if game is None:
            game = GameState(id=GAME_ID)
            session.add(game)
        game.game_key = new_id()
        game.host_id = host_id
        game.round = 0
        game.status = WAITING
        game.set_playlist(playlist)
        game.set_current()
        game.set_results(None)
        session.execute(update(Player).values(score=0))
        return game

    game = run_transaction(work, retry_on=INSERT_RACE_RETRYABLE)
    current_app.logger.info(f"[start] game={game.game_key} host={host_id} questions={game.playlist_length}")
    return advance(host_id)


def advance(host_id: str) -> Tuple[GameState, bool]:
    """Move to the next category splash, the next question, or game over.

    Only valid from ``waiting`` or ``revealed``; anywhere else it is a
    no-op. A splash does not consume the round index: the following
    start-category does.
    """
    def work(session):
        game = lock_game(session)
        require_host(game, host_id)
        if game.status not in (WAITING, REVEALED):
            return game, False

        playlist = game.playlist_entries
        i = game.round
        game.set_results(None)
        if i >= len(playlist):
            game.status = GAME_OVER
            game.set_current()
            return game, True

        nxt = playlist[i]
        prev = playlist[i - 1] if i > 0 else None
        if prev is None or prev['category_id'] != nxt['category_id']:
            game.status = CATEGORY_SPLASH
            game.set_current(category=category_of(nxt))
        else:
            game.status = ACTIVE
            game.set_current(category=category_of(nxt), question=question_of(nxt))
            game.round = i + 1
        return game, True

    game, applied = run_transaction(work)
    if applied:
        current_app.logger.info(f"[advance] game={game.game_key} status={game.status} round={game.round}")
    else:
        current_app.logger.info(f"[advance-stale] game={game.game_key} status={game.status}")
    return game, applied


def start_category(host_id: str) -> Tuple[GameState, bool]:
    """Leave the category splash and activate the category's first question."""
    def work(session):
        game = lock_game(session)
        require_host(game, host_id)
        if game.status != CATEGORY_SPLASH:
            return game, False
        entry = game.playlist_entries[game.round]
        game.status = ACTIVE
        game.set_current(category=category_of(entry), question=question_of(entry))
        game.round = game.round + 1
        return game, True

    game, applied = run_transaction(work)
    if applied:
        current_app.logger.info(f"[start-category] game={game.game_key} round={game.round}")
    return game, applied
