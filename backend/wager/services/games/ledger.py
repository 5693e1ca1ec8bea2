from typing import List, Optional

from flask import current_app

from wager import db
from wager.models import GAME_ID, ACTIVE, GameState, Player, Submission
from .errors import ValidationFailed
from .transactions import INSERT_RACE_RETRYABLE, run_transaction

WAGER_MIN = 1
WAGER_MAX = 5


def validate_wager(wager) -> int:
    # bool is an int subclass; True is not a wager
    if isinstance(wager, bool) or not isinstance(wager, int):
        raise ValidationFailed('Wager must be a whole number')
    if not WAGER_MIN <= wager <= WAGER_MAX:
        raise ValidationFailed(f'Wager must be between {WAGER_MIN} and {WAGER_MAX}')
    return wager


def submit(player_id: str, round_number: int, guess: str, wager: int,
           player_name: Optional[str] = None) -> bool:
    """Record a player's guess and wager for the active round.

    Returns False without writing anything when the game is not active or
    ``round_number`` is not the current round. Resubmitting overwrites the
    player's earlier entry for the round.
    """
    if not player_id:
        raise ValidationFailed('player_id is required')
    if not guess:
        raise ValidationFailed('A guess is required')
    validate_wager(wager)

    def work(session):
        game = session.get(GameState, GAME_ID, with_for_update=True)
        if game is None or game.status != ACTIVE or game.round != round_number:
            return False
        options = (game.question or {}).get('options') or []
        if guess not in options:
            raise ValidationFailed(f'Guess must be one of {", ".join(options)}')

        name = player_name
        if not name:
            player = session.get(Player, player_id)
            name = player.name if player else None

        entry = Submission.query.filter_by(
            game_key=game.game_key, round=round_number, player_id=player_id
        ).first()
        if entry is None:
            entry = Submission(game_key=game.game_key, round=round_number, player_id=player_id)
            session.add(entry)
        entry.player_name = name
        entry.guess = guess
        entry.wager = wager
        return True

    accepted = run_transaction(work, retry_on=INSERT_RACE_RETRYABLE)
    if not accepted:
        current_app.logger.info(f"[submit-stale] player={player_id} round={round_number}")
    return accepted


def list_submissions(round_number: int, game_key: Optional[str] = None) -> List[Submission]:
    """All submissions for a round of the current game, in arrival order."""
    if game_key is None:
        game = db.session.get(GameState, GAME_ID)
        if game is None:
            return []
        game_key = game.game_key
    return (
        Submission.query
        .filter_by(game_key=game_key, round=round_number)
        .order_by(Submission.id)
        .all()
    )
