from typing import List, Tuple

from flask import current_app

from wager.models import ACTIVE, REVEALED, GameState, Player
from .ledger import list_submissions
from .rounds import lock_game, require_host
from .transactions import run_transaction


def score_change(wager: int, is_correct: bool) -> str:
    return f"{wager if is_correct else -wager:+d}"


def reveal(host_id: str) -> Tuple[GameState, bool]:
    """Score the active round and publish its results, exactly once.

    Reads the round's submissions and each submitter's score, applies
    +wager for a correct guess and -wager otherwise, and writes the scores,
    the results and the ``revealed`` status in one transaction. A reveal
    that finds the round no longer active changes nothing, so a duplicate
    or racing reveal cannot score the round twice. Players who did not
    submit are left out; submitters whose player record is gone are
    skipped.
    """
    def work(session):
        game = lock_game(session)
        require_host(game, host_id)
        question = game.question
        if game.status != ACTIVE or not question:
            return game, None

        correct_answer = question['correct_answer']
        results: List[dict] = []
        for entry in list_submissions(game.round, game_key=game.game_key):
            player = session.get(Player, entry.player_id, with_for_update=True)
            if player is None:
                current_app.logger.info(f"[reveal-skip] game={game.game_key} missing player={entry.player_id}")
                continue
            is_correct = entry.guess == correct_answer
            player.score = (player.score or 0) + (entry.wager if is_correct else -entry.wager)
            results.append({
                'player_id': entry.player_id,
                'player_name': entry.player_name,
                'guess': entry.guess,
                'wager': entry.wager,
                'is_correct': is_correct,
                'score_change': score_change(entry.wager, is_correct),
            })

        game.status = REVEALED
        game.current_question = None
        game.set_results(results, revealed_question=question)
        return game, results

    game, results = run_transaction(work)
    applied = results is not None
    if applied:
        current_app.logger.info(f"[reveal] game={game.game_key} round={game.round} scored={len(results)}")
    else:
        current_app.logger.info(f"[reveal-stale] game={game.game_key} status={game.status}")
    return game, applied
