from flask import Blueprint, jsonify, request
from wager.models import ACTIVE, Category, Question
from wager.services import sync
from wager.services.games.errors import GameError
from wager.services.games.ledger import list_submissions, submit
from wager.services.games.playlist import build_playlist
from wager.services.games.rounds import advance, get_game, start_category, start_game
from wager.services.games.scoring import reveal


games = Blueprint('games', __name__)


@games.errorhandler(GameError)
def handle_game_error(exc):
    return jsonify({'error': str(exc)}), exc.status_code


def _transition_response(game, applied):
    payload = game.to_dict()
    payload['applied'] = applied
    return jsonify(payload)


def _host_id():
    data = request.get_json(silent=True) or {}
    return data.get('host_id')


@games.route('/state', methods=['GET'])
def get_game_state():
    game = get_game()
    if game is None:
        return jsonify({'error': 'No game has been started'}), 404
    return jsonify(game.to_dict())


@games.route('/start', methods=['POST'])
def start():
    """
    Builds a fresh playlist from the question bank, resets every score and
    moves into the first category. Whoever starts the game becomes its host.
    """
    host_id = _host_id()
    if not host_id:
        return jsonify({'error': 'host_id is required'}), 400

    playlist = build_playlist(
        [q.to_dict() for q in Question.query.all()],
        [c.to_dict() for c in Category.query.all()],
    )
    game, applied = start_game(host_id, playlist)

    sync.publish('game', 'players')
    return _transition_response(game, applied)


@games.route('/advance', methods=['POST'])
def advance_round():
    """
    Moves on after a reveal: the next category splash, the next question of
    the same category, or game over.
    """
    game, applied = advance(_host_id())
    if applied:
        sync.publish('game')
        if game.status == ACTIVE:
            sync.publish_round(game.round)
    return _transition_response(game, applied)


@games.route('/start-category', methods=['POST'])
def begin_category():
    game, applied = start_category(_host_id())
    if applied:
        sync.publish('game')
        sync.publish_round(game.round)
    return _transition_response(game, applied)


@games.route('/reveal', methods=['POST'])
def reveal_answers():
    """
    Scores the active round. Calling it again for the same round, even
    concurrently, changes nothing.
    """
    game, applied = reveal(_host_id())
    if applied:
        sync.publish('game', 'players')
    return _transition_response(game, applied)


@games.route('/submissions', methods=['POST'])
def submit_guess():
    data = request.get_json(silent=True) or {}
    player_id = data.get('player_id')
    round_number = data.get('round')
    if not player_id or not isinstance(round_number, int) or isinstance(round_number, bool):
        return jsonify({'error': 'player_id and round are required'}), 400

    accepted = submit(
        player_id,
        round_number,
        data.get('guess'),
        data.get('wager'),
        player_name=data.get('player_name'),
    )
    if not accepted:
        # Out-of-window submissions are ignored, not errors
        return jsonify({'accepted': False, 'reason': 'Round is not accepting guesses'}), 200

    sync.publish_round(round_number)
    return jsonify({'accepted': True}), 201


@games.route('/submissions', methods=['GET'])
def get_submissions():
    round_number = request.args.get('round', type=int)
    if round_number is None:
        game = get_game()
        if game is None:
            return jsonify({'error': 'No game has been started'}), 404
        round_number = game.round
    return jsonify({
        'round': round_number,
        'submissions': [s.to_dict() for s in list_submissions(round_number)],
    })
