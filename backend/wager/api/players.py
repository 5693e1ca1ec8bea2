from flask import Blueprint, jsonify, request, current_app
from wager import db
from wager.models import Player
from wager.services import sync
from wager.services.games.rounds import get_game

players = Blueprint('players', __name__)


@players.route('', methods=['GET'])
def list_players():
    """Scoreboard order: highest score first."""
    return jsonify(sync.build_snapshot_data('players'))


@players.route('', methods=['POST'])
def join():
    """
    Joins the game under the caller's client identity. Joining again with the
    same identity updates the display name and starts the score over at 0.
    """
    data = request.get_json(silent=True) or {}
    player_id = data.get('player_id')
    name = (data.get('name') or '').strip()
    if not all([player_id, name]):
        return jsonify({'error': 'Player ID and name are required'}), 400

    player = db.session.get(Player, player_id)
    created = player is None
    if created:
        player = Player(id=player_id, name=name, score=0)
        db.session.add(player)
    else:
        player.name = name
        player.score = 0
    db.session.commit()
    current_app.logger.info(f"[join] player={player_id} name={name} new={created}")

    sync.publish('players')
    return jsonify(player.to_dict()), 201 if created else 200


@players.route('/<string:player_id>', methods=['DELETE'])
def remove(player_id):
    """
    Removes a player. Only the host of the current game may do this once a
    game exists.
    """
    data = request.get_json(silent=True) or {}
    game = get_game()
    if game and game.host_id and data.get('host_id') != game.host_id:
        return jsonify({'error': 'Only the host may remove players'}), 403

    player = db.session.get(Player, player_id)
    if not player:
        return jsonify({'error': 'Player not found'}), 404
    db.session.delete(player)
    db.session.commit()
    current_app.logger.info(f"[remove] player={player_id}")

    sync.publish('players')
    return jsonify({'message': 'Player removed'}), 200
