from wager import db
import json
import uuid

# The game state is a singleton row
GAME_ID = 1

WAITING = 'waiting'
CATEGORY_SPLASH = 'category-splash'
ACTIVE = 'active'
REVEALED = 'revealed'
GAME_OVER = 'game-over'


def new_id():
    return uuid.uuid4().hex


def _dumps(value):
    return json.dumps(value) if value is not None else None


def _loads(value):
    return json.loads(value) if value else None


class Category(db.Model):
    __tablename__ = 'category'
    id = db.Column(db.String(32), primary_key=True, default=new_id)
    name = db.Column(db.String(128), nullable=False)
    option1 = db.Column(db.String(128), nullable=False)
    option2 = db.Column(db.String(128), nullable=False)

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'option1': self.option1,
            'option2': self.option2,
        }


class Question(db.Model):
    __tablename__ = 'question'
    id = db.Column(db.String(32), primary_key=True, default=new_id)
    term = db.Column(db.String(256), nullable=False)
    correct_answer = db.Column(db.String(128), nullable=False)
    # Plain column, not a foreign key: categories may be deleted under their questions
    category_id = db.Column(db.String(32), nullable=False, index=True)
    category_name = db.Column(db.String(128), nullable=True)

    def to_dict(self):
        return {
            'id': self.id,
            'term': self.term,
            'correct_answer': self.correct_answer,
            'category_id': self.category_id,
            'category_name': self.category_name,
        }


class Player(db.Model):
    __tablename__ = 'player'
    # Client identity issued by the identity provider
    id = db.Column(db.String(64), primary_key=True)
    name = db.Column(db.String(64), nullable=False)
    score = db.Column(db.Integer, default=0, nullable=False)

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'score': self.score,
        }


class GameState(db.Model):
    __tablename__ = 'game_state'
    id = db.Column(db.Integer, primary_key=True)
    game_key = db.Column(db.String(32), nullable=False, default=new_id)
    host_id = db.Column(db.String(64), nullable=True)
    round = db.Column(db.Integer, nullable=False, default=0)
    status = db.Column(db.String(32), nullable=False, default=WAITING)
    playlist = db.Column(db.Text, nullable=True)  # JSON-encoded list of playlist entries
    playlist_length = db.Column(db.Integer, nullable=False, default=0)
    current_category = db.Column(db.Text, nullable=True)  # JSON
    current_question = db.Column(db.Text, nullable=True)  # JSON
    results = db.Column(db.Text, nullable=True)  # JSON-encoded list of round results
    revealed_question = db.Column(db.Text, nullable=True)  # JSON
    version = db.Column(db.Integer, nullable=False)

    __mapper_args__ = {'version_id_col': version}

    @property
    def playlist_entries(self):
        return _loads(self.playlist) or []

    @property
    def question(self):
        return _loads(self.current_question)

    def set_playlist(self, entries):
        self.playlist = json.dumps(list(entries))
        self.playlist_length = len(entries)

    def set_current(self, category=None, question=None):
        self.current_category = _dumps(category)
        self.current_question = _dumps(question)

    def set_results(self, results, revealed_question=None):
        self.results = _dumps(results)
        self.revealed_question = _dumps(revealed_question)

    def to_dict(self):
        return {
            'game_key': self.game_key,
            'host_id': self.host_id,
            'round': self.round,
            'status': self.status,
            'playlist': self.playlist_entries,
            'playlist_length': self.playlist_length,
            'current_category': _loads(self.current_category),
            'current_question': _loads(self.current_question),
            'results': _loads(self.results),
            'revealed_question': _loads(self.revealed_question),
        }


class Submission(db.Model):
    __tablename__ = 'submission'
    id = db.Column(db.Integer, primary_key=True)
    game_key = db.Column(db.String(32), nullable=False, index=True)
    round = db.Column(db.Integer, nullable=False)
    player_id = db.Column(db.String(64), nullable=False)
    player_name = db.Column(db.String(64), nullable=True)
    guess = db.Column(db.String(128), nullable=False)
    wager = db.Column(db.Integer, nullable=False)

    __table_args__ = (
        db.UniqueConstraint('game_key', 'round', 'player_id', name='uq_submission_round_player'),
    )

    def to_dict(self):
        return {
            'player_id': self.player_id,
            'player_name': self.player_name,
            'guess': self.guess,
            'wager': self.wager,
            'round': self.round,
        }
