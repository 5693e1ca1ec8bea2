from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from flask_cors import CORS
from flask_migrate import Migrate
from flask_socketio import SocketIO
import click
from config import Config

db = SQLAlchemy()
migrate = Migrate()
socketio = SocketIO(async_mode=None)

DEMO_BANK = [
    ('Animal or Mineral', 'Animal', 'Mineral', [
        ('Coral', 'Animal'),
        ('Quartz', 'Mineral'),
        ('Sponge', 'Animal'),
        ('Pyrite', 'Mineral'),
    ]),
    ('Pasta or Painter', 'Pasta', 'Painter', [
        ('Tagliatelle', 'Pasta'),
        ('Tintoretto', 'Painter'),
        ('Caravaggio', 'Painter'),
        ('Orecchiette', 'Pasta'),
    ]),
]


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    flask_app.logger.setLevel(flask_app.config.get('LOG_LEVEL', 'INFO'))

    allowed_origins = flask_app.config.get('CORS_ORIGINS') or []
    db.init_app(flask_app)
    migrate.init_app(flask_app, db)
    CORS(flask_app, supports_credentials=True, origins=allowed_origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    from wager.routes import main
    flask_app.register_blueprint(main)

    from wager.api.players import players
    flask_app.register_blueprint(players, url_prefix='/api/players')

    from wager.api.bank import bank
    flask_app.register_blueprint(bank, url_prefix='/api/bank')

    from wager.api.games import games
    flask_app.register_blueprint(games, url_prefix='/api/game')

    # Register Socket.IO event handlers
    # Importing here ensures the handlers bind to the initialized socketio instance
    from wager.socketio_events import register_socketio_handlers
    register_socketio_handlers(testing=flask_app.config.get('TESTING', False))

    @click.command('db-reset')
    def db_reset_command():
        """Drops, recreates, and seeds the database with a demo question bank."""
        from wager.models import Category, Question
        with flask_app.app_context():
            db.drop_all()
            db.create_all()

            for name, option1, option2, terms in DEMO_BANK:
                category = Category(name=name, option1=option1, option2=option2)
                db.session.add(category)
                db.session.flush()
                for term, answer in terms:
                    db.session.add(Question(
                        term=term,
                        correct_answer=answer,
                        category_id=category.id,
                        category_name=category.name,
                    ))

            db.session.commit()
            click.echo('Database has been reset and seeded!')

    flask_app.cli.add_command(db_reset_command)

    return flask_app
