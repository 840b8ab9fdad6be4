from flask import Flask, jsonify
from flask_sqlalchemy import SQLAlchemy
from flask_bcrypt import Bcrypt
from flask_login import LoginManager
from flask_cors import CORS
from flask_migrate import Migrate
from flask_socketio import SocketIO
import click
from config import Config

db = SQLAlchemy()
bcrypt = Bcrypt()
login_manager = LoginManager()
migrate = Migrate()
socketio = SocketIO(async_mode=None)

def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    allowed_origins = flask_app.config.get('CORS_ORIGINS') or []

    db.init_app(flask_app)
    bcrypt.init_app(flask_app)
    login_manager.init_app(flask_app)
    migrate.init_app(flask_app, db)
    CORS(flask_app, supports_credentials=True, origins=allowed_origins)
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    from duel.main import main
    flask_app.register_blueprint(main)

    from duel.api.questions import questions
    flask_app.register_blueprint(questions, url_prefix='/api/questions')

    from duel.api.matches import matches
    flask_app.register_blueprint(matches, url_prefix='/api/matches')

    from duel.api.rounds import rounds
    flask_app.register_blueprint(rounds, url_prefix='/api/rounds')

    from duel.actions.errors import ActionError

    @flask_app.errorhandler(ActionError)
    def handle_action_error(err):
        return jsonify(err.to_dict()), err.status_code

    from duel.socketio_events import register_socketio_handlers
    register_socketio_handlers()

    from duel.models import User

    @login_manager.user_loader
    def load_user(user_id):
        return db.session.get(User, int(user_id))

    @login_manager.unauthorized_handler
    def unauthorized():
        return jsonify({
            'error': 'You must be signed in to perform this action.',
            'code': 'UNAUTHORIZED',
        }), 401

    @click.command('db-reset')
    def db_reset_command():
        """Drops, recreates, and seeds the database."""
        from duel.models import TriviaQuestion
        with flask_app.app_context():
            db.drop_all()
            db.create_all()

            # Seed users
            users = ['testuser1', 'testuser2', 'testuser3']
            for u in users:
                user = User(username=u)
                user.set_password('password')
                db.session.add(user)

            # Seed a few global questions (no owner)
            seed_questions = [
                ('Science', 'What is the chemical symbol for gold?',
                 [{'id': 'A', 'label': 'Au'}, {'id': 'B', 'label': 'Ag'}, {'id': 'C', 'label': 'Gd'}], 'A'),
                ('History', 'In which year did the Berlin Wall fall?',
                 [{'id': 'A', 'label': '1987'}, {'id': 'B', 'label': '1989'}, {'id': 'C', 'label': '1991'}], 'B'),
                ('Geography', 'The Nile is the longest river in Europe.', None, False),
            ]
            for category, text, options, correct in seed_questions:
                db.session.add(TriviaQuestion(
                    category=category,
                    question=text,
                    options=options,
                    correct_answer=correct,
                ))

            db.session.commit()
            print('Database has been reset and seeded!')

    flask_app.cli.add_command(db_reset_command)

    return flask_app
