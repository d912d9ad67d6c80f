from flask import Flask, jsonify
from flask_sqlalchemy import SQLAlchemy
from flask_bcrypt import Bcrypt
from flask_login import LoginManager
from flask_cors import CORS
from flask_migrate import Migrate
import click
from config import Config

db = SQLAlchemy()
bcrypt = Bcrypt()
login_manager = LoginManager()
migrate = Migrate()
allowed_origins = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
    "http://localhost:5174",
    "http://127.0.0.1:5174",
]

def create_app(config_class=Config, course_client=None):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    flask_app.logger.setLevel(flask_app.config.get('LOG_LEVEL', 'INFO'))

    db.init_app(flask_app)
    bcrypt.init_app(flask_app)
    login_manager.init_app(flask_app)
    migrate.init_app(flask_app, db)
    CORS(flask_app, supports_credentials=True, origins=allowed_origins)

    # Services get explicit settings and collaborators; they never read app.config
    from golfskins.services.courses import CourseClient
    from golfskins.services.matches import MatchService, MatchSettings
    settings = MatchSettings.from_config(flask_app.config)
    if course_client is None:
        course_client = CourseClient.from_config(flask_app.config)
    flask_app.extensions['match_service'] = MatchService(settings, course_client)

    # Import and register blueprints here
    from golfskins.main import main
    flask_app.register_blueprint(main)

    from golfskins.api.matches import matches
    flask_app.register_blueprint(matches, url_prefix='/api/matches')

    from golfskins.api.courses import courses
    flask_app.register_blueprint(courses, url_prefix='/api/courses')

    from golfskins.errors import MatchError

    @flask_app.errorhandler(MatchError)
    def handle_match_error(error):
        if error.status_code >= 500:
            flask_app.logger.error(f"[error] {error.kind}: {error.message}")
        return jsonify(error.to_dict()), error.status_code

    # Flask-Login user loader
    from golfskins.models import User

    @login_manager.user_loader
    def load_user(user_id):
        return db.session.get(User, int(user_id))

    @login_manager.unauthorized_handler
    def unauthorized():
        return jsonify({'error': 'Authentication required', 'kind': 'unauthenticated'}), 401

    @click.command('db-reset')
    def db_reset_command():
        """Drops, recreates, and seeds the database."""
        with flask_app.app_context():
            db.drop_all()
            db.create_all()

            # Seed users
            users = [('testuser1', 'Test User 1'), ('testuser2', 'Test User 2'), ('testuser3', 'Test User 3')]
            for username, name in users:
                user = User(username=username, name=name)
                user.set_password('password')
                db.session.add(user)

            db.session.commit()
            print('Database has been reset and seeded!')

    flask_app.cli.add_command(db_reset_command)

    return flask_app
