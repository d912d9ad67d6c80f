import os
import sys
import pytest

# Ensure the backend root (containing the `golfskins` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from golfskins import create_app, db
from golfskins.errors import UpstreamUnavailable


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    WTF_CSRF_ENABLED = False
    LOG_LEVEL = 'DEBUG'
    JOIN_CODE_ATTEMPTS = 5
    SKINS_RESOLUTION = 'all_players'
    MATCH_LIST_DEFAULT_LIMIT = 10
    MATCH_LIST_MAX_LIMIT = 50
    BCRYPT_LOG_ROUNDS = 4


class ProvisionalConfig(TestConfig):
    SKINS_RESOLUTION = 'provisional'


def make_course(course_id='course-1'):
    return {
        'courseID': course_id,
        'courseName': 'Pebble Beach',
        'clubName': 'Pebble Beach Golf Links',
        'city': 'Pebble Beach',
        'state': 'CA',
        'parsMen': [4, 5, 4, 4, 3, 5, 3, 4, 4, 4, 4, 3, 4, 5, 4, 4, 3, 5],
        'indexesMen': [6, 10, 12, 16, 14, 2, 18, 4, 8, 3, 5, 17, 7, 11, 13, 9, 15, 1],
        'tees': [
            dict(
                {'teeID': 'tee-blue', 'teeName': 'Blue', 'courseRatingMen': 74.9, 'slopeMen': 144},
                **{f'length{n}': 300 + n * 10 for n in range(1, 19)}
            ),
        ],
    }


class FakeCourseClient:
    """Stands in for the course catalog; flip ``available`` to simulate an outage."""

    def __init__(self):
        self.available = True
        self.courses = {'course-1': make_course('course-1')}
        self.clubs = {'club-1': {'clubID': 'club-1', 'clubName': 'Pebble Beach Golf Links', 'numberOfCourses': 1}}
        self.calls = []

    def get_course(self, course_id):
        self.calls.append(course_id)
        if not self.available:
            raise UpstreamUnavailable(f'Failed to fetch course {course_id}')
        if course_id not in self.courses:
            raise UpstreamUnavailable(f'Failed to fetch course {course_id}')
        return self.courses[course_id]

    def get_club(self, club_id):
        self.calls.append(club_id)
        if not self.available or club_id not in self.clubs:
            raise UpstreamUnavailable(f'Failed to fetch club {club_id}')
        return self.clubs[club_id]


@pytest.fixture()
def course_client():
    return FakeCourseClient()


@pytest.fixture()
def app_config():
    return TestConfig


@pytest.fixture()
def flask_app(app_config, course_client):
    application = create_app(app_config, course_client=course_client)
    # No context stays pushed during the test, so each request gets its own `g`
    with application.app_context():
        # Ensure models are imported so tables are created
        import golfskins.models  # noqa: F401
        db.create_all()
    yield application
    with application.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def app_ctx(flask_app):
    """An app context for tests that talk to the store directly."""
    with flask_app.app_context():
        yield flask_app
        db.session.remove()


@pytest.fixture()
def make_user(flask_app):
    from golfskins.models import User

    def _make(username, name=None, handicap=None):
        with flask_app.app_context():
            user = User(username=username, name=name or username.title(), handicap=handicap)
            user.set_password('password')
            db.session.add(user)
            db.session.commit()
            return user.id

    return _make


@pytest.fixture()
def login(flask_app, make_user):
    """Create a user and return a test client logged in as them."""

    def _login(username, **kwargs):
        user_id = make_user(username, **kwargs)
        client = flask_app.test_client()
        res = client.post('/login', json={'username': username, 'password': 'password'})
        assert res.status_code == 200
        client.user_id = user_id
        return client

    return _login


@pytest.fixture()
def host(login):
    return login('host')


@pytest.fixture()
def match_payload():
    def _payload(**overrides):
        payload = {
            'course_name': 'Pebble Beach Golf Links',
            'date': '2026-07-20',
            'time': '14:00',
            'max_players': 4,
            'entry_fee': 10,
            'game_type': 'standard',
            'rules': {'skins': True, 'carryover': True},
        }
        payload.update(overrides)
        return payload

    return _payload


@pytest.fixture()
def create_match(host, match_payload):
    def _create(client=None, **overrides):
        res = (client or host).post('/api/matches', json=match_payload(**overrides))
        assert res.status_code == 201, res.get_json()
        return res.get_json()

    return _create
