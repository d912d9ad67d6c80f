from datetime import datetime, timezone
import json

from flask_login import UserMixin

from golfskins import db, bcrypt


def utcnow():
    return datetime.now(timezone.utc)


def _isoformat(value):
    return value.isoformat() if value is not None else None


class MatchStatus:
    CREATED = 'created'
    ACTIVE = 'active'
    COMPLETED = 'completed'
    CANCELLED = 'cancelled'

    ALL = (CREATED, ACTIVE, COMPLETED, CANCELLED)
    LIVE = (CREATED, ACTIVE)
    TERMINAL = (COMPLETED, CANCELLED)


class PlayerStatus:
    JOINED = 'joined'
    LEFT = 'left'
    REMOVED = 'removed'


class GameType:
    STANDARD = 'standard'
    NASSAU = 'nassau'
    WOLF = 'wolf'
    VEGAS = 'vegas'

    ALL = (STANDARD, NASSAU, WOLF, VEGAS)


class User(UserMixin, db.Model):
    __tablename__ = 'user'
    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(64), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(256), nullable=False)
    name = db.Column(db.String(128), nullable=True)
    avatar_url = db.Column(db.String(512), nullable=True)
    handicap = db.Column(db.Float, nullable=True)

    def set_password(self, password):
        self.password_hash = bcrypt.generate_password_hash(password).decode('utf-8')

    def check_password(self, password):
        return bcrypt.check_password_hash(self.password_hash, password)

    @property
    def display_name(self):
        return self.name or self.username

    def to_dict(self):
        return {
            'id': self.id,
            'username': self.username,
            'name': self.display_name,
            'avatar_url': self.avatar_url,
            'handicap': self.handicap,
        }


class Match(db.Model):
    __tablename__ = 'match'
    __table_args__ = (
        # Join codes only need to be unique among matches still in play
        db.Index(
            'uq_match_live_join_code', 'join_code', unique=True,
            postgresql_where=db.text("status IN ('created', 'active')"),
            sqlite_where=db.text("status IN ('created', 'active')"),
        ),
    )

    id = db.Column(db.Integer, primary_key=True)
    host_id = db.Column(db.Integer, db.ForeignKey('user.id'), nullable=False, index=True)
    course_name = db.Column(db.String(256), nullable=False)
    location = db.Column(db.String(256), nullable=True)
    course_id = db.Column(db.String(64), nullable=True)
    tee_id = db.Column(db.String(64), nullable=True)
    date = db.Column(db.Date, nullable=False, index=True)
    time = db.Column(db.Time, nullable=False)
    max_players = db.Column(db.Integer, nullable=False)
    entry_fee = db.Column(db.Numeric(10, 2), nullable=False, default=0)
    game_type = db.Column(db.String(16), nullable=False, default=GameType.STANDARD)
    rules = db.Column(db.Text, nullable=True)  # JSON-encoded dict
    status = db.Column(db.String(16), nullable=False, default=MatchStatus.CREATED, index=True)
    join_code = db.Column(db.String(6), nullable=False)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    host = db.relationship('User', foreign_keys=[host_id])
    players = db.relationship('MatchPlayer', back_populates='match', order_by='MatchPlayer.id')
    holes = db.relationship('Hole', back_populates='match', order_by='Hole.hole_number')

    @property
    def rules_dict(self):
        try:
            return json.loads(self.rules) if self.rules else {}
        except ValueError:
            return {}

    @property
    def is_terminal(self):
        return self.status in MatchStatus.TERMINAL

    def to_dict(self):
        return {
            'id': self.id,
            'host_id': self.host_id,
            'host_name': self.host.display_name if self.host else 'Unknown',
            'course_id': self.course_id,
            'tee_id': self.tee_id,
            'course_name': self.course_name,
            'location': self.location,
            'date': self.date.isoformat() if self.date else None,
            'time': self.time.strftime('%H:%M') if self.time else None,
            'max_players': self.max_players,
            'entry_fee': float(self.entry_fee or 0),
            'game_type': self.game_type,
            'rules': self.rules_dict,
            'status': self.status,
            'join_code': self.join_code,
            'created_at': _isoformat(self.created_at),
            'updated_at': _isoformat(self.updated_at),
        }


class MatchPlayer(db.Model):
    __tablename__ = 'match_player'
    __table_args__ = (
        db.UniqueConstraint('match_id', 'user_id', name='uq_match_player_match_user'),
    )

    id = db.Column(db.Integer, primary_key=True)
    match_id = db.Column(db.Integer, db.ForeignKey('match.id'), nullable=False, index=True)
    user_id = db.Column(db.Integer, db.ForeignKey('user.id'), nullable=False, index=True)
    status = db.Column(db.String(16), nullable=False, default=PlayerStatus.JOINED)
    entry_fee_paid = db.Column(db.Boolean, nullable=False, default=False)
    joined_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    match = db.relationship('Match', back_populates='players')
    user = db.relationship('User')

    def to_dict(self):
        user = self.user
        return {
            'id': self.id,
            'user_id': self.user_id,
            'name': user.display_name if user else 'Unknown',
            'avatar_url': user.avatar_url if user else None,
            'handicap': user.handicap if user else None,
            'status': self.status,
            'entry_fee_paid': self.entry_fee_paid,
            'joined_at': _isoformat(self.joined_at),
        }


class Hole(db.Model):
    __tablename__ = 'hole'
    __table_args__ = (
        db.UniqueConstraint('match_id', 'hole_number', name='uq_hole_match_number'),
    )

    id = db.Column(db.Integer, primary_key=True)
    match_id = db.Column(db.Integer, db.ForeignKey('match.id'), nullable=False, index=True)
    hole_number = db.Column(db.Integer, nullable=False)
    par = db.Column(db.Integer, nullable=False)
    stroke_index = db.Column(db.Integer, nullable=True)
    distance = db.Column(db.Integer, nullable=True)
    skin_value = db.Column(db.Numeric(10, 2), nullable=False, default=0)
    carryover_from_previous = db.Column(db.Boolean, nullable=False, default=False)
    completed = db.Column(db.Boolean, nullable=False, default=False)

    match = db.relationship('Match', back_populates='holes')
    scores = db.relationship('HoleScore', back_populates='hole', order_by='HoleScore.id')

    def to_dict(self):
        return {
            'id': self.id,
            'hole_number': self.hole_number,
            'par': self.par,
            'stroke_index': self.stroke_index,
            'distance': self.distance,
            'skin_value': float(self.skin_value or 0),
            'carryover_from_previous': self.carryover_from_previous,
            'completed': self.completed,
        }


class HoleScore(db.Model):
    __tablename__ = 'hole_score'
    __table_args__ = (
        db.UniqueConstraint('hole_id', 'user_id', name='uq_hole_score_hole_user'),
    )

    id = db.Column(db.Integer, primary_key=True)
    hole_id = db.Column(db.Integer, db.ForeignKey('hole.id'), nullable=False, index=True)
    user_id = db.Column(db.Integer, db.ForeignKey('user.id'), nullable=False, index=True)
    score = db.Column(db.Integer, nullable=False)
    is_skin_winner = db.Column(db.Boolean, nullable=False, default=False)
    recorded_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    hole = db.relationship('Hole', back_populates='scores')
    user = db.relationship('User')

    def to_dict(self):
        return {
            'id': self.id,
            'hole_id': self.hole_id,
            'user_id': self.user_id,
            'user_name': self.user.display_name if self.user else 'Unknown',
            'score': self.score,
            'is_skin_winner': self.is_skin_winner,
            'recorded_at': _isoformat(self.recorded_at),
        }
