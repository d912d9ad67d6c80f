"""create user, match, match_player, hole and hole_score tables

Revision ID: 5a1c7e2d9b40
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '5a1c7e2d9b40'
down_revision = None
branch_labels = None
depends_on = None

LIVE_STATUSES = "status IN ('created', 'active')"


def upgrade():
    bind = op.get_bind()
    insp = sa.inspect(bind)
    existing_tables = set(insp.get_table_names())

    if 'user' not in existing_tables:
        op.create_table(
            'user',
            sa.Column('id', sa.Integer(), primary_key=True),
            sa.Column('username', sa.String(length=64), nullable=False),
            sa.Column('password_hash', sa.String(length=256), nullable=False),
            sa.Column('name', sa.String(length=128), nullable=True),
            sa.Column('avatar_url', sa.String(length=512), nullable=True),
            sa.Column('handicap', sa.Float(), nullable=True),
        )
        op.create_index('ix_user_username', 'user', ['username'], unique=True)
    else:
        # Older databases only carried username/password
        user_cols = {c['name'] for c in insp.get_columns('user')}
        for name, column in (
            ('name', sa.Column('name', sa.String(length=128), nullable=True)),
            ('avatar_url', sa.Column('avatar_url', sa.String(length=512), nullable=True)),
            ('handicap', sa.Column('handicap', sa.Float(), nullable=True)),
        ):
            if name not in user_cols:
                op.add_column('user', column)

    op.create_table(
        'match',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('host_id', sa.Integer(), sa.ForeignKey('user.id'), nullable=False),
        sa.Column('course_name', sa.String(length=256), nullable=False),
        sa.Column('location', sa.String(length=256), nullable=True),
        sa.Column('course_id', sa.String(length=64), nullable=True),
        sa.Column('tee_id', sa.String(length=64), nullable=True),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('time', sa.Time(), nullable=False),
        sa.Column('max_players', sa.Integer(), nullable=False),
        sa.Column('entry_fee', sa.Numeric(10, 2), nullable=False),
        sa.Column('game_type', sa.String(length=16), nullable=False),
        sa.Column('rules', sa.Text(), nullable=True),
        sa.Column('status', sa.String(length=16), nullable=False),
        sa.Column('join_code', sa.String(length=6), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_match_host_id', 'match', ['host_id'])
    op.create_index('ix_match_date', 'match', ['date'])
    op.create_index('ix_match_status', 'match', ['status'])
    op.create_index(
        'uq_match_live_join_code', 'match', ['join_code'], unique=True,
        postgresql_where=sa.text(LIVE_STATUSES),
        sqlite_where=sa.text(LIVE_STATUSES),
    )

    op.create_table(
        'match_player',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('match_id', sa.Integer(), sa.ForeignKey('match.id'), nullable=False),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('user.id'), nullable=False),
        sa.Column('status', sa.String(length=16), nullable=False),
        sa.Column('entry_fee_paid', sa.Boolean(), nullable=False),
        sa.Column('joined_at', sa.DateTime(), nullable=False),
        sa.UniqueConstraint('match_id', 'user_id', name='uq_match_player_match_user'),
    )
    op.create_index('ix_match_player_match_id', 'match_player', ['match_id'])
    op.create_index('ix_match_player_user_id', 'match_player', ['user_id'])

    op.create_table(
        'hole',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('match_id', sa.Integer(), sa.ForeignKey('match.id'), nullable=False),
        sa.Column('hole_number', sa.Integer(), nullable=False),
        sa.Column('par', sa.Integer(), nullable=False),
        sa.Column('stroke_index', sa.Integer(), nullable=True),
        sa.Column('distance', sa.Integer(), nullable=True),
        sa.Column('skin_value', sa.Numeric(10, 2), nullable=False),
        sa.Column('carryover_from_previous', sa.Boolean(), nullable=False),
        sa.Column('completed', sa.Boolean(), nullable=False),
        sa.UniqueConstraint('match_id', 'hole_number', name='uq_hole_match_number'),
    )
    op.create_index('ix_hole_match_id', 'hole', ['match_id'])

    op.create_table(
        'hole_score',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('hole_id', sa.Integer(), sa.ForeignKey('hole.id'), nullable=False),
        sa.Column('user_id', sa.Integer(), sa.ForeignKey('user.id'), nullable=False),
        sa.Column('score', sa.Integer(), nullable=False),
        sa.Column('is_skin_winner', sa.Boolean(), nullable=False),
        sa.Column('recorded_at', sa.DateTime(), nullable=False),
        sa.UniqueConstraint('hole_id', 'user_id', name='uq_hole_score_hole_user'),
    )
    op.create_index('ix_hole_score_hole_id', 'hole_score', ['hole_id'])
    op.create_index('ix_hole_score_user_id', 'hole_score', ['user_id'])


def downgrade():
    op.drop_table('hole_score')
    op.drop_table('hole')
    op.drop_table('match_player')
    op.drop_index('uq_match_live_join_code', table_name='match')
    op.drop_table('match')
