"""initial wager schema: bank, players, game state and submission ledger

Revision ID: 5c0a7e21b9d4
Revises:
Create Date: 2026-10-19 00:00:00

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '5c0a7e21b9d4'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'category',
        sa.Column('id', sa.String(length=32), primary_key=True),
        sa.Column('name', sa.String(length=128), nullable=False),
        sa.Column('option1', sa.String(length=128), nullable=False),
        sa.Column('option2', sa.String(length=128), nullable=False),
    )
    op.create_table(
        'question',
        sa.Column('id', sa.String(length=32), primary_key=True),
        sa.Column('term', sa.String(length=256), nullable=False),
        sa.Column('correct_answer', sa.String(length=128), nullable=False),
        sa.Column('category_id', sa.String(length=32), nullable=False),
        sa.Column('category_name', sa.String(length=128), nullable=True),
    )
    op.create_index('ix_question_category_id', 'question', ['category_id'])
    op.create_table(
        'player',
        sa.Column('id', sa.String(length=64), primary_key=True),
        sa.Column('name', sa.String(length=64), nullable=False),
        sa.Column('score', sa.Integer(), nullable=False, server_default='0'),
    )
    op.create_table(
        'game_state',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('game_key', sa.String(length=32), nullable=False),
        sa.Column('host_id', sa.String(length=64), nullable=True),
        sa.Column('round', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('status', sa.String(length=32), nullable=False),
        sa.Column('playlist', sa.Text(), nullable=True),
        sa.Column('playlist_length', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('current_category', sa.Text(), nullable=True),
        sa.Column('current_question', sa.Text(), nullable=True),
        sa.Column('results', sa.Text(), nullable=True),
        sa.Column('revealed_question', sa.Text(), nullable=True),
        sa.Column('version', sa.Integer(), nullable=False),
    )
    op.create_table(
        'submission',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('game_key', sa.String(length=32), nullable=False),
        sa.Column('round', sa.Integer(), nullable=False),
        sa.Column('player_id', sa.String(length=64), nullable=False),
        sa.Column('player_name', sa.String(length=64), nullable=True),
        sa.Column('guess', sa.String(length=128), nullable=False),
        sa.Column('wager', sa.Integer(), nullable=False),
        sa.UniqueConstraint('game_key', 'round', 'player_id', name='uq_submission_round_player'),
    )
    op.create_index('ix_submission_game_key', 'submission', ['game_key'])


def downgrade():
    op.drop_index('ix_submission_game_key', table_name='submission')
    op.drop_table('submission')
    op.drop_table('game_state')
    op.drop_table('player')
    op.drop_index('ix_question_category_id', table_name='question')
    op.drop_table('question')
    op.drop_table('category')
