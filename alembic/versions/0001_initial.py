"""Initial migration

Revision ID: 0001
Revises: 
Create Date: 2026-10-18 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = '0001'
down_revision = None
branch_labels = None
depends_on = None

ENUM_TYPES = ('tournament_status', 'match_status', 'contest_status', 'disbursement_status')


def upgrade() -> None:
    # Create extensions
    op.execute('CREATE EXTENSION IF NOT EXISTS pgcrypto;')

    # Create tournaments table
    op.create_table('tournaments',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False, server_default=sa.text('gen_random_uuid()')),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('status', postgresql.ENUM('upcoming', 'in_progress', 'completed', 'cancelled', name='tournament_status'), nullable=False, server_default='upcoming'),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), server_default=sa.text('now()')),
        sa.PrimaryKeyConstraint('id')
    )

    # Create matches table
    op.create_table('matches',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False, server_default=sa.text('gen_random_uuid()')),
        sa.Column('tournament_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('player1_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('player2_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('round', sa.String(length=128), nullable=True),
        sa.Column('player1_score', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('player2_score', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('status', postgresql.ENUM('scheduled', 'in_progress', 'completed', 'cancelled', name='match_status'), nullable=False, server_default='scheduled'),
        sa.Column('completed_at', sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), server_default=sa.text('now()')),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['tournament_id'], ['tournaments.id'], ondelete='CASCADE')
    )
    op.create_index('idx_matches_tournament_id', 'matches', ['tournament_id'])

    # Create player_match_points table
    op.create_table('player_match_points',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False, server_default=sa.text('gen_random_uuid()')),
        sa.Column('player_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('match_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('points', sa.Numeric(precision=12, scale=2), nullable=False, server_default='0'),
        sa.Column('breakdown', sa.JSON(), nullable=False),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), server_default=sa.text('now()')),
        sa.Column('updated_at', sa.TIMESTAMP(timezone=True), server_default=sa.text('now()')),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('player_id', 'match_id', name='uq_player_match_points'),
        sa.ForeignKeyConstraint(['match_id'], ['matches.id'], ondelete='CASCADE')
    )

    # Create fantasy_contests table
    op.create_table('fantasy_contests',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False, server_default=sa.text('gen_random_uuid()')),
        sa.Column('tournament_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('entry_fee', sa.Numeric(precision=12, scale=2), nullable=False, server_default='0'),
        sa.Column('prize_pool', sa.Numeric(precision=14, scale=2), nullable=False, server_default='0'),
        sa.Column('max_entries', sa.Integer(), nullable=True),
        sa.Column('current_entries', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('status', postgresql.ENUM('upcoming', 'in_progress', 'completed', 'cancelled', name='contest_status'), nullable=False, server_default='upcoming'),
        sa.Column('is_prizes_distributed', sa.Boolean(), nullable=False, server_default=sa.text('false')),
        sa.Column('is_prizes_processing', sa.Boolean(), nullable=False, server_default=sa.text('false')),
        sa.Column('prizes_distributed_at', sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), server_default=sa.text('now()')),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['tournament_id'], ['tournaments.id'], ondelete='CASCADE')
    )
    op.create_index('idx_fantasy_contests_tournament_id', 'fantasy_contests', ['tournament_id'])

    # Create fantasy_teams table
    op.create_table('fantasy_teams',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False, server_default=sa.text('gen_random_uuid()')),
        sa.Column('contest_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('user_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('total_points', sa.Numeric(precision=14, scale=2), nullable=False, server_default='0'),
        sa.Column('rank', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), server_default=sa.text('now()')),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['contest_id'], ['fantasy_contests.id'], ondelete='CASCADE')
    )
    op.create_index('idx_fantasy_teams_contest_id', 'fantasy_teams', ['contest_id'])

    # Create fantasy_team_players table
    op.create_table('fantasy_team_players',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False, server_default=sa.text('gen_random_uuid()')),
        sa.Column('team_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('player_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('is_captain', sa.Boolean(), nullable=False, server_default=sa.text('false')),
        sa.Column('is_vice_captain', sa.Boolean(), nullable=False, server_default=sa.text('false')),
        sa.Column('raw_points', sa.Numeric(precision=14, scale=2), nullable=False, server_default='0'),
        sa.Column('role_multiplier', sa.Numeric(precision=4, scale=2), nullable=False, server_default='1'),
        sa.Column('contribution', sa.Numeric(precision=14, scale=2), nullable=False, server_default='0'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('team_id', 'player_id', name='uq_team_player'),
        sa.ForeignKeyConstraint(['team_id'], ['fantasy_teams.id'], ondelete='CASCADE')
    )

    # Create prize_distribution_rules table
    op.create_table('prize_distribution_rules',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False, server_default=sa.text('gen_random_uuid()')),
        sa.Column('tournament_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('contest_id', postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column('rank', sa.Integer(), nullable=False),
        sa.Column('percentage', sa.Numeric(precision=5, scale=2), nullable=False),
        sa.Column('min_players', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), server_default=sa.text('now()')),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['tournament_id'], ['tournaments.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['contest_id'], ['fantasy_contests.id'], ondelete='CASCADE')
    )
    op.create_index('idx_prize_rules_scope', 'prize_distribution_rules', ['tournament_id', 'contest_id'])

    # Create prize_disbursements table
    op.create_table('prize_disbursements',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False, server_default=sa.text('gen_random_uuid()')),
        sa.Column('contest_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('fantasy_team_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('user_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('rank', sa.Integer(), nullable=False),
        sa.Column('amount', sa.Numeric(precision=14, scale=2), nullable=False),
        sa.Column('processing_fee', sa.Numeric(precision=14, scale=2), nullable=False),
        sa.Column('net_amount', sa.Numeric(precision=14, scale=2), nullable=False),
        sa.Column('status', postgresql.ENUM('pending', 'processing', 'failed', 'paid', name='disbursement_status'), nullable=False, server_default='pending'),
        sa.Column('transaction_id', sa.String(length=128), nullable=True),
        sa.Column('payment_details', sa.JSON(), nullable=True),
        sa.Column('notes', sa.String(length=512), nullable=True),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), server_default=sa.text('now()')),
        sa.Column('updated_at', sa.TIMESTAMP(timezone=True), server_default=sa.text('now()')),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('contest_id', 'fantasy_team_id', name='uq_disbursement_contest_team'),
        sa.ForeignKeyConstraint(['contest_id'], ['fantasy_contests.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['fantasy_team_id'], ['fantasy_teams.id'], ondelete='CASCADE')
    )
    op.create_index('idx_disbursements_transaction_id', 'prize_disbursements', ['transaction_id'])

    # Create payment_events table
    op.create_table('payment_events',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False, server_default=sa.text('gen_random_uuid()')),
        sa.Column('payment_id', sa.String(length=128), nullable=False),
        sa.Column('amount', sa.Numeric(precision=14, scale=2), nullable=False),
        sa.Column('user_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('tournament_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('contest_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), server_default=sa.text('now()')),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('payment_id')
    )

    # Create bank_accounts table
    op.create_table('bank_accounts',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False, server_default=sa.text('gen_random_uuid()')),
        sa.Column('user_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('account_holder_name', sa.String(length=255), nullable=False),
        sa.Column('account_number', sa.String(length=64), nullable=False),
        sa.Column('ifsc_code', sa.String(length=16), nullable=False),
        sa.Column('fund_account_id', sa.String(length=128), nullable=True),
        sa.Column('is_primary', sa.Boolean(), nullable=False, server_default=sa.text('true')),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), server_default=sa.text('now()')),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('idx_bank_accounts_user_id', 'bank_accounts', ['user_id'])

    # Create audit_logs table
    op.create_table('audit_logs',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False, server_default=sa.text('gen_random_uuid()')),
        sa.Column('actor', sa.String(length=128), nullable=True),
        sa.Column('action', sa.String(length=128), nullable=False),
        sa.Column('resource_type', sa.String(length=64), nullable=True),
        sa.Column('resource_id', postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column('details', sa.JSON(), nullable=True),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), server_default=sa.text('now()')),
        sa.PrimaryKeyConstraint('id')
    )


def downgrade() -> None:
    op.drop_table('audit_logs')
    op.drop_index('idx_bank_accounts_user_id', table_name='bank_accounts')
    op.drop_table('bank_accounts')
    op.drop_table('payment_events')
    op.drop_index('idx_disbursements_transaction_id', table_name='prize_disbursements')
    op.drop_table('prize_disbursements')
    op.drop_index('idx_prize_rules_scope', table_name='prize_distribution_rules')
    op.drop_table('prize_distribution_rules')
    op.drop_table('fantasy_team_players')
    op.drop_index('idx_fantasy_teams_contest_id', table_name='fantasy_teams')
    op.drop_table('fantasy_teams')
    op.drop_index('idx_fantasy_contests_tournament_id', table_name='fantasy_contests')
    op.drop_table('fantasy_contests')
    op.drop_table('player_match_points')
    op.drop_index('idx_matches_tournament_id', table_name='matches')
    op.drop_table('matches')
    op.drop_table('tournaments')

    for enum_name in ENUM_TYPES:
        op.execute(f'DROP TYPE IF EXISTS {enum_name}')
