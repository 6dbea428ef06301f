"""create logs table

Revision ID: a1c2e3f4b501
Revises:
Create Date: 2026-10-19 10:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


revision: str = 'a1c2e3f4b501'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'logs',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('level', sa.String(50), nullable=False, comment='error/warn/info/debug'),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('resource_id', sa.String(255), nullable=True),
        sa.Column('timestamp', sa.DateTime(), nullable=False, comment='イベント発生日時 (UTC)'),
        sa.Column('trace_id', sa.String(255), nullable=True),
        sa.Column('span_id', sa.String(255), nullable=True),
        sa.Column('commit', sa.String(255), nullable=True),
        sa.Column('metadata', sa.JSON(), nullable=True, comment='任意のJSONオブジェクト'),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )

    # 検索条件用インデックス
    op.create_index('ix_logs_timestamp', 'logs', ['timestamp'])
    op.create_index('ix_logs_level', 'logs', ['level'])
    op.create_index('ix_logs_resource_id', 'logs', ['resource_id'])
    op.create_index('ix_logs_trace_id', 'logs', ['trace_id'])
    op.create_index('ix_logs_commit', 'logs', ['commit'])


def downgrade() -> None:
    op.drop_index('ix_logs_commit', table_name='logs')
    op.drop_index('ix_logs_trace_id', table_name='logs')
    op.drop_index('ix_logs_resource_id', table_name='logs')
    op.drop_index('ix_logs_level', table_name='logs')
    op.drop_index('ix_logs_timestamp', table_name='logs')
    op.drop_table('logs')
