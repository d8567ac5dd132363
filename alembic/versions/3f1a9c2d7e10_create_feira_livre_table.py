"""create_feira_livre_table

Revision ID: 3f1a9c2d7e10
Revises:
Create Date: 2026-10-19 10:00:00.000000

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "3f1a9c2d7e10"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Apply migration - create the feira_livre table."""
    op.create_table(
        "feira_livre",
        # Serial key; imports insert explicit ids and then realign the sequence
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        # Location
        sa.Column("longitude", sa.Float(), nullable=False),
        sa.Column("latitude", sa.Float(), nullable=False),
        # Administrative areas
        sa.Column("setor_censitario", sa.BigInteger(), nullable=False),
        sa.Column("area_ponderacao", sa.BigInteger(), nullable=False),
        sa.Column("codigo_distrito", sa.Integer(), nullable=False),
        sa.Column("distrito", sa.String(length=100), nullable=False),
        sa.Column("codigo_subprefeitura", sa.Integer(), nullable=False),
        sa.Column("subprefeitura", sa.String(length=100), nullable=False),
        sa.Column("regiao5", sa.String(length=20), nullable=False),
        sa.Column("regiao8", sa.String(length=20), nullable=False),
        # Market and address
        sa.Column("nome_feira", sa.String(length=100), nullable=False),
        sa.Column("registro", sa.String(length=20), nullable=False),
        sa.Column("logradouro", sa.String(length=200), nullable=False),
        sa.Column("numero", sa.String(length=20), nullable=False),
        sa.Column("bairro", sa.String(length=100), nullable=False),
        sa.Column("referencia", sa.String(length=200), nullable=False),
        # Timestamps
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_index("ix_feira_livre_distrito", "feira_livre", ["distrito"])
    op.create_index("ix_feira_livre_regiao5", "feira_livre", ["regiao5"])
    op.create_index("ix_feira_livre_bairro", "feira_livre", ["bairro"])


def downgrade() -> None:
    """Revert migration - drop the feira_livre table."""
    op.drop_index("ix_feira_livre_bairro", table_name="feira_livre")
    op.drop_index("ix_feira_livre_regiao5", table_name="feira_livre")
    op.drop_index("ix_feira_livre_distrito", table_name="feira_livre")
    op.drop_table("feira_livre")
