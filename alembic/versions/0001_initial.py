"""Create the persons table."""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "0001_initial"
down_revision = None
branch_labels: tuple[str, ...] | None = None
depends_on: tuple[str, ...] | None = None


def upgrade() -> None:
    op.create_table(
        "persons",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("surname", sa.Text(), nullable=False),
        sa.Column("patronymic", sa.Text(), nullable=True),
        sa.Column("age", sa.Integer(), nullable=True),
        sa.Column("gender", sa.String(length=16), nullable=True),
        sa.Column("nationality", sa.String(length=2), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint("age IS NULL OR age >= 0", name="ck_persons_age_non_negative"),
        sqlite_autoincrement=True,
    )
    op.create_index("ix_persons_name", "persons", ["name"])
    op.create_index("ix_persons_surname", "persons", ["surname"])


def downgrade() -> None:
    op.drop_index("ix_persons_surname", table_name="persons")
    op.drop_index("ix_persons_name", table_name="persons")
    op.drop_table("persons")
