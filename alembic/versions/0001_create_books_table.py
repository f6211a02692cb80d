from alembic import op
import sqlalchemy as sa


revision = "0001_create_books"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "books",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("author", sa.String(length=255), nullable=False),
        sa.Column("isbn", sa.String(length=20), nullable=False, server_default=""),
        sa.Column("year", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("price", sa.Numeric(10, 2, asdecimal=False), nullable=False, server_default="0"),
        sa.Column("category", sa.String(length=100), nullable=True),
        sa.Column("original_price", sa.Numeric(10, 2, asdecimal=False), nullable=True),
        sa.Column("discount", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("cover_image", sa.String(length=500), nullable=False, server_default=""),
        sa.Column("rating", sa.Float(), nullable=False, server_default="0"),
        sa.Column("reviews_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("is_new", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("pages", sa.Integer(), nullable=True),
        sa.Column("language", sa.String(length=50), nullable=False, server_default=""),
        sa.Column("publisher", sa.String(length=255), nullable=False, server_default=""),
        sa.Column("description", sa.Text(), nullable=False, server_default=""),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_books_id", "books", ["id"], unique=False)
    op.create_index("ix_books_category", "books", ["category"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_books_category", table_name="books")
    op.drop_index("ix_books_id", table_name="books")
    op.drop_table("books")
