"""add_rls_policies

Revision ID: 8c52f0a6d9e1
Revises: 4b1d7e93c2a0
Create Date: 2026-01-28 10:40:02.775419

"""

from collections.abc import Sequence

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "8c52f0a6d9e1"
down_revision: str | Sequence[str] | None = "4b1d7e93c2a0"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

OWNED_TABLES = ["businesses", "todos"]


def upgrade() -> None:
    """Add Row Level Security policies scoping every row to its owning user.

    Note: The FastAPI backend connects with a service account that bypasses RLS
    and scopes queries itself. These policies apply to direct Supabase client
    connections.
    """
    for table in [*OWNED_TABLES, "impact_sub_areas", "task_file_mappings"]:
        op.execute(f"ALTER TABLE {table} ENABLE ROW LEVEL SECURITY;")

    # --- Tables carrying user_id ---
    for table in OWNED_TABLES:
        op.execute(f"""
            CREATE POLICY {table}_owner_all ON {table}
                FOR ALL
                USING (user_id = (SELECT auth.uid()))
                WITH CHECK (user_id = (SELECT auth.uid()));
        """)

    # --- Sub-areas: owned through their business ---
    op.execute("""
        CREATE POLICY impact_sub_areas_owner_all ON impact_sub_areas
            FOR ALL
            USING (
                business_id IN (
                    SELECT id FROM businesses WHERE user_id = (SELECT auth.uid())
                )
            )
            WITH CHECK (
                business_id IN (
                    SELECT id FROM businesses WHERE user_id = (SELECT auth.uid())
                )
            );
    """)

    # --- File mappings: owned through their task ---
    op.execute("""
        CREATE POLICY task_file_mappings_owner_all ON task_file_mappings
            FOR ALL
            USING (
                task_id IN (
                    SELECT id FROM todos WHERE user_id = (SELECT auth.uid())
                )
            )
            WITH CHECK (
                task_id IN (
                    SELECT id FROM todos WHERE user_id = (SELECT auth.uid())
                )
            );
    """)


def downgrade() -> None:
    """Remove RLS policies and disable RLS."""
    op.execute("DROP POLICY IF EXISTS task_file_mappings_owner_all ON task_file_mappings;")
    op.execute("DROP POLICY IF EXISTS impact_sub_areas_owner_all ON impact_sub_areas;")
    for table in OWNED_TABLES:
        op.execute(f"DROP POLICY IF EXISTS {table}_owner_all ON {table};")

    for table in [*OWNED_TABLES, "impact_sub_areas", "task_file_mappings"]:
        op.execute(f"ALTER TABLE {table} DISABLE ROW LEVEL SECURITY;")
