"""initial_rbac_schema

Revision ID: 3f2a9c1d7b40
Revises:
Create Date: 2026-10-19 09:12:41.208317

"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "3f2a9c1d7b40"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
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
    ]


def upgrade() -> None:
    """Upgrade schema - tenants, users, space-bound roles, permission catalog, links, audit log."""

    op.create_table(
        "tenant",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("code", sa.String(), nullable=False),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("status", sa.String(), nullable=False, server_default="active"),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint(
            "status IN ('active', 'suspended', 'archived')", name="tenant_status_check"
        ),
    )
    op.create_index("ix_tenant_code", "tenant", ["code"], unique=True)
    op.create_index("ix_tenant_status", "tenant", ["status"])

    op.create_table(
        "app_user",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("tenant_id", sa.String(), nullable=True),
        sa.Column("email", sa.String(), nullable=False),
        sa.Column("status", sa.String(), nullable=False, server_default="active"),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["tenant_id"], ["tenant.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("tenant_id", "email", name="uq_app_user_tenant_email"),
        sa.CheckConstraint(
            "status IN ('active', 'suspended', 'deleted')", name="app_user_status_check"
        ),
    )
    op.create_index("ix_app_user_tenant_id", "app_user", ["tenant_id"])

    # Role: space decides tenant nullness
    op.create_table(
        "role",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("tenant_id", sa.String(), nullable=True),
        sa.Column("name", sa.String(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("space", sa.String(), nullable=False),
        sa.Column("status", sa.String(), nullable=False, server_default="active"),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["tenant_id"], ["tenant.id"], ondelete="CASCADE"),
        sa.CheckConstraint(
            "(space = 'system' AND tenant_id IS NULL) OR "
            "(space = 'tenant' AND tenant_id IS NOT NULL)",
            name="role_space_tenant_check",
        ),
        sa.CheckConstraint("space IN ('system', 'tenant')", name="role_space_check"),
        sa.CheckConstraint("status IN ('active', 'inactive')", name="role_status_check"),
    )
    op.create_index("ix_role_tenant_id", "role", ["tenant_id"])
    op.create_index(
        "uq_role_tenant_name",
        "role",
        ["tenant_id", "name"],
        unique=True,
        postgresql_where=sa.text("tenant_id IS NOT NULL"),
    )
    op.create_index(
        "uq_role_system_name",
        "role",
        ["name"],
        unique=True,
        postgresql_where=sa.text("tenant_id IS NULL"),
    )

    op.create_table(
        "permission",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("permission_key", sa.String(), nullable=False),
        sa.Column("resource", sa.String(), nullable=False),
        sa.Column("action", sa.String(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("space", sa.String(), nullable=False),
        sa.Column("menu_key", sa.String(), nullable=True),
        sa.Column("status", sa.String(), nullable=False, server_default="active"),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("permission_key", name="permission_permission_key_key"),
        sa.CheckConstraint(
            "space IN ('system', 'tenant')", name="permission_space_check"
        ),
        sa.CheckConstraint(
            "status IN ('active', 'inactive')", name="permission_status_check"
        ),
        sa.CheckConstraint(
            "permission_key = resource || ':' || action",
            name="permission_key_format_check",
        ),
    )
    op.create_index("ix_permission_space", "permission", ["space"])
    op.create_index(
        "ix_permission_resource_action", "permission", ["resource", "action"]
    )

    op.create_table(
        "module",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("menu_key", sa.String(), nullable=False),
        sa.Column("display_name", sa.String(), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("icon", sa.String(), nullable=True),
        sa.Column("route_path", sa.String(), nullable=True),
        sa.Column("parent_menu_key", sa.String(), nullable=True),
        sa.Column("menu_order", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("space", sa.String(), nullable=False),
        sa.Column(
            "action_keys",
            sa.JSON(),
            nullable=False,
            server_default=sa.text("'[\"view\"]'"),
        ),
        sa.Column("status", sa.String(), nullable=False, server_default="active"),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("menu_key", name="module_menu_key_key"),
        sa.CheckConstraint("space IN ('system', 'tenant')", name="module_space_check"),
        sa.CheckConstraint(
            "status IN ('active', 'inactive')", name="module_status_check"
        ),
    )
    op.create_index("ix_module_space", "module", ["space"])

    op.create_table(
        "role_permission",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("role_id", sa.String(), nullable=False),
        sa.Column("permission_id", sa.String(), nullable=False),
        sa.Column("status", sa.String(), nullable=False, server_default="active"),
        sa.Column("constraints", sa.JSON(), nullable=True),
        sa.Column("granted_by", sa.String(), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["role_id"], ["role.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(
            ["permission_id"], ["permission.id"], ondelete="CASCADE"
        ),
        sa.UniqueConstraint("role_id", "permission_id", name="uq_role_permission"),
        sa.CheckConstraint(
            "status IN ('active', 'inactive')", name="role_permission_status_check"
        ),
    )
    op.create_index("ix_role_permission_role", "role_permission", ["role_id"])

    op.create_table(
        "user_role",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("user_id", sa.String(), nullable=False),
        sa.Column("role_id", sa.String(), nullable=False),
        sa.Column("assigned_by", sa.String(), nullable=True),
        sa.Column(
            "assigned_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=True),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["user_id"], ["app_user.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["role_id"], ["role.id"], ondelete="CASCADE"),
        sa.UniqueConstraint("user_id", "role_id", name="uq_user_role"),
    )
    op.create_index("ix_user_role_user", "user_role", ["user_id"])

    op.create_table(
        "permission_delegation",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("tenant_id", sa.String(), nullable=True),
        sa.Column("delegated_by", sa.String(), nullable=False),
        sa.Column("delegated_to", sa.String(), nullable=False),
        sa.Column("role_id", sa.String(), nullable=False),
        sa.Column("reason", sa.Text(), nullable=True),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("revoked_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("revoked_by", sa.String(), nullable=True),
        sa.Column("status", sa.String(), nullable=False, server_default="active"),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["tenant_id"], ["tenant.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(
            ["delegated_by"], ["app_user.id"], ondelete="CASCADE"
        ),
        sa.ForeignKeyConstraint(
            ["delegated_to"], ["app_user.id"], ondelete="CASCADE"
        ),
        sa.ForeignKeyConstraint(["role_id"], ["role.id"], ondelete="CASCADE"),
        sa.CheckConstraint(
            "status IN ('active', 'revoked')", name="delegation_status_check"
        ),
    )
    op.create_index(
        "ix_permission_delegation_to",
        "permission_delegation",
        ["delegated_to", "status"],
    )

    op.create_table(
        "audit_log",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("tenant_id", sa.String(), nullable=True),
        sa.Column("actor_id", sa.String(), nullable=True),
        sa.Column("action", sa.String(), nullable=False),
        sa.Column("entity_type", sa.String(), nullable=False),
        sa.Column("entity_id", sa.String(), nullable=False),
        sa.Column("details", postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_audit_log_tenant_id", "audit_log", ["tenant_id"])
    op.create_index("ix_audit_log_actor_id", "audit_log", ["actor_id"])

    # Storage-level guard: a link may only join a role and permission of the same space
    op.execute(
        """
        CREATE OR REPLACE FUNCTION validate_permission_space()
        RETURNS TRIGGER AS $$
        DECLARE
            role_space TEXT;
            permission_space TEXT;
        BEGIN
            SELECT space INTO role_space FROM role WHERE id = NEW.role_id;
            SELECT space INTO permission_space FROM permission WHERE id = NEW.permission_id;
            IF role_space IS DISTINCT FROM permission_space THEN
                RAISE EXCEPTION 'Cannot link % permission to % role',
                    permission_space, role_space
                    USING ERRCODE = 'check_violation';
            END IF;
            RETURN NEW;
        END;
        $$ LANGUAGE plpgsql;
        """
    )
    op.execute(
        """
        CREATE TRIGGER role_permission_space_check
        BEFORE INSERT OR UPDATE ON role_permission
        FOR EACH ROW EXECUTE FUNCTION validate_permission_space();
        """
    )

    # Audit log is append-only
    op.execute(
        """
        CREATE OR REPLACE FUNCTION prevent_audit_log_modification()
        RETURNS TRIGGER AS $$
        BEGIN
            RAISE EXCEPTION 'audit_log is append-only';
        END;
        $$ LANGUAGE plpgsql;
        """
    )
    op.execute(
        """
        CREATE TRIGGER audit_log_immutable
        BEFORE UPDATE OR DELETE ON audit_log
        FOR EACH ROW EXECUTE FUNCTION prevent_audit_log_modification();
        """
    )


def downgrade() -> None:
    """Downgrade schema - drop triggers, functions and every RBAC table."""
    op.execute("DROP TRIGGER IF EXISTS audit_log_immutable ON audit_log")
    op.execute("DROP FUNCTION IF EXISTS prevent_audit_log_modification()")
    op.execute("DROP TRIGGER IF EXISTS role_permission_space_check ON role_permission")
    op.execute("DROP FUNCTION IF EXISTS validate_permission_space()")

    op.drop_index("ix_audit_log_actor_id", table_name="audit_log")
    op.drop_index("ix_audit_log_tenant_id", table_name="audit_log")
    op.drop_table("audit_log")
    op.drop_index("ix_permission_delegation_to", table_name="permission_delegation")
    op.drop_table("permission_delegation")
    op.drop_index("ix_user_role_user", table_name="user_role")
    op.drop_table("user_role")
    op.drop_index("ix_role_permission_role", table_name="role_permission")
    op.drop_table("role_permission")
    op.drop_index("ix_module_space", table_name="module")
    op.drop_table("module")
    op.drop_index("ix_permission_resource_action", table_name="permission")
    op.drop_index("ix_permission_space", table_name="permission")
    op.drop_table("permission")
    op.drop_index("uq_role_system_name", table_name="role")
    op.drop_index("uq_role_tenant_name", table_name="role")
    op.drop_index("ix_role_tenant_id", table_name="role")
    op.drop_table("role")
    op.drop_index("ix_app_user_tenant_id", table_name="app_user")
    op.drop_table("app_user")
    op.drop_index("ix_tenant_status", table_name="tenant")
    op.drop_index("ix_tenant_code", table_name="tenant")
    op.drop_table("tenant")
