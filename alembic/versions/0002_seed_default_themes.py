from __future__ import annotations

import sqlalchemy as sa
from alembic import op

revision = "0002_seed_default_themes"
down_revision = "0001_create_schema"
branch_labels = None
depends_on = None

_BASE_FONT = "system-ui, -apple-system, sans-serif"


def _variables(primary: str, secondary: str, background: str, text_body: str) -> dict[str, str]:
    return {
        "--color-primary": primary,
        "--color-secondary": secondary,
        "--color-background": background,
        "--color-text-body": text_body,
        "--font-family-base": _BASE_FONT,
        "--border-radius-base": "0.5rem",
    }


def upgrade() -> None:
    themes = sa.table(
        "themes",
        sa.column("slug", sa.String),
        sa.column("name", sa.String),
        sa.column("description", sa.Text),
        sa.column("category", sa.String),
        sa.column("primary_color", sa.String),
        sa.column("css_variables", sa.JSON),
        sa.column("is_active", sa.Boolean),
        sa.column("is_seasonal", sa.Boolean),
        sa.column("sort_order", sa.Integer),
    )
    op.bulk_insert(
        themes,
        [
            {
                "slug": "light",
                "name": "Light",
                "description": "Default light theme",
                "category": "default",
                "primary_color": "#3B82F6",
                "css_variables": _variables("#3B82F6", "#64748B", "#FFFFFF", "#111827"),
                "is_active": True,
                "is_seasonal": False,
                "sort_order": 0,
            },
            {
                "slug": "dark",
                "name": "Dark",
                "description": "Default dark theme",
                "category": "default",
                "primary_color": "#60A5FA",
                "css_variables": _variables("#60A5FA", "#94A3B8", "#0F172A", "#F8FAFC"),
                "is_active": True,
                "is_seasonal": False,
                "sort_order": 1,
            },
        ],
    )
    settings = sa.table("settings", sa.column("key", sa.String), sa.column("value", sa.Text))
    op.bulk_insert(settings, [{"key": "default_website_theme", "value": "light"}])


def downgrade() -> None:
    op.execute("DELETE FROM settings WHERE key = 'default_website_theme'")
    op.execute("DELETE FROM themes WHERE slug IN ('light', 'dark')")
