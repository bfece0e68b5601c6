"""SQLite schema management (code-first approach)."""

import logging

from checklist.core import db_client


logger = logging.getLogger(__name__)


# Central list of all collections in the schema, in dependency order
COLLECTIONS = [
    "users",
    "task_templates",
    "task_assignments",
    "task_completions",
]

_TIMESTAMPS = """
    created TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP,
    updated TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP
"""

_TABLES: dict[str, str] = {
    "users": f"""
        CREATE TABLE IF NOT EXISTS users (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT NOT NULL,
            email TEXT NOT NULL UNIQUE,
            role TEXT NOT NULL CHECK (role IN ('employee', 'creador', 'lider', 'admin', 'super_admin')),
            {_TIMESTAMPS}
        )
    """,
    "task_templates": f"""
        CREATE TABLE IF NOT EXISTS task_templates (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            title TEXT NOT NULL,
            description TEXT,
            frequency TEXT NOT NULL CHECK (frequency IN ('daily', 'weekly', 'monthly')),
            scheduled_day INTEGER,
            scheduled_time TEXT,
            requires_photo INTEGER NOT NULL DEFAULT 0,
            category TEXT,
            priority TEXT NOT NULL DEFAULT 'medium' CHECK (priority IN ('high', 'medium', 'low')),
            is_active INTEGER NOT NULL DEFAULT 1,
            created_by_id INTEGER REFERENCES users (id) ON DELETE SET NULL,
            {_TIMESTAMPS}
        )
    """,
    # Assignments and completions cascade away with their owner
    "task_assignments": f"""
        CREATE TABLE IF NOT EXISTS task_assignments (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            task_template_id INTEGER NOT NULL REFERENCES task_templates (id) ON DELETE CASCADE,
            employee_id INTEGER NOT NULL REFERENCES users (id) ON DELETE CASCADE,
            is_active INTEGER NOT NULL DEFAULT 1,
            assigned_at TEXT NOT NULL,
            {_TIMESTAMPS},
            UNIQUE (task_template_id, employee_id)
        )
    """,
    "task_completions": f"""
        CREATE TABLE IF NOT EXISTS task_completions (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            assignment_id INTEGER NOT NULL REFERENCES task_assignments (id) ON DELETE CASCADE,
            scheduled_date TEXT NOT NULL,
            status TEXT NOT NULL DEFAULT 'completed',
            photo_url TEXT,
            photo_public_id TEXT,
            notes TEXT,
            completed_at TEXT NOT NULL,
            completed_on_time INTEGER NOT NULL DEFAULT 1,
            {_TIMESTAMPS},
            UNIQUE (assignment_id, scheduled_date)
        )
    """,
}

_INDEXES = [
    "CREATE INDEX IF NOT EXISTS idx_assignments_employee ON task_assignments (employee_id, is_active)",
    "CREATE INDEX IF NOT EXISTS idx_completions_date ON task_completions (scheduled_date)",
]


async def init_db(*, db_path: str | None = None) -> None:
    """Create all tables and indexes if they do not exist yet (idempotent)."""
    logger.info("Starting SQLite schema sync...")

    conn = await db_client.get_connection(db_path=db_path)

    for collection_name in COLLECTIONS:
        await conn.execute(_TABLES[collection_name])
        logger.debug("Ensured table %s", collection_name)

    for index_sql in _INDEXES:
        await conn.execute(index_sql)

    await conn.commit()
    logger.info("SQLite schema sync complete")
