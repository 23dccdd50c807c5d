"""Schema of the depictions table."""

TABLE_NAME = "depictions"

COLUMN_ID = "_id"
COLUMN_NAME = "name"
COLUMN_DESCRIPTION = "description"
COLUMN_ENTITY_ID = "entity_id"
COLUMN_LAST_USED = "last_used"
COLUMN_TIMES_USED = "times_used"

# Order matters: full-row reads return columns in this order.
ALL_FIELDS: tuple[str, ...] = (
    COLUMN_ID,
    COLUMN_NAME,
    COLUMN_DESCRIPTION,
    COLUMN_ENTITY_ID,
    COLUMN_LAST_USED,
    COLUMN_TIMES_USED,
)

CREATE_TABLE_STATEMENT = f"""
CREATE TABLE IF NOT EXISTS {TABLE_NAME} (
    {COLUMN_ID} INTEGER PRIMARY KEY AUTOINCREMENT,
    {COLUMN_NAME} TEXT NOT NULL,
    {COLUMN_DESCRIPTION} TEXT,
    {COLUMN_ENTITY_ID} TEXT UNIQUE,
    {COLUMN_LAST_USED} INTEGER,
    {COLUMN_TIMES_USED} INTEGER NOT NULL DEFAULT 0
);

CREATE INDEX IF NOT EXISTS idx_{TABLE_NAME}_last_used ON {TABLE_NAME}({COLUMN_LAST_USED});
"""
