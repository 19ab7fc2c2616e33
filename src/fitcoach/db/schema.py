"""SQLite database schema definitions."""

SCHEMA_SQL = """
-- User profiles with the current prescription
CREATE TABLE IF NOT EXISTS user_profiles (
    user_id INTEGER PRIMARY KEY AUTOINCREMENT,
    goal TEXT,
    sex TEXT CHECK(sex IN ('male', 'female')),
    weight_kg REAL,
    height_cm REAL,
    activity TEXT,
    age INTEGER,
    dob DATE,
    calories REAL,
    protein_g REAL,
    carbs_g REAL,
    fats_g REAL,
    step_target INTEGER,
    liss_min_per_session INTEGER,
    liss_sessions_per_week INTEGER,
    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
);

-- Daily weigh-ins (one per user per day)
CREATE TABLE IF NOT EXISTS weight_log (
    log_id INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id INTEGER NOT NULL,
    weight_kg REAL NOT NULL,
    measured_at DATE NOT NULL,
    notes TEXT,
    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
    UNIQUE(user_id, measured_at),
    FOREIGN KEY (user_id) REFERENCES user_profiles(user_id)
);

CREATE INDEX IF NOT EXISTS idx_weight_log_user_date ON weight_log(user_id, measured_at);

-- Executed check-ins (append-only)
CREATE TABLE IF NOT EXISTS plan_history (
    entry_id INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id INTEGER NOT NULL,
    created_at TIMESTAMP NOT NULL,
    status TEXT NOT NULL,
    level INTEGER NOT NULL,
    delta REAL NOT NULL,
    proposal_json TEXT NOT NULL,
    snapshot_json TEXT NOT NULL,
    FOREIGN KEY (user_id) REFERENCES user_profiles(user_id)
);

CREATE INDEX IF NOT EXISTS idx_plan_history_user_date ON plan_history(user_id, created_at);

-- Weekly LISS adherence counters (week_start is the Monday)
CREATE TABLE IF NOT EXISTS adherence (
    user_id INTEGER NOT NULL,
    week_start DATE NOT NULL,
    liss_minutes INTEGER NOT NULL DEFAULT 0,
    liss_sessions INTEGER NOT NULL DEFAULT 0,
    sessions_total INTEGER NOT NULL DEFAULT 0,
    updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
    PRIMARY KEY (user_id, week_start),
    FOREIGN KEY (user_id) REFERENCES user_profiles(user_id)
);

-- Finished cardio sessions (append-only)
CREATE TABLE IF NOT EXISTS cardio_sessions (
    session_id INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id INTEGER NOT NULL,
    session_date DATE NOT NULL,
    mode TEXT,
    total_time_sec REAL,
    summary_json TEXT NOT NULL,
    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
    FOREIGN KEY (user_id) REFERENCES user_profiles(user_id)
);

CREATE INDEX IF NOT EXISTS idx_cardio_sessions_user_date ON cardio_sessions(user_id, session_date);
"""


TABLES = (
    "user_profiles",
    "weight_log",
    "plan_history",
    "adherence",
    "cardio_sessions",
)


def get_schema_sql() -> str:
    """Return the complete schema SQL."""
    return SCHEMA_SQL
