# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
The session token is stored separately (TASKDECK_TOKEN_PATH); never commit it.
"""

ENV_VARS = {
    # App / logging
    "TASKDECK_APP_NAME": "App display name (default: taskdeck).",
    "TASKDECK_LOG_LEVEL": "Console logging level (default: INFO).",
    # Remote service
    "TASKDECK_API_BASE_URL": "Base URL of the task service API (default: http://localhost:8080/api).",
    # Switches
    "TASKDECK_CONSOLE_ENABLED": "Run the interactive console (true/false, default: true).",
    "TASKDECK_FETCH_ON_START": "Fetch tasks and tags after restoring a session (true/false, default: true).",
    # Paths (gitignored)
    "TASKDECK_DATA_DIR": "Local data directory for logs and the token file (default: .local/taskdeck).",
    "TASKDECK_TOKEN_PATH": "Session token file (default: <data_dir>/session.json).",
}
