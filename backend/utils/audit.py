import os
from datetime import datetime
from flask import current_app

DEFAULT_AUDIT_LOG_FILE = os.path.join("logs", "audit.log")


def log_event(event_type, user_id=None, ip=None, description=None, level="INFO"):
    """
    Appends a security or account event to the audit log file.

    Parameters:
        event_type (str): The type of the event (e.g., LOGIN_SUCCESS, TUTOR_CREATED).
        user_id (int|None): The acting credential id, if available.
        ip (str|None): IP address, if available.
        description (str|None): Additional context.
        level (str): Log level (e.g., INFO, WARNING, ERROR).
    """
    audit_file = current_app.config.get("AUDIT_LOG_FILE", DEFAULT_AUDIT_LOG_FILE)
    directory = os.path.dirname(audit_file)
    if directory:
        os.makedirs(directory, exist_ok=True)

    timestamp = datetime.utcnow().strftime('%Y-%m-%d %H:%M:%S')
    log_entry = (
        f"[{timestamp}] [{level.upper()}] EVENT: {event_type} | "
        f"USER: {user_id or 'N/A'} | IP: {ip or 'N/A'} | DESC: {description or 'N/A'}\n"
    )

    with open(audit_file, "a", encoding="utf-8") as log_file:
        log_file.write(log_entry)

    current_app.logger.debug(log_entry.strip())
