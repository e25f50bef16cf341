"""
This module contains the configuration settings for procwarden.
It defines paths, polling and logging defaults. Values can be overridden through
environment variables (or a .env file) and, for the modifiable subset, through
overrides.json.
"""

import os
import pathlib
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv(override=True)

#* --- Core Paths ---
BASE_DIR = pathlib.Path(os.getenv("PROCWARDEN_HOME", pathlib.Path.cwd())).resolve()
RUN_DIR = BASE_DIR / "run"

#* --- Application File Paths ---
WATCH_FILE_PATH = pathlib.Path(os.getenv("PROCWARDEN_WATCH_FILE", BASE_DIR / "watches.yaml"))
OVERRIDES_JSON_PATH = RUN_DIR / "overrides.json"
LOG_FILE_PATH = os.getenv("PROCWARDEN_LOG_FILE", "")

#* --- Supervisor Settings ---
POLL_INTERVAL = float(os.getenv("PROCWARDEN_POLL_INTERVAL", "5"))  # seconds
SUPERVISOR_PROCESS_TITLE = "procwarden - Supervisor"

#* --- Condition Defaults ---
DEFAULT_OCCURRENCES = 1
DEFAULT_WINDOW = 1

#* --- Logging ---
LOG_LEVEL = os.getenv("PROCWARDEN_LOG_LEVEL", "INFO").upper()
VERBOSE_LOGGING = False

#* --- MODIFIABLE SETTINGS (Changeable through overrides.json) ---
MODIFIABLE_SETTINGS = {
    "POLL_INTERVAL",
    "LOG_LEVEL",
    "DEFAULT_OCCURRENCES",
    "DEFAULT_WINDOW",
}
