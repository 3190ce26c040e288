import os

from .base import db_config_from_env

SECRET_KEY = "test-secret"

DB_CONFIG = db_config_from_env(default_password="test")

DEBUG = False
TESTING = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "WARNING")

AUTO_INIT_DB = False

# Tests always run against the built-in defaults, whatever the shell exports.
WORKDAY_DEFAULTS: dict = {}
