import os

from config.config import *  # noqa: F401,F403

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")
DEBUG = False
STORAGE_BACKEND = os.getenv("STORAGE_BACKEND", "mysql")
