import os

from config.config import *  # noqa: F401,F403
from config.config import env_flag

DEBUG = env_flag("DEBUG", "1")
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")
