import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

PROJECT_NAME = "bh-cli"
VERSION = "1.0.0"

# Data center discovery endpoint, keyed by username
LOGIN_INFO_URL = os.getenv(
    "BH_LOGIN_INFO_URL",
    "https://rest.bullhornstaffing.com/rest-services/loginInfo",
)

LOG_LEVEL = os.getenv("BH_CLI_LOG_LEVEL", "WARNING")


def config_dir():
    override = os.getenv("BH_CLI_CONFIG_DIR")
    if override:
        return Path(override)
    return Path.home() / ".config" / PROJECT_NAME


def config_path():
    return config_dir() / "config.json"


# Login prompt defaults (set these in .env or the shell)
def login_defaults():
    return {
        "username": os.getenv("BH_USER_NAME", ""),
        "password": os.getenv("BH_USER_PASSWORD", ""),
        "client_id": os.getenv("BH_API_CLIENT_ID", ""),
        "client_secret": os.getenv("BH_API_CLIENT_SECRET", ""),
    }
