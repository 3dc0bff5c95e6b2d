import json
import logging
import os

import config

logger = logging.getLogger(__name__)

# Keys persisted for a Bullhorn session
BH_REST_TOKEN = "bh_rest_token"
REST_URL = "rest_url"
REFRESH_TOKEN = "refresh_token"
TOKEN_URL = "token_url"
CLIENT_ID = "client_id"
CLIENT_SECRET = "client_secret"

SESSION_KEYS = (BH_REST_TOKEN, REST_URL, REFRESH_TOKEN, TOKEN_URL, CLIENT_ID, CLIENT_SECRET)


class TokenStore:
    """Session tokens kept in a JSON file in the user's config directory.

    Every mutation rewrites the whole file, so a login, refresh or logout
    either lands completely or not at all.
    """

    def __init__(self, path=None):
        self.path = path or config.config_path()
        self._tokens = None

    # Load from config.json
    def load_tokens(self):
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r") as f:
                tokens = json.load(f)
        except ValueError:
            logger.warning("Ignoring unreadable token store at %s", self.path)
            return {}
        if not isinstance(tokens, dict):
            logger.warning("Ignoring unreadable token store at %s", self.path)
            return {}
        return {k: v for k, v in tokens.items() if k in SESSION_KEYS}

    # Save to config.json
    def save_tokens(self, tokens):
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(".tmp")
        with open(tmp_path, "w") as f:
            json.dump(tokens, f, indent=2)
        os.chmod(tmp_path, 0o600)
        os.replace(tmp_path, self.path)

    @property
    def tokens(self):
        if self._tokens is None:
            self._tokens = self.load_tokens()
        return self._tokens

    def get(self, key, default=None):
        return self.tokens.get(key, default)

    def set(self, key, value):
        self.update({key: value})

    def update(self, values):
        tokens = dict(self.tokens)
        for key, value in values.items():
            if value is None:
                tokens.pop(key, None)
            else:
                tokens[key] = value
        self.save_tokens(tokens)
        self._tokens = tokens

    def clear(self):
        if self.path.exists():
            self.path.unlink()
        self._tokens = {}
        logger.info("Cleared token store at %s", self.path)

    def is_logged_in(self):
        return bool(self.get(BH_REST_TOKEN) and self.get(REST_URL))
