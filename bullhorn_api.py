import logging
from dataclasses import dataclass, field

import requests

import auth_utils
import token_store
from errors import ApiError, UnauthenticatedError, server_message

logger = logging.getLogger(__name__)

TOKEN_HEADER = "BhRestToken"


@dataclass
class ApiCall:
    """One logical request; `retried` guards the single 401 refresh."""

    method: str
    url: str
    options: dict
    headers: dict = field(default_factory=dict)
    retried: bool = False


class BullhornApi:
    """requests.Session wrapper that keeps the BhRestToken header current.

    A 401 on a call that has not been retried yet triggers one token refresh
    and one resend of that same call. A second 401 is returned as is.
    """

    def __init__(self, store, session=None, refresh=None):
        bh_rest_token = store.get(token_store.BH_REST_TOKEN)
        rest_url = store.get(token_store.REST_URL)
        if not bh_rest_token or not rest_url:
            raise UnauthenticatedError()

        self.store = store
        self.rest_url = rest_url.rstrip("/")
        self.session = session or requests.Session()
        self.session.headers[TOKEN_HEADER] = bh_rest_token
        self._refresh = refresh or (lambda: auth_utils.refresh(store))

    def url(self, path):
        return f"{self.rest_url}/{path.lstrip('/')}"

    def request(self, method, path, **options):
        call = ApiCall(method, self.url(path), options)
        return self._send(call)

    def _send(self, call):
        logger.debug("%s %s", call.method, call.url)
        res = self.session.request(call.method, call.url, headers=call.headers, **call.options)

        if res.status_code == 401 and not call.retried:
            call.retried = True
            new_token = self._refresh()
            self.session.headers[TOKEN_HEADER] = new_token
            call.headers[TOKEN_HEADER] = new_token
            logger.debug("Retrying %s %s with refreshed token", call.method, call.url)
            return self._send(call)

        return res

    def request_json(self, method, path, **options):
        try:
            res = self.request(method, path, **options)
        except requests.RequestException as e:
            raise ApiError(f"Request to Bullhorn failed: {e}")

        if not res.ok:
            raise ApiError("Bullhorn API request failed.", res.status_code, server_message(res))
        if not res.content:
            return {}
        try:
            return res.json()
        except ValueError:
            raise ApiError("Bullhorn returned a response that is not JSON.", res.status_code)

    def get(self, path, **options):
        return self.request_json("GET", path, **options)

    def post(self, path, **options):
        return self.request_json("POST", path, **options)

    def delete(self, path, **options):
        return self.request_json("DELETE", path, **options)
