import logging
import re
from urllib.parse import parse_qs, urlsplit

import requests

import config
import token_store
from errors import (
    AuthorizationError,
    BullhornCliError,
    DiscoveryError,
    RefreshFailedError,
    RefreshPreconditionError,
    SessionFinalizeError,
    TokenExchangeError,
    server_message,
)

logger = logging.getLogger(__name__)

VERSION_SUFFIX = re.compile(r"/v\d+\.\d+$")


def _no_progress(message):
    pass


def _json(response):
    try:
        data = response.json()
    except ValueError:
        return {}
    return data if isinstance(data, dict) else {}


def _describe(response):
    return f"Error {response.status_code}: {server_message(response) or 'No description provided.'}"


def discover(session, username):
    """Look up the OAuth and REST base URLs for the user's data center."""
    try:
        res = session.get(config.LOGIN_INFO_URL, params={"username": username})
    except requests.RequestException as e:
        raise DiscoveryError(f"Could not reach Bullhorn loginInfo: {e}")

    login_info = _json(res)
    oauth_url = login_info.get("oauthUrl")
    rest_url = login_info.get("restUrl")
    if not oauth_url or not rest_url:
        raise DiscoveryError("loginInfo response is missing oauthUrl or restUrl.")
    return oauth_url.rstrip("/"), rest_url.rstrip("/")


def authorize(session, oauth_url, username, password, client_id):
    """Pseudo-login against /authorize and pull the code out of the redirect."""
    params = {
        "client_id": client_id,
        "response_type": "code",
        "action": "Login",
        "username": username,
        "password": password,
    }
    try:
        res = session.get(f"{oauth_url}/authorize", params=params, allow_redirects=False)
    except requests.RequestException as e:
        raise AuthorizationError(f"Authorization request failed: {e}")

    if res.status_code != 302:
        raise AuthorizationError(f"Failed to obtain an authorization code ({_describe(res)}).")

    location = res.headers.get("Location", "")
    code = (parse_qs(urlsplit(location).query).get("code") or [None])[0]
    if not code:
        raise AuthorizationError("Failed to obtain an authorization code.")
    return code


def exchange_code(session, token_url, code, client_id, client_secret):
    try:
        res = session.post(token_url, data={
            "grant_type": "authorization_code",
            "code": code,
            "client_id": client_id,
            "client_secret": client_secret,
        })
    except requests.RequestException as e:
        raise TokenExchangeError(f"Token request failed: {e}")

    token_data = _json(res)
    if not token_data.get("access_token"):
        raise TokenExchangeError(f"Failed to obtain an access token ({_describe(res)}).")
    return token_data


def finalize_session(session, rest_base, access_token):
    """Trade an OAuth access token for a BhRestToken and the tenant restUrl."""
    try:
        res = session.post(f"{rest_base}/login", params={
            "version": "*",
            "access_token": access_token,
        })
    except requests.RequestException as e:
        raise SessionFinalizeError(f"REST login failed: {e}")

    login_data = _json(res)
    if not login_data.get("BhRestToken") or not login_data.get("restUrl"):
        raise SessionFinalizeError(
            f"Invalid response from Bullhorn. Missing final BhRestToken or restUrl ({_describe(res)})."
        )
    return login_data


def login(store, username, password, client_id, client_secret, session=None, progress=_no_progress):
    """Run the four step handshake and persist the resulting session."""
    session = session or requests.Session()

    progress("Step 1 of 4: Determining data center...")
    oauth_url, rest_base = discover(session, username)
    token_url = f"{oauth_url}/token"
    logger.debug("Data center for %s: oauth=%s rest=%s", username, oauth_url, rest_base)

    progress("Step 2 of 4: Obtaining authorization code...")
    code = authorize(session, oauth_url, username, password, client_id)

    progress("Step 3 of 4: Exchanging code for access token...")
    token_data = exchange_code(session, token_url, code, client_id, client_secret)

    progress("Step 4 of 4: Finalizing API session...")
    login_data = finalize_session(session, rest_base, token_data["access_token"])

    tokens = {
        token_store.BH_REST_TOKEN: login_data["BhRestToken"],
        token_store.REFRESH_TOKEN: token_data.get("refresh_token"),
        token_store.REST_URL: login_data["restUrl"],
        token_store.TOKEN_URL: token_url,
        token_store.CLIENT_ID: client_id,
        token_store.CLIENT_SECRET: client_secret,
    }
    store.update(tokens)
    logger.info("Logged in as %s, restUrl=%s", username, login_data["restUrl"])
    return tokens


def rest_base_url(rest_url):
    return VERSION_SUFFIX.sub("", rest_url.rstrip("/"))


# Refresh BhRestToken using the stored refresh_token
def refresh(store, session=None):
    refresh_token = store.get(token_store.REFRESH_TOKEN)
    token_url = store.get(token_store.TOKEN_URL)
    client_id = store.get(token_store.CLIENT_ID)
    client_secret = store.get(token_store.CLIENT_SECRET)

    if not (refresh_token and token_url and client_id and client_secret):
        raise RefreshPreconditionError("Cannot refresh session.")

    session = session or requests.Session()
    logger.info("Session expired, refreshing BhRestToken")
    try:
        res = session.post(token_url, data={
            "grant_type": "refresh_token",
            "refresh_token": refresh_token,
            "client_id": client_id,
            "client_secret": client_secret,
        })
        new_token_data = _json(res)
        access_token = new_token_data.get("access_token")
        if not access_token:
            raise TokenExchangeError(f"Token refresh failed ({_describe(res)}).")

        rest_url = store.get(token_store.REST_URL) or ""
        login_res = session.post(f"{rest_base_url(rest_url)}/login", params={
            "version": "*",
            "access_token": access_token,
        })
        bh_rest_token = _json(login_res).get("BhRestToken")
        if not bh_rest_token:
            raise SessionFinalizeError("Failed to get new BhRestToken after refresh.")
    except (requests.RequestException, BullhornCliError) as e:
        logger.warning("Session refresh failed: %s", e)
        logout(store)
        raise RefreshFailedError("Session refresh failed.") from e

    store.update({
        token_store.BH_REST_TOKEN: bh_rest_token,
        token_store.REFRESH_TOKEN: new_token_data.get("refresh_token") or refresh_token,
    })
    logger.info("BhRestToken refreshed")
    return bh_rest_token


def logout(store):
    store.clear()
    logger.info("Session cleared")
