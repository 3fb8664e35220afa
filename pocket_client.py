#!/usr/bin/env python3
"""
Pocket API Client Module
Wraps the Pocket v3 REST endpoints used by the command-line client:
OAuth authentication, retrieval, adding and modifying items.
"""

import logging
from typing import Dict, List, Optional, Tuple
from urllib.parse import urlencode
import requests
from requests import Session

logger = logging.getLogger(__name__)

API_BASE_URL = "https://getpocket.com/v3"
AUTHORIZE_URL = "https://getpocket.com/auth/authorize"
MODIFY_ACTIONS = ("archive", "readd", "favorite", "unfavorite", "delete")


class PocketError(Exception):
    """Base class for every error reported by the Pocket client."""


class AuthError(PocketError):
    """Authentication could not be completed."""


class PocketAPIError(PocketError):
    """The Pocket API answered with an error or could not be reached."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class ItemNotFoundError(PocketError):
    """No saved item matches the requested URL."""


class PocketClient:
    """Thin client for the Pocket v3 API."""

    def __init__(
        self,
        session: Session,
        consumer_key: str,
        access_token: Optional[str] = None,
        username: Optional[str] = None,
    ):
        self.session = session
        self.consumer_key = consumer_key
        self.access_token = access_token
        self.username = username
        self.base_url = API_BASE_URL
        self.timeout = 30

    def start_authentication(self, redirect_uri: str) -> Tuple[str, str]:
        """
        Obtain a request token and build the URL the user must visit.

        Args:
            redirect_uri: Where Pocket sends the browser after authorization

        Returns:
            Tuple of (authorize_url, request_code)
        """
        data = self._post(
            "/oauth/request",
            {"consumer_key": self.consumer_key, "redirect_uri": redirect_uri},
        )
        code = data.get("code")
        if not code:
            raise AuthError("Pocket did not return a request token")

        query = urlencode({"request_token": code, "redirect_uri": redirect_uri})
        authorize_url = f"{AUTHORIZE_URL}?{query}"
        logger.debug(f"Request token obtained, authorize URL: {authorize_url}")
        return authorize_url, code

    def finish_authentication(self, request_code: str) -> Tuple[str, str]:
        """
        Exchange an authorized request token for an access token.

        Raises:
            AuthError: if the user has not approved the request token
        """
        try:
            data = self._post(
                "/oauth/authorize",
                {"consumer_key": self.consumer_key, "code": request_code},
            )
        except PocketAPIError as e:
            raise AuthError(
                f"Authorization was not completed ({e}). Run the command again."
            ) from e

        access_token = data.get("access_token")
        if not access_token:
            raise AuthError("Pocket did not return an access token")

        self.access_token = access_token
        self.username = data.get("username", "")
        logger.info(f"🔑 Authenticated as {self.username}")
        return self.access_token, self.username

    def retrieve(self, **params) -> Dict:
        """
        Retrieve items matching the given query parameters.

        Args:
            **params: Any of state, favorite, tag, contentType, sort,
                detailType, search, domain, since, count, offset

        Returns:
            Decoded response; items are under the "list" key when present
        """
        logger.debug(f"Retrieving with params: {params}")
        return self._authenticated_post("/get", params)

    def add(self, url: str, title: Optional[str] = None) -> Dict:
        payload = {"url": url}
        if title is not None:
            payload["title"] = title
        return self._authenticated_post("/add", payload)

    def modify(self, actions: List[Dict]) -> Dict:
        """
        Send a batch of modify actions, each {"action": ..., "item_id": ...}.
        """
        for action in actions:
            if action.get("action") not in MODIFY_ACTIONS:
                raise ValueError(f"Unsupported modify action: {action.get('action')}")
        return self._authenticated_post("/send", {"actions": actions})

    def _authenticated_post(self, path: str, payload: Dict) -> Dict:
        if not self.access_token:
            raise AuthError("No access token available, authenticate first")
        body = dict(payload)
        body["consumer_key"] = self.consumer_key
        body["access_token"] = self.access_token
        return self._post(path, body)

    def _post(self, path: str, payload: Dict) -> Dict:
        """
        POST a JSON payload to the API and decode the JSON answer.

        Raises:
            PocketAPIError: on non-200 status, network failure or bad JSON
        """
        url = f"{self.base_url}{path}"
        try:
            response = self.session.post(
                url,
                json=payload,
                headers={
                    "Content-Type": "application/json; charset=UTF-8",
                    "X-Accept": "application/json",
                },
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as e:
            logger.error(f"Network error during API request: {e}")
            raise PocketAPIError(f"Network error: {e}") from e

        if response.status_code != 200:
            reason = response.headers.get("X-Error") or response.text
            if response.status_code == 401:
                logger.error("Authentication failed. Check your credentials.")
            elif response.status_code == 403:
                logger.error("Access forbidden. Check your API permissions.")
            else:
                logger.error(
                    f"API request to {path} failed with status {response.status_code}: {reason}"
                )
            raise PocketAPIError(
                f"{path} failed with status {response.status_code}: {reason}",
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as e:
            logger.error(f"Invalid JSON response: {e}")
            raise PocketAPIError(f"Invalid JSON response from {path}") from e
