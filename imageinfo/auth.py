"""
Bearer token issuance for registry pulls.

Tokens are always requested from the Docker Hub token service, whichever
registry host is being queried.
"""

import logging

import requests
from requests.exceptions import RequestException

from .client import RegistryClient
from .errors import AuthError
from .reference import resolve

logger = logging.getLogger(__name__)

AUTH_URL = "https://auth.docker.io/token"
AUTH_SERVICE = "registry.docker.io"


class AuthTokenProvider:
    """Obtains short-lived pull tokens scoped to a single repository"""

    def __init__(self, client: RegistryClient):
        self.client = client

    def fetch_token(self, repository: str, image_name: str) -> str:
        """
        Fetch a pull token for an image.

        Args:
            repository: Registry host or alias the image lives in
            image_name: Image name, namespaced or not

        Returns:
            Bearer token string. No expiry is tracked, so the token should only
            be used for the current operation.

        Raises:
            AuthError: If the request fails, the status is not 200, the body is
                not a JSON object or the token is empty
        """
        _, full_name = resolve(repository, image_name)
        params = {
            "service": AUTH_SERVICE,
            "scope": f"repository:{full_name}:pull",
        }

        try:
            response = self.client.get(AUTH_URL, params=params)
        except RequestException as e:
            logger.error(f"Failed to fetch auth token for {full_name}: {e}")
            raise AuthError(f"Token request failed: {e}")

        if response.status_code != requests.codes.ok:
            logger.error(
                f"Unexpected status {response.status_code} from auth endpoint for {full_name}, body: {response.text}"
            )
            raise AuthError(f"Unexpected status {response.status_code} from auth endpoint")

        try:
            payload = response.json()
        except ValueError as e:
            logger.error(f"Failed to parse auth token response for {full_name}: {e}, body: {response.text}")
            raise AuthError(f"Invalid token response: {e}")

        token = payload.get("token", "") if isinstance(payload, dict) else ""
        if not token or not isinstance(token, str):
            logger.error(f"Empty token received for {full_name}, body: {response.text}")
            raise AuthError("Empty token received")

        logger.info(f"Successfully fetched auth token for {full_name}: {token[:20]}...")
        return token
