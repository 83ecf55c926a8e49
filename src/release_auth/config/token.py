"""GitHub token storage using the system keyring.

Used as the last fallback when the host's ``github-oauth`` table has no
usable token.
"""

import keyring
import keyring.errors

from release_auth.logger import get_logger

logger = get_logger(__name__)

DEFAULT_SERVICE = "release-auth-github-token"
DEFAULT_USERNAME = "token"


class KeyringTokenStore:
    """GitHub token storage backed by the system keyring."""

    def __init__(
        self,
        service: str = DEFAULT_SERVICE,
        username: str = DEFAULT_USERNAME,
    ) -> None:
        """Initialize the keyring token store.

        Args:
            service: The service name for keyring storage.
            username: The username for keyring storage.

        """
        self.service = service
        self.username = username

    def get(self) -> str | None:
        """Retrieve the stored token.

        Returns:
            str | None: The token, or None if nothing is stored or the
                keyring is unavailable (e.g. headless environment).

        """
        try:
            token = keyring.get_password(self.service, self.username)
        except keyring.errors.KeyringError:
            # Security: Don't log exception details
            logger.debug("Keyring access failed")
            return None

        if token:
            logger.debug("GitHub token retrieved from keyring (value hidden)")
            return token.strip() or None
        logger.debug("No token stored in keyring")
        return None

    def set(self, token: str) -> None:
        """Store the token.

        Args:
            token: The token to store.

        Raises:
            ValueError: If the token is empty.
            keyring.errors.KeyringError: If keyring storage fails.

        """
        if not token or not token.strip():
            msg = "Token cannot be empty"
            raise ValueError(msg)
        keyring.set_password(self.service, self.username, token.strip())
        logger.debug("Token saved to keyring")

    def delete(self) -> None:
        """Remove the stored token.

        Raises:
            keyring.errors.PasswordDeleteError: If no token is stored.

        """
        keyring.delete_password(self.service, self.username)
        logger.debug("Token removed from keyring")
