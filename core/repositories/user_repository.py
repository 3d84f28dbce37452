"""User repository for GitHub sign-in."""

from core.logging import get_logger
from core.models import User
from core.security.encryption import TokenEncryption

from .base import BaseRepository

logger = get_logger("repository.user")


class UserRepository(BaseRepository[User]):
    """Repository for User operations."""

    model = User

    def __init__(self, session, encryption: TokenEncryption | None = None):
        super().__init__(session)
        self.encryption = encryption or TokenEncryption()

    def _encrypt_token(self, token: str) -> str:
        """
        Encrypt a GitHub access token for storage.

        Falls back to plaintext if no key is configured, and logs a warning.
        """
        encrypted, was_encrypted = self.encryption.encrypt_if_available(token)
        if not was_encrypted:
            logger.warning(
                "token_stored_unencrypted",
                message="GitHub token stored without encryption. Set TOKEN_ENCRYPTION_KEY for secure storage.",
            )
        return encrypted

    def get_decrypted_token(self, user: User) -> str | None:
        """Get the decrypted GitHub access token for a user, if any."""
        if not user.github_access_token:
            return None
        return self.encryption.decrypt_if_encrypted(user.github_access_token)

    def create_or_update_from_github(
        self,
        github_id: int,
        login: str,
        avatar_url: str | None = None,
        email: str | None = None,
        access_token: str | None = None,
    ) -> User:
        """Create or update a user from GitHub OAuth data."""
        user = self.get_by_id(github_id)
        encrypted_token = self._encrypt_token(access_token) if access_token else None

        if user:
            user.login = login
            if avatar_url:
                user.avatar_url = avatar_url
            if email:
                user.email = email
            if encrypted_token:
                user.github_access_token = encrypted_token
            self.session.flush()
            logger.debug("user_updated", user_id=github_id)
            return user

        user = self.create(
            id=github_id,
            login=login,
            avatar_url=avatar_url,
            email=email,
            github_access_token=encrypted_token,
        )
        logger.info("user_created", user_id=github_id)
        return user
