import abc

import firebase_admin.auth
import firebase_admin.exceptions

from account_server.logger import Logger
from account_server.player import Caller, Role

class TokenError(Exception):
    "The bearer token is missing, malformed, expired or revoked."
    pass

class TokenAuthority(metaclass=abc.ABCMeta):
    @abc.abstractmethod
    def resolveCaller(self, token: str) -> Caller:
        "Return who is calling, with their current role. Raises TokenError."
        pass

    @abc.abstractmethod
    def revokeTokens(self, name: str):
        "Invalidate every outstanding token of a player. Safe to repeat."
        pass

class FirebaseTokenAuthority(TokenAuthority):
    """Firebase ID tokens, where the Firebase UID is the player name.

    The role is carried in the "role" custom claim and defaults to
    ROLE_PLAYER. Tokens issued before a revocation are rejected.
    """
    ROLE_CLAIM = "role"

    def __init__(self, app=None):
        self.app = app
        self.logger = Logger.getDefault()

    def resolveCaller(self, token: str) -> Caller:
        try:
            decodedToken = firebase_admin.auth.verify_id_token(token, app=self.app, check_revoked=True)
        except (ValueError, firebase_admin.auth.InvalidIdTokenError,
                firebase_admin.auth.UserDisabledError, firebase_admin.auth.CertificateFetchError,
                firebase_admin.auth.UserNotFoundError, firebase_admin.exceptions.FirebaseError) as e:
            raise TokenError(str(e)) from e
        name = decodedToken.get("uid")
        if not name:
            raise TokenError("Token does not name a player.")
        try:
            role = Role(decodedToken.get(self.ROLE_CLAIM, Role.PLAYER.value))
        except ValueError as e:
            raise TokenError(f"Token carries an unknown role: {e}") from e
        return Caller(name = name, role = role)

    def revokeTokens(self, name: str):
        try:
            firebase_admin.auth.revoke_refresh_tokens(name, app=self.app)
        except firebase_admin.auth.UserNotFoundError:
            # Never signed in, so there is nothing to revoke.
            self.logger.info("Tokens", -1, f"No tokens to revoke for {name}.")
