import inspect
from typing import Callable, List, Optional

import attr

from account_server.db import Db
from account_server.forms import AccountForm, PasswordForm, ColourForm, PASSWORD_POLICY_MESSAGE, \
        validatePasswordString, validateColourString
from account_server.hasher import BcryptHasher
from account_server.logger import Logger
from account_server.player import Caller, Player, PlayerSummary, Role
from account_server.registry import GameServerRegistry, IdentifierMismatch
from account_server.sessions import SessionManager, SessionError
from account_server.tokens import TokenAuthority

class AccountException(Exception):
    "A rejected request. The message is meant for the client."
    pass

class ValidationError(AccountException):
    pass

class ConflictError(AccountException):
    pass

class NotFoundError(AccountException):
    pass

class AuthorizationError(AccountException):
    pass

class AdminRequiredError(AuthorizationError):
    def __init__(self, caller: Caller, action: str):
        self.caller = caller
        self.action = action

    def __str__(self):
        return f"Only admins may {self.action}."

class CascadeFailure(AccountException):
    def __init__(self, step: str, msg: str):
        super().__init__(msg)
        self.step = step

@attr.s(auto_attribs=True, frozen=True)
class CascadeStep:
    """One fallible step of a cascading deletion.

    `failureMessage` replaces the collaborator's own message when the step
    fails with one of `expectedErrors`.
    """
    name: str
    run: Callable[[], object]
    expectedErrors: tuple = ()
    failureMessage: Optional[str] = None

class AccountService:
    tokenAuthority: TokenAuthority
    registry: GameServerRegistry
    sessionManager: SessionManager
    _db: Db
    _hasher: BcryptHasher

    def __init__(self, db: Db, hasher: BcryptHasher, tokenAuthority: TokenAuthority,
            registry: GameServerRegistry, sessionManager: SessionManager):
        self._db = db
        self._hasher = hasher
        self.tokenAuthority = tokenAuthority
        self.registry = registry
        self.sessionManager = sessionManager
        self.logger = Logger.getDefault()

    # Reads

    def getPlayers(self, caller: Caller) -> List[PlayerSummary]:
        self._requireAdmin(caller, "list all players")
        return self._db.getPlayerSummaries()

    def getPlayerDetails(self, caller: Caller, name: str) -> PlayerSummary:
        player = self._getExistingPlayer(name, "User details can not be queried. No such user.")
        self._requireSelfOrAdmin(caller, name, "User details can only be queried by admins or for one-self.")
        return player.summary()

    def getColour(self, caller: Caller, name: str) -> str:
        player = self._getExistingPlayer(name, "Colour can not be queried. No such user.")
        self._requireSelfOrAdmin(caller, name, "Colour can not be queried on behalf of another user.")
        return player.preferredColour

    # Writes

    def registerPlayer(self, caller: Caller, name: str, form: AccountForm):
        self._requireAdmin(caller, "add players")
        if form.name != name:
            raise ValidationError("Username mismatch, comparing body and URL parameters.")
        self._addPlayer(form)
        self.logger.info("AccountService", -1, f"Added {form.role} {name}.", caller=caller.name)

    def ensureAdmin(self, form: AccountForm) -> bool:
        """Create the given admin unless some admin already exists.

        Returns whether the admin was created.
        """
        if any(player.admin for player in self._db.getPlayers()):
            return False
        if form.role != Role.ADMIN.value:
            raise ValidationError(f"Bootstrap account {form.name} must have role {Role.ADMIN.value}.")
        self._addPlayer(form)
        self.logger.info("AccountService", -1, f"No admin found. Created bootstrap admin {form.name}.")
        return True

    def updatePassword(self, caller: Caller, name: str, form: PasswordForm):
        player = self._getExistingPlayer(name, "Password can not be updated. No such user.")
        self._requireSelfOrAdmin(caller, name, "Only admins can update the password of other users.")
        if not validatePasswordString(form.nextPassword):
            raise ValidationError(PASSWORD_POLICY_MESSAGE)
        if form.nextPassword == form.oldPassword:
            raise ValidationError("New password must not be identical to old password.")
        # Admins have to know the old password as well.
        if not self._hasher.verify(form.oldPassword, player.passwordHash):
            raise ValidationError("Password can not be updated. Provided old password is incorrect.")
        self._db.savePlayer(attr.evolve(player, passwordHash = self._hasher.hash(form.nextPassword)))
        self.logger.info("AccountService", -1, f"Updated password of {name}.", caller=caller.name)

    def updateColour(self, caller: Caller, name: str, form: ColourForm):
        player = self._getExistingPlayer(name, "Colour can not be updated. No such user.")
        self._requireSelfOrAdmin(caller, name, "Colour can not be altered on behalf of another user.")
        if not validateColourString(form.colour):
            raise ValidationError("Provided colour is not a valid Hexadecimal colour-string.")
        self._db.savePlayer(attr.evolve(player, preferredColour = form.colour))

    async def deletePlayer(self, caller: Caller, name: str):
        if caller.name != name:
            self._requireAdmin(caller, "delete other players")
        if not self._db.exists(name):
            raise NotFoundError("User cannot be deleted. Does not exist.")
        # Keeps at least one admin around.
        if caller.name == name and caller.isAdmin:
            raise AuthorizationError("Admins are not allowed to remove themselves.")

        await self._runCascade(name, self.deletionCascade(caller, name))
        self._db.deletePlayer(name)
        self.logger.info("AccountService", -1, f"Deleted {name}.", caller=caller.name)

    def deletionCascade(self, caller: Caller, name: str) -> List[CascadeStep]:
        "Everything that has to be cleaned up before the record of `name` may go."
        steps = [CascadeStep("revoke tokens", lambda: self.tokenAuthority.revokeTokens(name))]
        if caller.isAdmin:
            steps.append(CascadeStep("unregister game servers",
                lambda: self.registry.unregisterAllOwnedBy(name),
                expectedErrors = (IdentifierMismatch, ),
                failureMessage = ("Implicit removal of associated games and sessions failed "
                    "due to admin identifier mismatch.")))
        steps.append(CascadeStep("leave sessions",
            lambda: self.sessionManager.removeFromAllSessions(name),
            expectedErrors = (SessionError, )))
        return steps

    async def _runCascade(self, name: str, steps: List[CascadeStep]):
        for step in steps:
            try:
                result = step.run()
                if inspect.isawaitable(result):
                    await result
            except step.expectedErrors as e:
                self.logger.warn("AccountService", -1, f"Deleting {name} failed at '{step.name}': {e!r}")
                raise CascadeFailure(step.name, step.failureMessage or str(e)) from e
            except Exception as e:
                self.logger.error("AccountService", -1, f"Deleting {name} failed at '{step.name}': {e!r}")
                raise CascadeFailure(step.name, f"User cannot be deleted. Step '{step.name}' failed.") from e
            self.logger.info("AccountService", -1, f"Deleting {name}: '{step.name}' done.")

    # Helpers

    def _addPlayer(self, form: AccountForm):
        problem = form.validate()
        if problem:
            raise ValidationError(problem)
        if self._db.exists(form.name):
            raise ConflictError("Name already taken.")
        player = Player(
                name = form.name,
                preferredColour = form.preferredColour,
                role = Role(form.role),
                passwordHash = self._hasher.hash(form.password))
        try:
            self._db.addPlayer(player)
        except ValueError:
            # Lost a race against another registration of the same name.
            raise ConflictError("Name already taken.")

    def _getExistingPlayer(self, name: str, notFoundMessage: str) -> Player:
        player = self._db.getPlayer(name)
        if player is None:
            raise NotFoundError(notFoundMessage)
        return player

    @staticmethod
    def _requireAdmin(caller: Caller, action: str):
        if not caller.isAdmin:
            raise AdminRequiredError(caller, action)

    @staticmethod
    def _requireSelfOrAdmin(caller: Caller, name: str, msg: str):
        if not caller.mayActOn(name):
            raise AuthorizationError(msg)
