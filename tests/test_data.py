import unittest.mock

from account_server.account_service import AccountService
from account_server.db import Db
from account_server.forms import AccountForm
from account_server.hasher import BcryptHasher
from account_server.player import Caller, Role
from account_server.registry import GameServerRegistry
from account_server.sessions import SessionManager
from account_server.tokens import TokenAuthority

PASSWORD = "Abc123!x"
NEXT_PASSWORD = "Xyz789?q"

admin = Caller(name = "maex", role = Role.ADMIN)
otherAdmin = Caller(name = "carol", role = Role.ADMIN)
alice = Caller(name = "alice", role = Role.PLAYER)
bob = Caller(name = "bob", role = Role.PLAYER)

def accountForm(name: str, role: Role = Role.PLAYER, preferredColour: str = "#A1B2C3",
        password: str = PASSWORD) -> AccountForm:
    return AccountForm(name = name, password = password, preferredColour = preferredColour, role = role.value)

def makeAccounts(dbPath: str) -> AccountService:
    "An account service on a fresh database with a mocked token authority."
    tokenAuthority = unittest.mock.create_autospec(TokenAuthority, instance=True)
    tokenAuthority.revokeTokens.return_value = None
    sessionManager = SessionManager()
    return AccountService(
            db = Db(dbPath = dbPath),
            hasher = BcryptHasher(rounds = 4),
            tokenAuthority = tokenAuthority,
            registry = GameServerRegistry(sessionManager),
            sessionManager = sessionManager)

def addPlayers(accounts: AccountService):
    "maex (admin), alice and bob (players)."
    accounts.ensureAdmin(accountForm("maex", role = Role.ADMIN))
    accounts.registerPlayer(admin, "alice", accountForm("alice"))
    accounts.registerPlayer(admin, "bob", accountForm("bob", preferredColour = "#112233"))

def patchCaller(caller: Caller):
    "Pretend every request in the block carries a valid token of `caller`."
    return unittest.mock.patch('account_server.handler.base.BaseHandler.verifyAuthentication',
            return_value = caller)
