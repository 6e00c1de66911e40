import json
from typing import Optional

import attr
import cattr

from account_server.forms import AccountForm
from account_server.player import Role

DEFAULT_BOOTSTRAP_PASSWORD = "Change-me-1"

@attr.s(frozen=True, auto_attribs=True)
class BootstrapAdminConfig:
    name: str = "admin"
    password: str = DEFAULT_BOOTSTRAP_PASSWORD
    preferredColour: str = "#CAFFEE"

    @property
    def usesDefaultPassword(self) -> bool:
        return self.password == DEFAULT_BOOTSTRAP_PASSWORD

    def toAccountForm(self) -> AccountForm:
        return AccountForm(
                name = self.name,
                password = self.password,
                preferredColour = self.preferredColour,
                role = Role.ADMIN.value)

@attr.s(frozen=True, auto_attribs=True)
class ServerConfig:
    dbPath: str = "data/accounts.db"
    logDbPath: str = "data/logs.db"
    # Service account key for verifying and revoking Firebase tokens.
    # None falls back to Application Default Credentials.
    firebaseCredentials: Optional[str] = "data/privateFirebaseKey.json"
    bcryptRounds: int = 12
    bootstrapAdmin: BootstrapAdminConfig = BootstrapAdminConfig()

    @staticmethod
    def fromFile(path: str) -> 'ServerConfig':
        with open(path) as configFile:
            return cattr.structure(json.loads(configFile.read()), ServerConfig)
