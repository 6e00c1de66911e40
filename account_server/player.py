from enum import Enum, unique

import attr

@unique
class Role(Enum):
    PLAYER = "ROLE_PLAYER"
    ADMIN = "ROLE_ADMIN"

@attr.s(auto_attribs=True, frozen=True)
class PlayerSummary:
    "Everything about a player that may leave the server."
    name: str
    preferredColour: str
    role: Role

    @property
    def admin(self) -> bool:
        return self.role == Role.ADMIN

@attr.s(auto_attribs=True, frozen=True)
class Player(PlayerSummary):
    passwordHash: str

    def summary(self) -> PlayerSummary:
        return PlayerSummary(name = self.name, preferredColour = self.preferredColour, role = self.role)

@attr.s(auto_attribs=True, frozen=True)
class Caller:
    """The authenticated identity behind a request.

    Resolved from a bearer token once per request and never taken from a
    request body.
    """
    name: str
    role: Role

    @property
    def isAdmin(self) -> bool:
        return self.role == Role.ADMIN

    def mayActOn(self, name: str) -> bool:
        return self.isAdmin or self.name == name
