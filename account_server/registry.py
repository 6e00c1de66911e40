from typing import Dict, List

import attr

from account_server.logger import Logger
from account_server.sessions import SessionManager

class IdentifierMismatch(Exception):
    def __init__(self, gameServer: str, actualOwner: str, claimedOwner: str):
        self.gameServer = gameServer
        self.actualOwner = actualOwner
        self.claimedOwner = claimedOwner

    def __str__(self):
        return (f"Game server {self.gameServer} was registered by {self.actualOwner}, "
                f"not {self.claimedOwner}.")

@attr.s(auto_attribs=True, frozen=True)
class GameServer:
    name: str
    owner: str

class GameServerRegistry:
    "Game servers known to the lobby and the admins who registered them."
    gameServers: Dict[str, GameServer]
    sessionManager: SessionManager

    def __init__(self, sessionManager: SessionManager):
        self.gameServers = {}
        self.sessionManager = sessionManager
        self.logger = Logger.getDefault()

    def register(self, name: str, owner: str) -> GameServer:
        if name in self.gameServers:
            raise ValueError(f"Game server {name} is already registered.")
        gameServer = GameServer(name = name, owner = owner)
        self.gameServers[name] = gameServer
        return gameServer

    def getGameServersOwnedBy(self, owner: str) -> List[GameServer]:
        return [gs for gs in self.gameServers.values() if gs.owner == owner]

    async def unregister(self, name: str, owner: str):
        gameServer = self.gameServers.get(name)
        if gameServer is None:
            return
        if gameServer.owner != owner:
            raise IdentifierMismatch(gameServer = name, actualOwner = gameServer.owner, claimedOwner = owner)
        del self.gameServers[name]
        self.logger.info("Registry", -1, f"Unregistered game server {name} of {owner}.")
        # Sessions can't outlive the server hosting them.
        await self.sessionManager.removeSessionsOfGameServer(name)

    async def unregisterAllOwnedBy(self, owner: str):
        for gameServer in self.getGameServersOwnedBy(owner):
            await self.unregister(gameServer.name, owner)
