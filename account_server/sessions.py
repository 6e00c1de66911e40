import itertools
from typing import Dict, List, Optional

import attr
import cattr

from account_server.listeners import ListenerQueues
from account_server.logger import Logger

class SessionError(Exception):
    pass

@attr.s(auto_attribs=True)
class Session:
    sessionId: str
    creator: str
    gameServer: str
    players: List[str]
    launched: bool = False

class SessionManager:
    """Lobby sessions, as far as account deletion needs them.

    Every change is pushed to the listeners of the affected session and to
    the listeners of the overview topic.
    """
    OVERVIEW_TOPIC = "sessions"

    sessions: Dict[str, Session]
    queues: ListenerQueues

    def __init__(self):
        self.sessions = {}
        self.queues = ListenerQueues()
        self.logger = Logger.getDefault()
        self._nextId = itertools.count(1)

    def getSession(self, sessionId: str) -> Optional[Session]:
        return self.sessions.get(sessionId)

    def getSessions(self) -> List[Session]:
        return list(self.sessions.values())

    async def createSession(self, creator: str, gameServer: str) -> Session:
        session = Session(sessionId = str(next(self._nextId)), creator = creator,
                gameServer = gameServer, players = [creator])
        self.sessions[session.sessionId] = session
        await self._notifyChanged(session)
        return session

    async def join(self, sessionId: str, name: str):
        session = self._getOrRaise(sessionId)
        if session.launched:
            raise SessionError(f"Session {sessionId} is already launched.")
        if name in session.players:
            raise SessionError(f"{name} already joined session {sessionId}.")
        session.players.append(name)
        await self._notifyChanged(session)

    async def launch(self, sessionId: str):
        session = self._getOrRaise(sessionId)
        if session.launched:
            raise SessionError(f"Session {sessionId} is already launched.")
        session.launched = True
        await self._notifyChanged(session)

    async def removeSessionsOfGameServer(self, gameServer: str):
        for session in [s for s in self.sessions.values() if s.gameServer == gameServer]:
            await self._removeSession(session)

    async def removeFromAllSessions(self, name: str):
        """Take a player out of the lobby entirely.

        Sessions they created and launched sessions they play in are removed.
        From any other unlaunched session they are only dropped as a player.
        """
        for session in list(self.sessions.values()):
            if session.creator == name or (session.launched and name in session.players):
                await self._removeSession(session)
            elif name in session.players:
                session.players.remove(name)
                await self._notifyChanged(session)

    def _getOrRaise(self, sessionId: str) -> Session:
        session = self.sessions.get(sessionId)
        if session is None:
            raise SessionError(f"No such session: {sessionId}")
        return session

    async def _removeSession(self, session: Session):
        del self.sessions[session.sessionId]
        self.logger.info("Sessions", -1, f"Removed session {session.sessionId} of {session.creator}.")
        await self.queues.notify([session.sessionId, self.OVERVIEW_TOPIC],
                {"sessionId": session.sessionId, "removed": True})

    async def _notifyChanged(self, session: Session):
        await self.queues.notify([session.sessionId, self.OVERVIEW_TOPIC], cattr.unstructure(session))
