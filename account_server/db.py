import sqlite3
from typing import Optional, List

from account_server.logger import Logger
from account_server.player import Player, PlayerSummary, Role

class Db:
    DEFAULT_DB_PATH = "data/accounts.db"
    SELECT_PLAYER_STATEMENT = "SELECT name, preferredColour, role, password FROM players"

    debug: bool
    dbPath: str

    def __init__(self, dbPath=None, debug=False):
        self.debug = debug
        self.dbPath = self.DEFAULT_DB_PATH if dbPath is None else dbPath
        sqlite3.enable_callback_tracebacks(debug)
        self.__createTables()
        self.logger = Logger.getDefault()

    def __createTables(self):
        with self.makeConnection() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS players(
                name TEXT PRIMARY KEY,
                password TEXT NOT NULL,
                preferredColour TEXT NOT NULL,
                role TEXT NOT NULL CHECK (role IN ('ROLE_PLAYER', 'ROLE_ADMIN'))
                );""")

    def makeConnection(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.dbPath, isolation_level=None)
        # Enable Write-Ahead Logging: https://www.sqlite.org/wal.html
        conn.execute("PRAGMA journal_mode=WAL;")
        return conn

    @staticmethod
    def __extractPlayerFromRow(row) -> Player:
        return Player(
                name = row[0],
                preferredColour = row[1],
                role = Role(row[2]),
                passwordHash = row[3])

    def exists(self, name: str) -> bool:
        with self.makeConnection() as conn:
            res = conn.execute("SELECT 1 FROM players WHERE name = ?;", (name, )).fetchone()
        return res is not None

    def getPlayer(self, name: str) -> Optional[Player]:
        with self.makeConnection() as conn:
            res = conn.execute(self.SELECT_PLAYER_STATEMENT + " WHERE name = ?;", (name, )).fetchone()
        if res:
            return Db.__extractPlayerFromRow(res)
        return None

    def getPlayers(self) -> List[Player]:
        with self.makeConnection() as conn:
            res = conn.execute(self.SELECT_PLAYER_STATEMENT + " ORDER BY name;").fetchall()
        return [ Db.__extractPlayerFromRow(r) for r in res ]

    def getPlayerSummaries(self) -> List[PlayerSummary]:
        return [ player.summary() for player in self.getPlayers() ]

    def addPlayer(self, player: Player):
        """Insert a new player, raising ValueError if the name is already taken."""
        try:
            with self.makeConnection() as conn:
                conn.execute("""
                    INSERT INTO players (name, password, preferredColour, role)
                    VALUES (:name, :password, :preferredColour, :role);""",
                    {"name": player.name, "password": player.passwordHash,
                        "preferredColour": player.preferredColour, "role": player.role.value})
        except sqlite3.IntegrityError as err:
            # This is likely because the name was already taken.
            self.logger.warn("DB", -1, f"IntegrityError when adding a new player: {err}", caller=player.name)
            raise ValueError(f"Name {player.name} is already taken.")

    def savePlayer(self, player: Player):
        "Insert or overwrite the record stored under the player's name."
        with self.makeConnection() as conn:
            conn.execute("""
                INSERT INTO players (name, password, preferredColour, role)
                VALUES (:name, :password, :preferredColour, :role)
                ON CONFLICT(name) DO UPDATE SET
                    password = excluded.password,
                    preferredColour = excluded.preferredColour,
                    role = excluded.role;""",
                {"name": player.name, "password": player.passwordHash,
                    "preferredColour": player.preferredColour, "role": player.role.value})

    def deletePlayer(self, name: str):
        with self.makeConnection() as conn:
            conn.execute("DELETE FROM players WHERE name = :name", { "name": name })
