import sqlite3
from time import strftime
from typing import Optional, List

import attr

ERROR = 1
WARN = 2
INFO = 3
LEVEL_NAMES = { ERROR: "ERROR", WARN: "WARN", INFO: "INFO" }

@attr.s(auto_attribs=True, frozen=True)
class LogEntry:
    time: str
    caller: str
    requestId: int
    handler: str
    msg: str
    verbosity: int

class Logger:
    defaultInstance = None
    printVerbosity: int

    @classmethod
    def getDefault(cls):
        assert cls.defaultInstance is not None
        return cls.defaultInstance

    @classmethod
    def setDefault(cls, newDefault):
        cls.defaultInstance = newDefault

    def __init__(self, dbPath: str, printVerbosity: int = 0, debug=False):
        self.printVerbosity = printVerbosity
        self.conn = sqlite3.connect(dbPath, isolation_level=None)

        sqlite3.enable_callback_tracebacks(debug)
        self.__createTables()

    def __del__(self):
        self.conn.close()

    def __createTables(self):
        self.conn.execute("""
        CREATE TABLE IF NOT EXISTS logs(
            time TEXT,
            caller TEXT,
            requestId INTEGER,
            handler TEXT,
            msg TEXT,
            verbosity INTEGER
        );""")

    def getLogs(self, minVerbosity=0, maxVerbosity=3) -> List[LogEntry]:
        res = self.conn.execute("""
        SELECT time, caller, requestId, handler, msg, verbosity
        FROM logs
        WHERE verbosity >= :minVerbosity AND verbosity <= :maxVerbosity
        ORDER BY rowid DESC
        LIMIT 100
        """, {
            'minVerbosity': minVerbosity,
            'maxVerbosity': maxVerbosity,
        })
        return [ LogEntry(*row) for row in res ]

    def error(self, handler: str, requestId: int, msg: str, caller: Optional[str] = None):
        self._log(handler, requestId, msg, verbosity=ERROR, caller=caller)

    def warn(self, handler: str, requestId: int, msg: str, caller: Optional[str] = None):
        self._log(handler, requestId, msg, verbosity=WARN, caller=caller)

    def info(self, handler: str, requestId: int, msg: str, caller: Optional[str] = None):
        self._log(handler, requestId, msg, verbosity=INFO, caller=caller)

    def _log(self, handler: str, requestId: int, msg: str, verbosity: int, caller: Optional[str] = None):
        if self.printVerbosity >= verbosity:
            self._print(handler, requestId, msg, verbosity)
        self.conn.execute(
                "INSERT INTO logs (time, caller, requestId, handler, msg, verbosity) "
                "VALUES (datetime('now'), :caller, :requestId, :handler, :msg, :verbosity);",
                {
                    "caller": caller if caller else "NULL",
                    "requestId": requestId,
                    "handler": handler,
                    "msg": msg,
                    "verbosity": verbosity,
                })

    @staticmethod
    def _print(handler: str, requestId: int, msg: str, verbosity: int):
        levelName = LEVEL_NAMES.get(verbosity, "???")
        timeStr = strftime("%a %H:%M:%S")
        print(f"{levelName}: {timeStr} {handler} {requestId}: {msg}")

class MockLogger(Logger):
    "Prints every entry and keeps nothing. Used by tests."

    def __init__(self):
        self.printVerbosity = INFO

    def getLogs(self, minVerbosity=0, maxVerbosity=3) -> List[LogEntry]:
        return []

    def _log(self, handler: str, requestId: int, msg: str, verbosity: int, caller: Optional[str] = None):
        self._print(handler, requestId, msg, verbosity)

    def __del__(self):
        pass
