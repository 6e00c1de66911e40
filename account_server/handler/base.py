import json
from typing import ClassVar, Optional

import cattr
import tornado.escape
import tornado.web

from account_server.account_service import AccountService, AccountException, AdminRequiredError
from account_server.forms import structureForm
from account_server.logger import Logger
from account_server.player import Caller
from account_server.tokens import TokenError

class BaseHandler(tornado.web.RequestHandler):
    logger: Logger
    accounts: AccountService
    requestId: int
    nextRequestId: ClassVar[int] = 0
    caller: Optional[Caller] = None

    def initialize(self, accounts):
        self.accounts = accounts

    def prepare(self):
        if self.request.method == "OPTIONS":
            return # Skip logging for options from CORS pre-flight requests.
        self.logger = Logger.getDefault()
        self.requestId = self.__class__.nextRequestId
        self.__class__.nextRequestId += 1

        self.logInfo(f"Started {self.request.method} {self.request.path}")

    def on_finish(self):
        if self.request.method == "OPTIONS":
            return # Skip logging for options from CORS pre-flight requests.
        self.logInfo(f"Finished with {self.get_status()}")

    def set_default_headers(self):
        self.set_header("Access-Control-Allow-Origin", "*")
        self.set_header("Access-Control-Allow-Headers", "x-requested-with, authorization, content-type")
        self.set_header("Access-Control-Allow-Methods", "GET, OPTIONS, POST, PUT, DELETE")

    def options(self, *args):
        pass

    def reply401(self):
        self.set_status(401) # Unauthorized
        self.set_header("WWW-Authenticate", 'Bearer')
        raise tornado.web.Finish()

    def verifyAuthentication(self) -> Caller:
        authorization = self.request.headers.get("authorization", "")
        if authorization[:7] == "Bearer ":
            try:
                self.caller = self.accounts.tokenAuthority.resolveCaller(authorization[7:])
                return self.caller
            except TokenError as e:
                self.logWarn(f"Authorization error: {e}")
        self.reply401()

    def parseBody(self, formClass):
        try:
            data = tornado.escape.json_decode(self.request.body)
            return structureForm(data, formClass)
        except ValueError as e:
            self.logWarn(f"Bad {formClass.__name__} body {self.request.body!r}: {e}")
            self.set_status(400) # Bad request
            self.write(f"Malformed request body: {e}")
            raise tornado.web.Finish()

    def reject(self, e: AccountException):
        "Turn a rejected request into a client error carrying the reason."
        self.logWarn(f"Rejected: {e!r}")
        if isinstance(e, AdminRequiredError):
            self.set_status(403) # Forbidden
        else:
            self.set_status(400) # Bad request
        self.write(str(e))
        raise tornado.web.Finish()

    def writeJson(self, data):
        self.set_header("Content-Type", "application/json; charset=utf-8")
        self.write(json.dumps(cattr.unstructure(data)))

    # Logging methods
    def logInfo(self, msg: str):
        self.logger.info(self.__class__.__name__, self.requestId, msg, caller=self.callerName)

    def logWarn(self, msg: str):
        self.logger.warn(self.__class__.__name__, self.requestId, msg, caller=self.callerName)

    @property
    def callerName(self) -> Optional[str]:
        return self.caller.name if self.caller else None
