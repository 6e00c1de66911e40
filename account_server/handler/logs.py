import attr

from account_server.account_service import AccountService, AdminRequiredError
from account_server.handler.base import BaseHandler

class LogsHandler(BaseHandler):
    accounts: AccountService # See https://github.com/google/pytype/issues/652

    def get(self):
        caller = self.verifyAuthentication()
        if not caller.isAdmin:
            self.reject(AdminRequiredError(caller, "read the logs"))
        try:
            minVerbosity = int(self.get_argument("minVerbosity", "0"))
            maxVerbosity = int(self.get_argument("maxVerbosity", "3"))
        except ValueError as e:
            self.logWarn(f"Non-numeric verbosity: {e}")
            self.set_status(400)
            return
        for verbosity in (minVerbosity, maxVerbosity):
            if verbosity < 0 or verbosity > 3:
                self.logWarn(f"Got invalid value ({verbosity}) for verbosity.")
                self.set_status(400)
                self.write(f"Verbosity must be between 0 and 3 inclusive, got {verbosity}.")
                return
        logs = self.logger.getLogs(minVerbosity=minVerbosity, maxVerbosity=maxVerbosity)
        self.write({'logs': [attr.asdict(log) for log in logs]})
