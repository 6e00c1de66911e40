from account_server.account_service import AccountService, AccountException
from account_server.handler.base import BaseHandler

class UsersHandler(BaseHandler):
    accounts: AccountService # See https://github.com/google/pytype/issues/652

    def get(self):
        caller = self.verifyAuthentication()
        try:
            players = self.accounts.getPlayers(caller)
        except AccountException as e:
            self.reject(e)
        self.writeJson(players)
