from account_server.account_service import AccountService, AccountException
from account_server.forms import ColourForm
from account_server.handler.base import BaseHandler

class ColourHandler(BaseHandler):
    accounts: AccountService # See https://github.com/google/pytype/issues/652

    def get(self, name: str):
        caller = self.verifyAuthentication()
        try:
            colour = self.accounts.getColour(caller, name)
        except AccountException as e:
            self.reject(e)
        self.writeJson(ColourForm(colour = colour))

    def post(self, name: str):
        caller = self.verifyAuthentication()
        form = self.parseBody(ColourForm)
        try:
            self.accounts.updateColour(caller, name, form)
        except AccountException as e:
            self.reject(e)
        self.set_status(200)
