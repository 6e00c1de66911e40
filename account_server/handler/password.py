from account_server.account_service import AccountService, AccountException
from account_server.forms import PasswordForm
from account_server.handler.base import BaseHandler

class PasswordHandler(BaseHandler):
    accounts: AccountService # See https://github.com/google/pytype/issues/652

    def post(self, name: str):
        caller = self.verifyAuthentication()
        form = self.parseBody(PasswordForm)
        try:
            self.accounts.updatePassword(caller, name, form)
        except AccountException as e:
            self.reject(e)
        self.set_status(200)
