from account_server.account_service import AccountService, AccountException, AdminRequiredError
from account_server.forms import AccountForm
from account_server.handler.base import BaseHandler

class UserHandler(BaseHandler):
    accounts: AccountService # See https://github.com/google/pytype/issues/652

    def get(self, name: str):
        caller = self.verifyAuthentication()
        try:
            player = self.accounts.getPlayerDetails(caller, name)
        except AccountException as e:
            self.reject(e)
        self.writeJson(player)

    # Player names double as ids, so creation is a PUT on the player itself.
    def put(self, name: str):
        caller = self.verifyAuthentication()
        if not caller.isAdmin:
            self.reject(AdminRequiredError(caller, "add players"))
        form = self.parseBody(AccountForm)
        try:
            self.accounts.registerPlayer(caller, name, form)
        except AccountException as e:
            self.reject(e)
        self.write("Player added.")

    async def delete(self, name: str):
        caller = self.verifyAuthentication()
        try:
            await self.accounts.deletePlayer(caller, name)
        except AccountException as e:
            self.reject(e)
        self.logInfo(f"Deleted {name}.")
        self.set_status(200)
