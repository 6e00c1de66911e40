import json
import unittest
import tempfile
import os

import tornado.testing
import tornado.web

from account_server.handler.colour import ColourHandler
from account_server.logger import Logger, MockLogger
import test_data
from test_data import admin, alice, bob, patchCaller

class TestColourHandler(tornado.testing.AsyncHTTPTestCase):
    def get_app(self):
        Logger.setDefault(MockLogger())
        self.tmpDir = tempfile.TemporaryDirectory()
        self.accounts = test_data.makeAccounts(os.path.join(self.tmpDir.name, "accounts.db"))
        self.db = self.accounts._db
        test_data.addPlayers(self.accounts)

        return tornado.web.Application([
            (r"/api/users/([^/]+)/colour", ColourHandler, dict(accounts=self.accounts))])

    def tearDown(self):
        super().tearDown()
        self.tmpDir.cleanup()

    def postColour(self, name, colour):
        return self.fetch(f"/api/users/{name}/colour", method="POST", body=json.dumps({"colour": colour}))

    def test_getOwnColour(self):
        with patchCaller(bob):
            resp = self.fetch("/api/users/bob/colour")

        self.assertEqual(resp.code, 200)
        self.assertEqual(json.loads(resp.body), {"colour": "#112233"})

    def test_getOtherColour(self):
        with patchCaller(alice):
            resp = self.fetch("/api/users/bob/colour")

        self.assertEqual(resp.code, 400)
        self.assertEqual(resp.body, b"Colour can not be queried on behalf of another user.")

    def test_getMissingColour(self):
        with patchCaller(admin):
            resp = self.fetch("/api/users/nobody/colour")

        self.assertEqual(resp.code, 400)
        self.assertEqual(resp.body, b"Colour can not be queried. No such user.")

    def test_updateOwnColour(self):
        with patchCaller(alice):
            resp = self.postColour("alice", "#FFEEDD")

        self.assertEqual(resp.code, 200)
        self.assertEqual(self.db.getPlayer("alice").preferredColour, "#FFEEDD")

    def test_adminUpdatesColour(self):
        with patchCaller(admin):
            resp = self.postColour("alice", "01FFFF")

        self.assertEqual(resp.code, 200)
        self.assertEqual(self.db.getPlayer("alice").preferredColour, "01FFFF")

    def test_invalidColour(self):
        for colour in ["red", "#ZZZ"]:
            with self.subTest(colour=colour):
                with patchCaller(alice):
                    resp = self.postColour("alice", colour)
                self.assertEqual(resp.code, 400)
                self.assertEqual(resp.body, b"Provided colour is not a valid Hexadecimal colour-string.")
        self.assertEqual(self.db.getPlayer("alice").preferredColour, "#A1B2C3")

    def test_updateOtherColour(self):
        for colour in ["#FFEEDD", "red"]:
            with self.subTest(colour=colour):
                with patchCaller(bob):
                    resp = self.postColour("alice", colour)
                self.assertEqual(resp.code, 400)
                self.assertEqual(resp.body, b"Colour can not be altered on behalf of another user.")
        self.assertEqual(self.db.getPlayer("alice").preferredColour, "#A1B2C3")

    def test_updateMissingColour(self):
        with patchCaller(admin):
            resp = self.postColour("nobody", "#FFEEDD")

        self.assertEqual(resp.code, 400)
        self.assertEqual(resp.body, b"Colour can not be updated. No such user.")

if __name__ == "__main__":
    unittest.main()
