import unittest

from hypothesis import given, assume, strategies as st

from account_server.forms import AccountForm, ColourForm, PasswordForm, structureForm, \
        validateColourString, validatePasswordString, validateNameString

class TestValidation(unittest.TestCase):
    def test_passwordPolicy(self):
        self.assertTrue(validatePasswordString("Abc123!x"))
        self.assertTrue(validatePasswordString("aB3$"))
        self.assertFalse(validatePasswordString("abc123!x")) # No uppercase
        self.assertFalse(validatePasswordString("ABC123!X")) # No lowercase
        self.assertFalse(validatePasswordString("Abcdef!x")) # No digit
        self.assertFalse(validatePasswordString("Abc123xx")) # No special character
        self.assertFalse(validatePasswordString("Abc 123x")) # Whitespace isn't special
        self.assertFalse(validatePasswordString(""))

    def test_passwordTooLongForBcrypt(self):
        self.assertTrue(validatePasswordString("Ab1!" + "x" * 68))
        self.assertFalse(validatePasswordString("Ab1!" + "x" * 69))

    def test_colour(self):
        for colour in ["#A1B2C3", "#a1b2c3", "01FFFF", "#abc", "FFF"]:
            with self.subTest(colour=colour):
                self.assertTrue(validateColourString(colour))
        for colour in ["red", "#ZZZ", "#12345", "#1234567", "", "#", "##ABC"]:
            with self.subTest(colour=colour):
                self.assertFalse(validateColourString(colour))

    def test_name(self):
        self.assertTrue(validateNameString("maex"))
        self.assertTrue(validateNameString("player_1.b-c"))
        self.assertFalse(validateNameString(""))
        self.assertFalse(validateNameString("a/b"))
        self.assertFalse(validateNameString("a b"))

class TestValidationProperties(unittest.TestCase):
    @given(st.sampled_from([3, 6]), st.booleans(), st.data())
    def test_hexColoursAccepted(self, length: int, withHash: bool, data):
        digits = data.draw(st.text(alphabet="0123456789abcdefABCDEF", min_size=length, max_size=length))
        colour = ("#" if withHash else "") + digits
        self.assertTrue(validateColourString(colour))

    @given(st.text(alphabet="0123456789abcdefABCDEF", max_size=8))
    def test_wrongLengthRejected(self, digits: str):
        assume(len(digits) not in (3, 6))
        self.assertFalse(validateColourString(digits))
        self.assertFalse(validateColourString("#" + digits))

class TestAccountForm(unittest.TestCase):
    def makeForm(self, **overrides):
        fields = dict(name = "alice", password = "Abc123!x", preferredColour = "#A1B2C3", role = "ROLE_PLAYER")
        fields.update(overrides)
        return AccountForm(**fields)

    def test_valid(self):
        self.assertIsNone(self.makeForm().validate())
        self.assertIsNone(self.makeForm(role = "ROLE_ADMIN").validate())

    def test_firstProblemWins(self):
        self.assertIn("password policy", self.makeForm(password = "x", preferredColour = "red").validate())
        self.assertIn("colour", self.makeForm(preferredColour = "red", role = "ROLE_GOD").validate())
        self.assertIn("role", self.makeForm(role = "ROLE_GOD").validate())
        self.assertIn("Name", self.makeForm(name = "a b").validate())

class TestStructureForm(unittest.TestCase):
    def test_structure(self):
        form = structureForm({"oldPassword": "a", "nextPassword": "b", "extra": 1}, PasswordForm)
        self.assertEqual(form, PasswordForm(oldPassword = "a", nextPassword = "b"))

    def test_missingField(self):
        with self.assertRaises(ValueError):
            structureForm({"oldPassword": "a"}, PasswordForm)

    def test_nonStringField(self):
        with self.assertRaises(ValueError):
            structureForm({"colour": 123}, ColourForm)

    def test_notAnObject(self):
        with self.assertRaises(ValueError):
            structureForm(["#FFFFFF"], ColourForm)

if __name__ == "__main__":
    unittest.main()
