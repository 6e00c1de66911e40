import re
from typing import Optional, Any

import attr
import cattr

from account_server.player import Role

NAME_PATTERN = re.compile(r"[A-Za-z0-9_.\-]+")
COLOUR_PATTERN = re.compile(r"#?([0-9a-fA-F]{3}|[0-9a-fA-F]{6})")
# bcrypt ignores (or refuses) anything past this many bytes.
MAX_PASSWORD_BYTES = 72

PASSWORD_POLICY_MESSAGE = ("Does not comply to password policy. (At least one uppercase, one lowercase, "
        "one number and one special character required.)")

def validateNameString(name: str) -> bool:
    return NAME_PATTERN.fullmatch(name) is not None

def validatePasswordString(password: str) -> bool:
    if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        return False
    hasUpper = any(c.isupper() for c in password)
    hasLower = any(c.islower() for c in password)
    hasDigit = any(c.isdigit() for c in password)
    hasSpecial = any(not c.isalnum() and not c.isspace() for c in password)
    return hasUpper and hasLower and hasDigit and hasSpecial

def validateColourString(colour: str) -> bool:
    return COLOUR_PATTERN.fullmatch(colour) is not None

@attr.s(auto_attribs=True, frozen=True)
class AccountForm:
    name: str
    password: str
    preferredColour: str
    role: str

    def validate(self) -> Optional[str]:
        "Returns a description of the first problem found, or None."
        if not validateNameString(self.name):
            return "Name must only contain letters, digits, '_', '-' and '.'."
        if not validatePasswordString(self.password):
            return PASSWORD_POLICY_MESSAGE
        if not validateColourString(self.preferredColour):
            return "Provided colour is not a valid Hexadecimal colour-string."
        if self.role not in [role.value for role in Role]:
            return f"Unknown role {self.role}."
        return None

@attr.s(auto_attribs=True, frozen=True)
class PasswordForm:
    oldPassword: str
    nextPassword: str

@attr.s(auto_attribs=True, frozen=True)
class ColourForm:
    colour: str

def structureForm(data: Any, formClass):
    """Build a form from decoded JSON.

    Every field of the form must be present as a string; unknown keys are
    ignored. Raises ValueError otherwise.
    """
    if not isinstance(data, dict):
        raise ValueError(f"Expected a JSON object, got {type(data).__name__}.")
    for field in attr.fields(formClass):
        if not isinstance(data.get(field.name), str):
            raise ValueError(f"Missing or non-string field: {field.name}.")
    return cattr.structure(data, formClass)
