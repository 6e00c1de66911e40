import bcrypt

from account_server.forms import MAX_PASSWORD_BYTES

class BcryptHasher:
    "One-way hashing of player passwords."
    DEFAULT_ROUNDS = 12

    rounds: int

    def __init__(self, rounds: int = DEFAULT_ROUNDS):
        self.rounds = rounds

    def hash(self, plain: str) -> str:
        return bcrypt.hashpw(plain.encode("utf-8"), bcrypt.gensalt(rounds=self.rounds)).decode("utf-8")

    def verify(self, plain: str, digest: str) -> bool:
        encoded = plain.encode("utf-8")
        # Newer bcrypt releases raise instead of truncating long input.
        if len(encoded) > MAX_PASSWORD_BYTES:
            return False
        try:
            return bcrypt.checkpw(encoded, digest.encode("utf-8"))
        except ValueError:
            # The stored digest is not a bcrypt hash.
            return False
