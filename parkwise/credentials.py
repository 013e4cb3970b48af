"""Password storage and checking, kept away from the rest of the app.

Login and registration only ever talk to a ``CredentialVerifier`` so the
scheme can change without touching anything else.
"""
import hmac

from parkwise.extensions import bcrypt


class CredentialVerifier:
    scheme = None

    def hash(self, password: str) -> str:
        raise NotImplementedError

    def verify(self, stored: str, candidate: str) -> bool:
        raise NotImplementedError


class BcryptVerifier(CredentialVerifier):
    scheme = 'bcrypt'

    def hash(self, password):
        return bcrypt.generate_password_hash(password).decode('utf-8')

    def verify(self, stored, candidate):
        try:
            return bcrypt.check_password_hash(stored, candidate)
        except ValueError:
            # stored value is not a bcrypt hash (e.g. a legacy cleartext row)
            return False


class PlaintextVerifier(CredentialVerifier):
    """Stores passwords as given. Only for parity with legacy data."""

    scheme = 'plaintext'

    def hash(self, password):
        return password

    def verify(self, stored, candidate):
        return hmac.compare_digest(stored.encode('utf-8'), candidate.encode('utf-8'))


VERIFIERS = {
    BcryptVerifier.scheme: BcryptVerifier,
    PlaintextVerifier.scheme: PlaintextVerifier,
}


def make_verifier(scheme):
    try:
        return VERIFIERS[scheme]()
    except KeyError:
        raise ValueError(f"Unknown PASSWORD_SCHEME {scheme!r}; expected one of {sorted(VERIFIERS)}")
