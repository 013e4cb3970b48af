import pytest

from parkwise.credentials import BcryptVerifier, PlaintextVerifier, make_verifier


def test_bcrypt_hashes_and_verifies(app):
    verifier = BcryptVerifier()
    stored = verifier.hash('password123')

    assert stored != 'password123'
    assert verifier.verify(stored, 'password123')
    assert not verifier.verify(stored, 'password124')


def test_bcrypt_rejects_non_hash_values(app):
    assert not BcryptVerifier().verify('password123', 'password123')


def test_plaintext_keeps_legacy_behaviour():
    verifier = PlaintextVerifier()
    assert verifier.hash('password123') == 'password123'
    assert verifier.verify('password123', 'password123')
    assert not verifier.verify('password123', 'Password123')


def test_make_verifier():
    assert isinstance(make_verifier('bcrypt'), BcryptVerifier)
    assert isinstance(make_verifier('plaintext'), PlaintextVerifier)
    with pytest.raises(ValueError):
        make_verifier('md5')
