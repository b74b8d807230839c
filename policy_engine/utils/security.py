# policy_engine/utils/security.py
"""Password fingerprinting for the policy engine
PBKDF2-HMAC-SHA512 by default, bcrypt as an alternative backend
Plaintext passwords are never returned or stored by anything in this module
"""
import base64
import hashlib
import hmac
import secrets
from dataclasses import dataclass

import bcrypt

from policy_engine.exceptions import UnsupportedFingerprint

PBKDF2_ITERATIONS = 600000
HASH_ALGORITHM = 'sha512'
KEY_LENGTH = 64  # 512 bits
SALT_BYTES = 32


@dataclass(frozen=True)
class PasswordFingerprint:
    """Salted one-way digest of a password; comparable for equality only"""
    algorithm: str
    salt: str
    digest: str

    def __repr__(self):
        return f'<PasswordFingerprint {self.algorithm}>'


def generate_salt(length: int = SALT_BYTES) -> str:
    """Generate cryptographically secure random salt, hex-encoded"""
    return secrets.token_hex(length)


def _encode(password) -> bytes:
    return (password or '').encode('utf-8')


class Pbkdf2Fingerprinter:
    """
    PBKDF2-HMAC-SHA512 with an explicit per-fingerprint salt

    The iteration count is recorded in the algorithm tag
    ('pbkdf2_sha512$600000') so raising the cost later does not
    invalidate fingerprints already kept in history.
    """
    family = 'pbkdf2_sha512'

    def __init__(self, iterations: int = PBKDF2_ITERATIONS):
        self.iterations = iterations

    @property
    def algorithm(self) -> str:
        return f'{self.family}${self.iterations}'

    @staticmethod
    def _derive(password, salt: str, iterations: int) -> str:
        dk = hashlib.pbkdf2_hmac(
            HASH_ALGORITHM,
            _encode(password),
            bytes.fromhex(salt),
            iterations,
            dklen=KEY_LENGTH
        )
        return dk.hex()

    def fingerprint(self, password) -> PasswordFingerprint:
        salt = generate_salt()
        return PasswordFingerprint(self.algorithm, salt,
                                   self._derive(password, salt, self.iterations))

    def matches(self, password, fingerprint: PasswordFingerprint) -> bool:
        """Re-derive with the stored salt and compare in constant time"""
        if _family_of(fingerprint) != self.family:
            return verify_fingerprint(password, fingerprint)
        _, _, iterations = fingerprint.algorithm.partition('$')
        computed = self._derive(password, fingerprint.salt, int(iterations or PBKDF2_ITERATIONS))
        return hmac.compare_digest(computed, fingerprint.digest)


class BcryptFingerprinter:
    """
    bcrypt over an HMAC-SHA256 pre-hash of password and explicit salt

    bcrypt only reads the first 72 bytes of its input, so password and salt
    are folded into a fixed 44-byte value before hashing.
    """
    family = algorithm = 'bcrypt'  # cost lives inside the bcrypt hash itself

    def __init__(self, rounds: int = 12):
        self.rounds = rounds

    @staticmethod
    def _prehash(password, salt: str) -> bytes:
        mac = hmac.new(bytes.fromhex(salt), _encode(password), hashlib.sha256)
        return base64.b64encode(mac.digest())

    def fingerprint(self, password) -> PasswordFingerprint:
        salt = generate_salt()
        hashed = bcrypt.hashpw(self._prehash(password, salt), bcrypt.gensalt(rounds=self.rounds))
        return PasswordFingerprint(self.algorithm, salt, hashed.decode('utf-8'))

    def matches(self, password, fingerprint: PasswordFingerprint) -> bool:
        if _family_of(fingerprint) != self.family:
            return verify_fingerprint(password, fingerprint)
        return bcrypt.checkpw(self._prehash(password, fingerprint.salt),
                              fingerprint.digest.encode('utf-8'))


def _family_of(fingerprint: PasswordFingerprint) -> str:
    return fingerprint.algorithm.partition('$')[0]


# Verification only; cost parameters are read from the stored fingerprint
BACKENDS = {
    Pbkdf2Fingerprinter.family: Pbkdf2Fingerprinter,
    BcryptFingerprinter.family: BcryptFingerprinter,
}


def verify_fingerprint(password, fingerprint: PasswordFingerprint) -> bool:
    """
    Check a password against a fingerprint made by any known backend

    Switching PASSWORD_HASHER only changes how new fingerprints are made;
    credentials and history written by the previous backend stay verifiable.
    """
    family = _family_of(fingerprint)
    backend = BACKENDS.get(family)
    if backend is None:
        raise UnsupportedFingerprint(f'No backend can verify a {family} fingerprint')
    return backend().matches(password, fingerprint)


def build_fingerprinter(settings):
    """Pick the fingerprint backend named by PASSWORD_HASHER"""
    name = settings.get('PASSWORD_HASHER', 'pbkdf2')
    if name == 'pbkdf2':
        return Pbkdf2Fingerprinter(int(settings.get('PBKDF2_ITERATIONS', PBKDF2_ITERATIONS)))
    if name == 'bcrypt':
        return BcryptFingerprinter(int(settings.get('BCRYPT_ROUNDS', 12)))
    raise ValueError(f'Unknown PASSWORD_HASHER: {name}')
