"""Operational errors raised by the password policy engine

Policy decisions (weak or reused passwords) are returned as values, never raised.
These exceptions cover faults the caller must surface as operational failures.
"""


class PolicyEngineError(Exception):
    """Base class for engine errors"""
    status_code = 500
    error_code = 'policy_engine_error'


class AccountNotFound(PolicyEngineError):
    status_code = 404
    error_code = 'account_not_found'


class InvalidCredentials(PolicyEngineError):
    status_code = 401
    error_code = 'invalid_credentials'


class UnsupportedFingerprint(PolicyEngineError):
    """Stored fingerprint was produced by an algorithm this service cannot verify"""
    status_code = 500
    error_code = 'unsupported_fingerprint'


class HistoryPersistenceError(PolicyEngineError):
    """Password history could not be written; the transaction was rolled back"""
    status_code = 503
    error_code = 'history_unavailable'


class AccountExists(PolicyEngineError):
    status_code = 409
    error_code = 'account_exists'
