from enum import Enum


class ErrorKind(str, Enum):
    STORAGE = "storage"
    NO_KEY_AVAILABLE = "no_key_available"
    KEY_DERIVATION = "key_derivation"
    SIGNING = "signing"


class KeyServiceError(Exception):
    """Base error for key storage, selection and signing failures."""
    kind: ErrorKind

class StorageError(KeyServiceError):
    """Persistence layer unavailable or rejected an operation."""
    kind = ErrorKind.STORAGE

class NoKeyAvailable(KeyServiceError):
    """No key of the requested expiry class exists."""
    kind = ErrorKind.NO_KEY_AVAILABLE

class KeyDerivationError(KeyServiceError):
    """Stored key material could not be turned into a public JWK."""
    kind = ErrorKind.KEY_DERIVATION

class SigningError(KeyServiceError):
    """Key material or algorithm rejected by the signing primitive."""
    kind = ErrorKind.SIGNING
