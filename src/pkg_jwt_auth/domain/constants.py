from enum import Enum


class Status(Enum):
    """
    Outcome of parsing a token, building a key set or verifying a signature.

    Shared by every component; the first failure encountered wins.
    """
    OK = "OK"
    JWT_MISSED = "JWT_MISSED"
    JWT_EXPIRED = "JWT_EXPIRED"
    JWT_BAD_FORMAT = "JWT_BAD_FORMAT"
    JWT_HEADER_PARSE_ERROR = "JWT_HEADER_PARSE_ERROR"
    JWT_HEADER_NO_ALG = "JWT_HEADER_NO_ALG"
    JWT_HEADER_BAD_ALG = "JWT_HEADER_BAD_ALG"
    JWT_HEADER_BAD_KID = "JWT_HEADER_BAD_KID"
    JWT_SIGNATURE_PARSE_ERROR = "JWT_SIGNATURE_PARSE_ERROR"
    JWT_INVALID_SIGNATURE = "JWT_INVALID_SIGNATURE"
    JWT_PAYLOAD_PARSE_ERROR = "JWT_PAYLOAD_PARSE_ERROR"
    JWT_UNKNOWN_ISSUER = "JWT_UNKNOWN_ISSUER"
    JWK_PARSE_ERROR = "JWK_PARSE_ERROR"
    JWK_NO_KEYS = "JWK_NO_KEYS"
    JWK_BAD_KEYS = "JWK_BAD_KEYS"
    JWK_NO_VALID_PUBKEY = "JWK_NO_VALID_PUBKEY"
    KID_ALG_UNMATCH = "KID_ALG_UNMATCH"
    ALG_NOT_IMPLEMENTED = "ALG_NOT_IMPLEMENTED"
    PEM_PUBKEY_BAD_BASE64 = "PEM_PUBKEY_BAD_BASE64"
    PEM_PUBKEY_PARSE_ERROR = "PEM_PUBKEY_PARSE_ERROR"
    JWK_RSA_PUBKEY_PARSE_ERROR = "JWK_RSA_PUBKEY_PARSE_ERROR"
    JWK_EC_PUBKEY_PARSE_ERROR = "JWK_EC_PUBKEY_PARSE_ERROR"
    FAILED_CREATE_EC_KEY = "FAILED_CREATE_EC_KEY"
    FAILED_CREATE_ECDSA_SIGNATURE = "FAILED_CREATE_ECDSA_SIGNATURE"
    AUDIENCE_NOT_ALLOWED = "AUDIENCE_NOT_ALLOWED"
    FAILED_FETCH_PUBKEY = "FAILED_FETCH_PUBKEY"

    @property
    def message(self) -> str:
        return STATUS_MESSAGES.get(self, self.value)

    def __str__(self) -> str:
        return self.value


# Statuses without an entry here use their own name as the message.
STATUS_MESSAGES = {
    Status.JWT_MISSED: "Required JWT token is missing",
    Status.JWT_EXPIRED: "JWT is expired",
    Status.JWT_UNKNOWN_ISSUER: "Unknown issuer",
    Status.AUDIENCE_NOT_ALLOWED: "Audience doesn't match",
    Status.FAILED_FETCH_PUBKEY: "Failed to fetch public key",
}


class KeyType(Enum):
    PEM = "pem"
    JWKS = "jwks"


KTY_RSA = "RSA"
KTY_EC = "EC"

# Algorithms a token header may declare.
SUPPORTED_ALGORITHMS = frozenset({"RS256", "RS384", "RS512", "ES256"})

# Algorithms a JWK may pin, per key type.
RSA_ALGORITHMS = frozenset({"RS256", "RS384", "RS512"})
EC_ALGORITHMS = frozenset({"ES256"})

# ES256 signatures are r || s, each a 32-byte big-endian integer.
ES256_SIGNATURE_SIZE = 64

# "exp" is read as an unsigned 64-bit value; larger numbers are clamped.
EXP_MAX = 2 ** 64 - 1
