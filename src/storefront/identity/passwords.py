"""Salted PBKDF2-SHA256 password hashes in `pbkdf2_sha256$<iterations>$<salt>$<digest>` form."""

import hashlib
import os
import secrets

ALGORITHM = "pbkdf2_sha256"
ITERATIONS = int(os.environ.get("STOREFRONT_PASSWORD_ITERATIONS", "390000"))


def hash_password(password: str, salt: str | None = None, iterations: int = ITERATIONS) -> str:
    salt = salt or secrets.token_hex(16)
    digest = hashlib.pbkdf2_hmac("sha256", password.encode(), salt.encode(), iterations).hex()
    return f"{ALGORITHM}${iterations}${salt}${digest}"


def verify_password(password: str, encoded: str | None) -> bool:
    if not encoded or encoded.count("$") != 3:
        return False

    algorithm, iterations, salt, _ = encoded.split("$")
    if algorithm != ALGORITHM or not iterations.isdigit():
        return False

    candidate = hash_password(password, salt=salt, iterations=int(iterations))
    return secrets.compare_digest(candidate, encoded)
