"""
Password hashing

Unsalted SHA-256 hex digests, matching the format already stored in the record files.
"""
import hashlib


def hash_password(password: str) -> str:
    return hashlib.sha256(password.encode("utf-8")).hexdigest()


def verify_password(password: str, hashed_password: str) -> bool:
    """Empty stored hashes (walk-in patients) never verify"""
    if not hashed_password:
        return False
    return hash_password(password) == hashed_password
