"""Hash utilities for twig."""

import hashlib


def hash_object(data: bytes) -> str:
    """
    Compute SHA-1 hash of data.
    
    Args:
        data: Bytes to hash
        
    Returns:
        40-character hex string
    """
    return hashlib.sha1(data).hexdigest()


def object_header(kind: str, size: int) -> bytes:
    """Loose object header: ``<kind> <size>\\0``."""
    return f"{kind} {size}\0".encode()


def hash_raw_object(data: bytes, kind: str) -> str:
    """
    Compute the content address of a raw object.
    
    Objects are hashed with a header containing the kind and size,
    exactly as the object store names them.
    
    Args:
        data: Object body
        kind: Object kind ('blob', 'tree' or 'commit')
        
    Returns:
        40-character hex string
    """
    return hash_object(object_header(kind, len(data)) + data)
