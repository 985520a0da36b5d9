import secrets

ID_BYTES = 8


def generate_id() -> str:
    """Random 16-char hex id. Collisions are not checked."""
    return secrets.token_hex(ID_BYTES)
