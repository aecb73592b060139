import hashlib
import secrets
import string
from collections.abc import Callable
from datetime import datetime

from ingest.upload.models import GeneratedIdentity, UploadRequest

TIMESTAMP_FORMAT = "%Y%m%d%H%M%S"
TOKEN_LENGTH = 8
HASH_NAME_LENGTH = 40
HASH_FRAGMENT_LENGTH = 8

# Letters and digits without the look-alikes 0/O/o and 1/l/I.
UNAMBIGUOUS_ALPHABET = "".join(
    c for c in string.ascii_letters + string.digits if c not in "0Oo1lI"
)


def random_token(length: int = TOKEN_LENGTH) -> str:
    """Return a random token drawn from the unambiguous alphabet."""
    return "".join(secrets.choice(UNAMBIGUOUS_ALPHABET) for _ in range(length))


def hash_name(extension: str) -> str:
    """Random stored-name for an upload, like a framework's hashed upload name."""
    token = secrets.token_hex(HASH_NAME_LENGTH // 2)
    return f"{token}.{extension}" if extension else token


def join_path(base_path: str, file_name: str) -> str:
    """Join the base path and file name with exactly one separator."""
    base = base_path.rstrip("/")
    return f"{base}/{file_name}" if base else file_name


def generate_file_name(
    request: UploadRequest,
    now: Callable[[], datetime] = datetime.now,
) -> str:
    """Build `{timestamp}_{token}_{hash8}.{extension}` for the request.

    The hash fragment is taken from the request's hash name rather than its
    bytes, so it separates same-second uploads of one file name and says
    nothing about content equality.
    """
    fragment = hashlib.md5(
        hash_name(request.extension).encode(), usedforsecurity=False
    ).hexdigest()[:HASH_FRAGMENT_LENGTH]
    stem = f"{now().strftime(TIMESTAMP_FORMAT)}_{random_token()}_{fragment}"
    return f"{stem}.{request.extension}" if request.extension else stem


def generate_identity(
    request: UploadRequest,
    base_path: str,
    now: Callable[[], datetime] = datetime.now,
) -> GeneratedIdentity:
    file_name = generate_file_name(request, now=now)
    return GeneratedIdentity(file_name=file_name, path=join_path(base_path, file_name))
