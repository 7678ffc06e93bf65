from typing import Callable, Optional
import random
import string
import time

CLASS_CODE_LENGTH = 6
CLASS_CODE_ALPHABET = string.ascii_uppercase + string.digits
_BASE36 = string.digits + string.ascii_lowercase


def new_opaque_id(prefix: str, rng: Optional[random.Random] = None) -> str:
    """
    Generate an opaque id in the format: <prefix>_<millis>_<9 base36 chars>
    Collisions are not checked.
    """
    rng = rng or random
    timestamp = int(time.time() * 1000)
    suffix = "".join(rng.choice(_BASE36) for _ in range(9))
    return f"{prefix}_{timestamp}_{suffix}"


def new_class_code(exists: Callable[[str], bool], rng: Optional[random.Random] = None) -> str:
    """
    Generate a 6 character class code, e.g. AB12CD.
    Retries until `exists(code)` is False.
    """
    rng = rng or random
    while True:
        code = "".join(rng.choice(CLASS_CODE_ALPHABET) for _ in range(CLASS_CODE_LENGTH))
        if not exists(code):
            return code
