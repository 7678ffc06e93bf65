import random
import re

from services.id_generator import CLASS_CODE_ALPHABET, new_class_code, new_opaque_id


def test_opaque_id_shape():
    student_id = new_opaque_id("student")
    assert re.fullmatch(r"student_\d+_[0-9a-z]{9}", student_id)


def test_opaque_ids_differ():
    assert new_opaque_id("teacher") != new_opaque_id("teacher")


def test_class_code_is_six_alphanumerics():
    code = new_class_code(lambda c: False)
    assert len(code) == 6
    assert all(ch in CLASS_CODE_ALPHABET for ch in code)


def test_class_code_retries_until_unused():
    rng = random.Random(7)
    first = new_class_code(lambda c: False, rng=random.Random(7))
    seen = []

    def exists(code):
        seen.append(code)
        return code == first

    code = new_class_code(exists, rng=rng)
    assert code != first
    assert seen[0] == first
    assert len(seen) == 2
