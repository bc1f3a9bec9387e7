"""
Tests for stable_sha256 hashing in core.codec. Config snapshots in the
audit log rely on the hash being independent of key order.
"""

from pathlib import Path

from packages.config import Profile
from packages.core.codec import canonical_json_bytes, stable_sha256
from packages.core.types import CompletionRequest, Message

def test_hash_stable_for_equivalent_dict_order():
    a = {"b": 2, "a": 1}
    b = {"a": 1, "b": 2}
    assert stable_sha256(a) == stable_sha256(b)

def test_hash_stable_for_profile_roles_order():
    p1 = Profile(name="m", roles={"user": "U:", "assistant": "A:"})
    p2 = Profile(name="m", roles={"assistant": "A:", "user": "U:"})
    assert stable_sha256(p1) == stable_sha256(p2)
    assert stable_sha256(p1) != stable_sha256(Profile(name="m"))

def test_request_serializable_hashable():
    r = CompletionRequest(model="m", messages=[Message("user", "hi")], stop=["x"])
    h = stable_sha256(r)
    assert isinstance(h, str) and len(h) == 64

def test_paths_encode_as_posix():
    assert canonical_json_bytes({"p": Path("a") / "b"}) == b'{"p":"a/b"}'
