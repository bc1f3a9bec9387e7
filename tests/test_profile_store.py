"""
Tests for ProfileStore: single/multi file loads, directory scans,
overwrite semantics and nameless profiles.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from packages.config import Profile, ProfileStore
from packages.core.errors import ConfigParseError


def _write(p: Path, text: str) -> Path:
    p.write_text(text.strip() + "\n", encoding="utf-8")
    return p


def test_load_one_parses_all_sections(tmp_path: Path):
    cfg = _write(
        tmp_path / "gpt-3.5-turbo.yaml",
        """
name: gpt-3.5-turbo
model: ggml-gpt4all-j
temperature: 0.2
top_k: 40
max_tokens: 128
threads: 4
stopwords:
  - "HUMAN:"
cutstrings:
  - "^\\\\s+"
trimspace:
  - "ASSISTANT:"
roles:
  user: "HUMAN:"
  assistant: "ASSISTANT:"
template:
  chat: chat-tmpl
  completion: completion-tmpl
""",
    )
    store = ProfileStore()
    assert store.load_one(cfg) == "gpt-3.5-turbo"

    p = store.get("gpt-3.5-turbo")
    assert p is not None
    assert p.model == "ggml-gpt4all-j"
    assert p.temperature == 0.2
    assert p.top_k == 40
    assert p.threads == 4
    assert p.stopwords == ["HUMAN:"]
    assert p.cutstrings == ["^\\s+"]
    assert p.roles == {"user": "HUMAN:", "assistant": "ASSISTANT:"}
    assert p.template.chat == "chat-tmpl"
    assert p.template.completion == "completion-tmpl"


def test_load_one_without_name_is_dropped(tmp_path: Path):
    cfg = _write(tmp_path / "anon.yaml", "model: foo\ntop_k: 3")
    store = ProfileStore()
    assert store.load_one(cfg) is None
    assert len(store) == 0


def test_load_one_malformed_yaml_raises(tmp_path: Path):
    cfg = _write(tmp_path / "bad.yaml", "name: [unclosed")
    with pytest.raises(ConfigParseError):
        ProfileStore().load_one(cfg)


def test_load_one_missing_file_raises(tmp_path: Path):
    with pytest.raises(ConfigParseError):
        ProfileStore().load_one(tmp_path / "nope.yaml")


def test_load_one_wrong_field_type_raises(tmp_path: Path):
    cfg = _write(tmp_path / "bad.yaml", "name: x\ntop_k: lots")
    with pytest.raises(ConfigParseError):
        ProfileStore().load_one(cfg)


def test_overwrite_replaces_whole_entry(tmp_path: Path):
    store = ProfileStore()
    store.load_one(_write(tmp_path / "a.yaml", "name: m\ntop_k: 10\nstopwords: [x]"))
    store.load_one(_write(tmp_path / "b.yaml", "name: m\ntemperature: 0.5"))

    p = store.get("m")
    assert p is not None
    assert p.temperature == 0.5
    assert p.top_k == 0
    assert p.stopwords == []


def test_load_multi_list_and_configs_key(tmp_path: Path):
    store = ProfileStore()
    names = store.load_multi(
        _write(
            tmp_path / "models.yaml",
            """
- name: a
  model: a.bin
- model: nameless.bin
- name: b
  model: b.bin
""",
        )
    )
    assert names == ["a", "b"]

    names = store.load_multi(_write(tmp_path / "more.yaml", "configs:\n  - name: c\n    model: c.bin"))
    assert names == ["c"]
    assert store.names() == ["a", "b", "c"]


def test_load_multi_rejects_single_mapping(tmp_path: Path):
    with pytest.raises(ConfigParseError):
        ProfileStore().load_multi(_write(tmp_path / "one.yaml", "name: a"))


def test_load_dispatches_on_shape(tmp_path: Path):
    store = ProfileStore()
    assert store.load(_write(tmp_path / "one.yaml", "name: a")) == ["a"]
    assert store.load(_write(tmp_path / "many.yaml", "- name: b\n- name: c")) == ["b", "c"]


def test_load_directory_skips_malformed(tmp_path: Path):
    _write(tmp_path / "good.yaml", "name: good\nmodel: good.bin")
    _write(tmp_path / "broken.yaml", "name: [oops")
    _write(tmp_path / "ignored.txt", "name: ignored")
    (tmp_path / "model.bin").write_bytes(b"\x00")

    store = ProfileStore()
    res = store.load_directory(tmp_path)

    assert res.loaded == ["good"]
    assert res.skipped == ["broken.yaml"]
    assert "good" in store
    assert "ignored" not in store


def test_load_one_non_utf8_raises(tmp_path: Path):
    cfg = tmp_path / "latin1.yaml"
    cfg.write_bytes(b"name: caf\xe9\n")
    with pytest.raises(ConfigParseError):
        ProfileStore().load_one(cfg)


def test_load_directory_skips_non_utf8_file(tmp_path: Path):
    _write(tmp_path / "good.yaml", "name: good\nmodel: good.bin")
    (tmp_path / "latin1.yaml").write_bytes(b"name: caf\xe9\n")

    store = ProfileStore()
    res = store.load_directory(tmp_path)

    assert res.loaded == ["good"]
    assert res.skipped == ["latin1.yaml"]
    assert "good" in store


def test_load_directory_missing_dir_raises(tmp_path: Path):
    with pytest.raises(ConfigParseError):
        ProfileStore().load_directory(tmp_path / "missing")


def test_get_returns_copy():
    store = ProfileStore()
    store.put(Profile(name="m", stopwords=["a"]))
    p = store.get("m")
    assert p is not None
    p.stopwords.append("b")
    assert store.get("m").stopwords == ["a"]


def test_put_without_name_is_ignored():
    store = ProfileStore()
    assert store.put(Profile(model="x")) is False
    assert len(store) == 0


def test_yaml_stop_folds_into_stopwords(tmp_path: Path):
    store = ProfileStore()
    store.load_one(_write(tmp_path / "a.yaml", 'name: a\nstopwords: ["HUMAN:"]\nstop: "###"'))
    store.load_one(_write(tmp_path / "b.yaml", 'name: b\nstop: ["<end>", ""]'))

    assert store.get("a").stopwords == ["HUMAN:", "###"]
    assert store.get("b").stopwords == ["<end>"]


def test_yaml_stop_of_wrong_type_raises(tmp_path: Path):
    with pytest.raises(ConfigParseError):
        ProfileStore().load_one(_write(tmp_path / "bad.yaml", "name: x\nstop: {a: b}"))
