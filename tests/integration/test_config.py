"""Tests for configuration loading and environment overrides."""

import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from merkle_diff.config import MerkleDiffConfig, get_config_path, load_config, save_config


class TestConfig:
    def test_defaults_without_file(self, tmp_path: Path, isolated_env):
        config = load_config(tmp_path)
        assert config == MerkleDiffConfig()
        assert config.hash_algorithm == "sha256"
        assert config.prune is False

    def test_save_and_load(self, tmp_path: Path, isolated_env):
        save_config(MerkleDiffConfig(hash_algorithm="blake2s", prune=True), tmp_path)

        config = load_config(tmp_path)

        assert config.hash_algorithm == "blake2s"
        assert config.prune is True
        assert get_config_path(tmp_path).parent.name == ".merkle-diff"

    def test_invalid_algorithm_in_file(self, tmp_path: Path, isolated_env):
        path = get_config_path(tmp_path)
        path.parent.mkdir(parents=True)
        path.write_text(json.dumps({"hash_algorithm": "md5"}))

        with pytest.raises(ValidationError):
            load_config(tmp_path)

    def test_env_overrides(self, tmp_path: Path, isolated_env, monkeypatch):
        save_config(MerkleDiffConfig(), tmp_path)
        monkeypatch.setenv("MERKLE_DIFF_HASH_ALGORITHM", "sha3_256")
        monkeypatch.setenv("MERKLE_DIFF_ENCODING", "latin-1")
        monkeypatch.setenv("MERKLE_DIFF_PRUNE", "yes")

        config = load_config(tmp_path)

        assert config.hash_algorithm == "sha3_256"
        assert config.encoding == "latin-1"
        assert config.prune is True

    def test_env_prune_false(self, tmp_path: Path, isolated_env, monkeypatch):
        save_config(MerkleDiffConfig(prune=True), tmp_path)
        monkeypatch.setenv("MERKLE_DIFF_PRUNE", "0")

        assert load_config(tmp_path).prune is False
