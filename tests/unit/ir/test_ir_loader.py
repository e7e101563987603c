"""Unit tests for reading IR documents."""

import json
from pathlib import Path

import pytest

from kubetranslate.core.exceptions import IRLoadError
from kubetranslate.ir.loader import load_ir

IR_YAML = """\
name: shop
services:
  - name: web
    image: web:1
    ports:
      - port: 80
containers:
  - image_names: [web:1]
    new: true
    new_files:
      Dockerfile: FROM python
"""


class TestLoadIR:
    def test_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "ir.yaml"
        path.write_text(IR_YAML)
        ir = load_ir(path)
        assert ir.name == "shop"
        assert ir.services[0].ports[0].port == 80
        assert ir.containers[0].new_files == {"Dockerfile": "FROM python"}

    def test_json(self, tmp_path: Path) -> None:
        path = tmp_path / "ir.json"
        path.write_text(json.dumps({"name": "api", "services": []}))
        assert load_ir(path).name == "api"

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(IRLoadError, match="File not found"):
            load_ir(tmp_path / "nope.yaml")

    def test_unsupported_extension(self, tmp_path: Path) -> None:
        path = tmp_path / "ir.toml"
        path.write_text("")
        with pytest.raises(IRLoadError, match="Unsupported extension"):
            load_ir(path)

    def test_not_a_mapping(self, tmp_path: Path) -> None:
        path = tmp_path / "ir.yaml"
        path.write_text("- a\n")
        with pytest.raises(IRLoadError, match="mapping"):
            load_ir(path)

    def test_invalid_ir(self, tmp_path: Path) -> None:
        path = tmp_path / "ir.yaml"
        path.write_text("services:\n  - image: x\n")
        with pytest.raises(IRLoadError, match="Invalid IR") as exc_info:
            load_ir(path)
        assert exc_info.value.error_code == "IR_LOAD_ERROR"
