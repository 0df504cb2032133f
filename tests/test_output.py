from __future__ import annotations

import json
from dataclasses import dataclass

import pytest
import yaml

from photonctl.models import Task
from photonctl.utils.output import _cell, emit, print_fields, print_lines, print_table


@dataclass
class _Row:
    name: str
    count: int


def test_cell_formatting() -> None:
    assert _cell(None) == "-"
    assert _cell(True) == "true"
    assert _cell(False) == "false"
    assert _cell(["a", "b"]) == "a,b"
    assert _cell(3) == "3"


def test_print_lines_is_tab_separated(capsys: pytest.CaptureFixture[str]) -> None:
    print_lines([("id-1", None, True, ["x", "y"])])
    assert capsys.readouterr().out == "id-1\t-\ttrue\tx,y\n"


def test_print_table_ends_with_total(capsys: pytest.CaptureFixture[str]) -> None:
    print_table(["ID", "State"], [("dep-1", "READY"), ("dep-2", "ERROR")])
    out = capsys.readouterr().out
    assert "dep-2" in out
    assert out.rstrip().endswith("Total: 2")


def test_print_table_without_total(capsys: pytest.CaptureFixture[str]) -> None:
    print_table(["Component", "Status"], [("CLOUD_STORE", "READY")], total=False)
    assert "Total" not in capsys.readouterr().out


def test_print_fields_aligns_labels(capsys: pytest.CaptureFixture[str]) -> None:
    print_fields("Network ID: net-1", [("Name", "db"), ("Is Default", False)])
    assert capsys.readouterr().out.splitlines() == [
        "Network ID: net-1",
        "  Name:       db",
        "  Is Default: false",
    ]


def test_emit_json_uses_wire_names(capsys: pytest.CaptureFixture[str]) -> None:
    emit(Task.model_validate({"id": "t-1", "state": "COMPLETED", "entity": {"id": "h-1", "kind": "host"}}))
    payload = json.loads(capsys.readouterr().out)
    assert payload["id"] == "t-1"
    assert payload["entity"] == {"id": "h-1", "kind": "host"}


def test_emit_yaml_handles_dataclasses(capsys: pytest.CaptureFixture[str]) -> None:
    emit([_Row(name="a", count=1)], output="yaml")
    assert yaml.safe_load(capsys.readouterr().out) == [{"name": "a", "count": 1}]
