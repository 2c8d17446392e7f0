"""Unit tests for the command-line interface."""

import json
import sys
import textwrap

import pytest

from memberaccess.cli import _load_class, main

MODULE = textwrap.dedent('''
    from dataclasses import dataclass
    from typing import Annotated

    from memberaccess.metadata import Column, ForeignKey, Key, table


    @table('orders', schema='sales')
    @dataclass
    class Order:
        RATE = 0.2
        id: Annotated[int, Key()] = 0
        customer: Annotated[str, Column('customer_name')] = ''
        region_id: Annotated[int, ForeignKey('region')] = 0
        _secret: str = ''

        @property
        def label(self) -> str:
            return self.customer.upper()

        def total(self, tax: float) -> float:
            return tax

        @staticmethod
        def rate() -> float:
            return Order.RATE


    class Plain:
        pass


    def not_a_class():
        pass
''')


@pytest.fixture
def models(tmp_path, monkeypatch):
    (tmp_path / "cli_models.py").write_text(MODULE)
    monkeypatch.syspath_prepend(str(tmp_path))
    monkeypatch.delitem(sys.modules, "cli_models", raising=False)
    return "cli_models"


class TestLoadClass:
    def test_loads(self, models):
        assert _load_class(f"{models}:Order").__name__ == 'Order'

    @pytest.mark.parametrize("target", ["cli_models", "cli_models:", ":Order"])
    def test_malformed(self, models, target):
        with pytest.raises(ValueError):
            _load_class(target)

    def test_not_a_class(self, models):
        with pytest.raises(ValueError, match="not a class"):
            _load_class(f"{models}:not_a_class")


class TestInspect:
    def test_header_and_members(self, models, capsys):
        assert main(["inspect", f"{models}:Order"]) == 0
        out = capsys.readouterr().out.splitlines()
        assert out[0] == "Order (table: orders, schema: sales)"
        rows = {line.split()[1]: line for line in out[1:]}
        assert rows['label'].split()[0] == 'property'
        assert ' r-' in rows['label']
        assert 'key' in rows['id'].split()
        assert 'column=customer_name' in rows['customer']
        assert 'fk=region' in rows['region_id']
        assert '_secret' not in rows
        assert 'RATE' not in rows

    def test_non_public_and_static(self, models, capsys):
        assert main(["inspect", f"{models}:Order", "--non-public", "--static"]) == 0
        out = capsys.readouterr().out
        assert '_secret' in out
        assert 'RATE' in out
        assert 'static' in out

    def test_methods(self, models, capsys):
        assert main(["inspect", f"{models}:Order", "--methods", "--static"]) == 0
        out = capsys.readouterr().out
        assert "  method   total(float) -> float" in out
        assert "  method   rate() -> float static" in out

    def test_plain_class_uses_class_name(self, models, capsys):
        assert main(["inspect", f"{models}:Plain"]) == 0
        assert capsys.readouterr().out.splitlines() == ["Plain (table: Plain)"]

    def test_config(self, models, tmp_path, capsys):
        config = tmp_path / "options.json"
        config.write_text(json.dumps({"ignore_case": False}))
        assert main(["inspect", f"{models}:Order", "--config", str(config)]) == 0

    def test_config_section(self, models, tmp_path, capsys):
        config = tmp_path / "app.json"
        config.write_text(json.dumps({"tool": {"memberaccess": {"ignore_case": False}}}))
        argv = ["inspect", f"{models}:Order", "--config", str(config), "--section", "tool.memberaccess"]
        assert main(argv) == 0
        assert capsys.readouterr().out.startswith("Order (table: orders")

    def test_bad_config(self, models, tmp_path, capsys):
        config = tmp_path / "options.json"
        config.write_text(json.dumps({"cache": True}))
        assert main(["inspect", f"{models}:Order", "--config", str(config)]) == 1
        assert "error: Unknown registry option" in capsys.readouterr().err

    def test_missing_module(self, capsys):
        assert main(["inspect", "no_such_module_xyz:Thing"]) == 1
        assert capsys.readouterr().err.startswith("error:")

    def test_missing_class(self, models, capsys):
        assert main(["inspect", f"{models}:Missing"]) == 1
        assert "error:" in capsys.readouterr().err


class TestMain:
    def test_no_command(self, capsys):
        assert main([]) == 1
        assert "inspect" in capsys.readouterr().out
