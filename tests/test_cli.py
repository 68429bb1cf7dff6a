import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from beancount_recorder.cli import app, parse_part_spec

BLOCK = '2024-01-01 * "Blub" "Test"\n  A:B:C -1.25 EUR\n  D:E 1.25 EUR\n'

runner = CliRunner()


def _record_args(vault: Path, settings: Path) -> list[str]:
    return [
        "record",
        "--date",
        "2024-01-01",
        "--payee",
        "Blub",
        "--description",
        "Test",
        "--from",
        "A:B:C=1.25",
        "--to",
        "D:E=1.25",
        "--vault",
        str(vault),
        "--settings",
        str(settings),
    ]


def test_parse_part_spec():
    part = parse_part_spec("Expenses:Food = 3.5")
    assert part.account == "Expenses:Food"
    assert str(part.amount) == "3.5"
    for bad in ("Expenses:Food", "=1.00", "A=abc", "A=-1"):
        with pytest.raises(ValueError):
            parse_part_spec(bad)


def test_record_appends_to_dated_file(tmp_path: Path):
    settings = tmp_path / "settings.json"
    result = runner.invoke(app, _record_args(tmp_path, settings))
    assert result.exit_code == 0, result.output

    ledger = tmp_path / "Finances" / "Books" / "2024" / "01" / "2024-01.md"
    assert ledger.read_text(encoding="utf-8") == BLOCK
    assert str(ledger) in result.output

    stored = json.loads(settings.read_text(encoding="utf-8"))
    assert set(stored["from_account_last_uses"]) == {"A:B:C"}
    assert set(stored["to_account_last_uses"]) == {"D:E"}


def test_record_uses_configured_currency_and_pattern(tmp_path: Path):
    settings = tmp_path / "settings.json"
    settings.write_text(
        json.dumps({"currency_iso_code": "USD", "save_file_pattern": "Books/{YYYY}-{MM}-{DD}"})
    )
    result = runner.invoke(app, _record_args(tmp_path, settings))
    assert result.exit_code == 0, result.output
    assert (tmp_path / "Books" / "2024-01-01.md").read_text() == BLOCK.replace("EUR", "USD")


def test_record_rejects_bad_part_spec(tmp_path: Path):
    args = _record_args(tmp_path, tmp_path / "settings.json")
    args[args.index("A:B:C=1.25")] = "A:B:C"
    result = runner.invoke(app, args)
    assert result.exit_code == 1
    assert "Error:" in result.output
    assert not (tmp_path / "Finances").exists()


def test_record_rejects_quotes_in_labels(tmp_path: Path):
    args = _record_args(tmp_path, tmp_path / "settings.json")
    args[args.index("Blub")] = 'Bl"ub'
    result = runner.invoke(app, args)
    assert result.exit_code == 1
    assert "double quotes" in result.output


def _ledger(tmp_path: Path) -> Path:
    path = tmp_path / "ledger.md"
    path.write_text("# January\n\n" + BLOCK + "\nNotes\n", encoding="utf-8")
    return path


def test_modify_rewrites_in_place(tmp_path: Path):
    path = _ledger(tmp_path)
    result = runner.invoke(
        app,
        [
            "modify",
            str(path),
            "--line",
            "4",
            "--description",
            "Dinner",
            "--to",
            "D:E=1.00",
            "--to",
            "F:G=0.25",
            "--settings",
            str(tmp_path / "settings.json"),
        ],
    )
    assert result.exit_code == 0, result.output
    assert path.read_text(encoding="utf-8") == (
        "# January\n\n"
        '2024-01-01 * "Blub" "Dinner"\n'
        "  A:B:C -1.25 EUR\n"
        "  D:E 1.00 EUR\n"
        "  F:G 0.25 EUR\n"
        "\nNotes\n"
    )
    assert '"Blub" "Dinner"' in result.output


def test_modify_outside_a_transaction_fails(tmp_path: Path):
    path = _ledger(tmp_path)
    result = runner.invoke(
        app,
        ["modify", str(path), "--line", "1", "--payee", "X", "--settings", str(tmp_path / "s.json")],
    )
    assert result.exit_code == 1
    assert "Cannot find transaction here" in result.output


def test_modify_line_past_end_fails(tmp_path: Path):
    path = _ledger(tmp_path)
    result = runner.invoke(
        app,
        ["modify", str(path), "--line", "99", "--payee", "X", "--settings", str(tmp_path / "s.json")],
    )
    assert result.exit_code == 1
    assert "outside" in result.output


def test_show_prints_range_and_block(tmp_path: Path):
    path = _ledger(tmp_path)
    result = runner.invoke(app, ["show", str(path), "--line", "5", "--settings", str(tmp_path / "s.json")])
    assert result.exit_code == 0, result.output
    assert result.output == "# lines 3-5\n" + BLOCK


def test_accounts_ranked_by_side(tmp_path: Path):
    (tmp_path / "Accounts.md").write_text(
        "2020-01-01 open Assets:Cash\n2020-01-01 open Expenses:Food\n", encoding="utf-8"
    )
    settings = tmp_path / "settings.json"
    settings.write_text(
        json.dumps(
            {
                "beancount_file_for_accounts": "Accounts",
                "to_account_last_uses": {"Expenses:Food": 5},
            }
        )
    )
    base = ["accounts", "--vault", str(tmp_path), "--settings", str(settings)]
    result = runner.invoke(app, base)
    assert result.exit_code == 0, result.output
    assert result.output.splitlines() == ["Assets:Cash", "Expenses:Food"]

    result = runner.invoke(app, [*base, "--side", "to"])
    assert result.output.splitlines() == ["Expenses:Food", "Assets:Cash"]


def test_record_accepts_amounts_beyond_default_precision(tmp_path: Path):
    args = _record_args(tmp_path, tmp_path / "settings.json")
    args[args.index("A:B:C=1.25")] = "A:B:C=1e30"
    args[args.index("D:E=1.25")] = "D:E=1e30"
    result = runner.invoke(app, args)
    assert result.exit_code == 0, result.output
    ledger = tmp_path / "Finances" / "Books" / "2024" / "01" / "2024-01.md"
    assert "  D:E 1000000000000000000000000000000.00 EUR\n" in ledger.read_text(encoding="utf-8")


def test_lowercase_currency_round_trips_through_record_and_show(tmp_path: Path):
    settings = tmp_path / "settings.json"
    settings.write_text(json.dumps({"currency_iso_code": "eur"}))
    result = runner.invoke(app, _record_args(tmp_path, settings))
    assert result.exit_code == 0, result.output

    ledger = tmp_path / "Finances" / "Books" / "2024" / "01" / "2024-01.md"
    shown = runner.invoke(app, ["show", str(ledger), "--line", "2", "--settings", str(settings)])
    assert shown.exit_code == 0, shown.output
    assert shown.output == "# lines 1-3\n" + BLOCK.replace("EUR", "eur")

    modified = runner.invoke(
        app,
        ["modify", str(ledger), "--line", "1", "--payee", "Shop", "--settings", str(settings)],
    )
    assert modified.exit_code == 0, modified.output
    assert ledger.read_text(encoding="utf-8").startswith('2024-01-01 * "Shop" "Test"\n')


def test_unknown_log_level_fails(tmp_path: Path):
    result = runner.invoke(
        app, ["--log-level", "LOUD", "show", str(_ledger(tmp_path)), "--line", "3"]
    )
    assert result.exit_code == 1
    assert "unknown log level" in result.output
