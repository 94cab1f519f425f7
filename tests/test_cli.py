"""CLI tests against a throwaway SQLite file."""

import json

from wage_ledger.cli import WageLedgerCli


class TestWageLedgerCli:
    """Test command dispatch and JSON output."""

    def test_no_command_prints_help(self, capsys):
        assert WageLedgerCli().run([]) == 1
        assert "usage" in capsys.readouterr().out.lower()

    def test_init_db_then_query_empty_project(self, tmp_path, capsys):
        url = f"sqlite+aiosqlite:///{tmp_path / 'cli.db'}"
        cli = WageLedgerCli()

        assert cli.run(["--database-url", url, "init-db"]) == 0
        capsys.readouterr()

        assert cli.run(["--database-url", url, "weekly-cost", "--project-id", "7"]) == 0
        assert json.loads(capsys.readouterr().out) == {"weekly_costs": []}

        assert cli.run(["--database-url", url, "ledger", "--project-id", "7"]) == 0
        ledger = json.loads(capsys.readouterr().out)
        assert ledger["entries"] == []
        assert ledger["pagination"]["total"] == 0

    def test_domain_error_exit_code(self, tmp_path, capsys):
        url = f"sqlite+aiosqlite:///{tmp_path / 'cli.db'}"
        cli = WageLedgerCli()
        cli.run(["--database-url", url, "init-db"])
        capsys.readouterr()

        code = cli.run(
            [
                "--database-url",
                url,
                "ledger",
                "--project-id",
                "7",
                "--start",
                "2024-02-01",
                "--end",
                "2024-01-01",
            ]
        )

        assert code == 2
        error = capsys.readouterr().err.strip().splitlines()[-1]
        assert json.loads(error)["error"] == "INVALID_DATE_RANGE"
