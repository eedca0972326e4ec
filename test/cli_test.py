"""
jobboss CLI 테스트

실행: python -m pytest test/cli_test.py -v
"""

import pytest
import yaml

from jobboss.cli import build_parser, main

from conftest import JOBS_DIR, TEST_ENVIRONMENT


@pytest.fixture
def config_file(tmp_path, database_yaml):
    path = tmp_path / "boss.yaml"
    path.write_text(yaml.safe_dump({
        "boss": {
            "working_dir": str(tmp_path),
            "database_yaml_path": str(database_yaml),
            "jobs_path": str(JOBS_DIR),
            "environment": TEST_ENVIRONMENT,
        }
    }), encoding="utf-8")
    return path


def _run(config_file, *argv) -> int:
    return main(["-c", str(config_file), *argv])


class TestCli:
    """CLI 명령 테스트"""

    def test_parser_start_options(self):
        args = build_parser().parse_args(["-e", "production", "start", "--employee-limit", "3"])

        assert args.command == "start"
        assert args.environment == "production"
        assert args.employee_limit == 3
        assert args.sleep_interval is None

    def test_queue_list_cancel_redo(self, config_file, capsys):
        assert _run(config_file, "queue", "sample", "-p", '{"message": "cli"}', "--path", "cli/one") == 0
        assert "cli/one\tsample\tpending" in capsys.readouterr().out

        assert _run(config_file, "list", "-s", "pending") == 0
        assert capsys.readouterr().out.splitlines() == ["cli/one\tsample\tpending\tpid=-\tredo=0"]

        assert _run(config_file, "cancel", "cli/one") == 0
        assert "cancelled" in capsys.readouterr().out

        assert _run(config_file, "redo", "cli/one") == 0
        assert "cli/one\tsample\tpending\tpid=-\tredo=1" in capsys.readouterr().out

    def test_errors_return_nonzero(self, config_file, capsys):
        assert _run(config_file, "cancel", "cli/missing") == 1
        assert "not found" in capsys.readouterr().out

        assert _run(config_file, "queue", "sample", "-p", "{not json") == 1
        assert "invalid params" in capsys.readouterr().out

        assert _run(config_file, "queue", "no.such.type") == 1
        assert "Job type not found" in capsys.readouterr().out

    def test_missing_database_yaml(self, tmp_path, capsys):
        config_file = tmp_path / "boss.yaml"
        config_file.write_text(yaml.safe_dump({"boss": {"working_dir": str(tmp_path)}}), encoding="utf-8")

        assert _run(config_file, "list") == 1
        assert "Database YAML file missing" in capsys.readouterr().out

    def test_no_command_prints_help(self, capsys):
        assert main([]) == 1
        assert "usage" in capsys.readouterr().out.lower()
