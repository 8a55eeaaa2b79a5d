"""
命令行入口测试

使用 click 的 CliRunner 在进程内调用命令。
"""

import pytest
from click.testing import CliRunner

from nestore import __version__
from nestore.cli import cli


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


class TestExport:
    """export 子命令"""

    def test_export(self, runner, shop, temp_dir):
        shop.save()
        result = runner.invoke(cli, ['--data-dir', str(temp_dir), 'export', 'shop'])
        assert result.exit_code == 0, result.output
        assert f"Database exported to {temp_dir / 'shop.sql'}" in result.output
        assert (temp_dir / 'shop.sql').read_text(encoding='utf-8').startswith('CREATE DATABASE shop;\n')

    def test_export_no_drop(self, runner, shop, temp_dir):
        shop.save()
        result = runner.invoke(cli, ['--data-dir', str(temp_dir), 'export', 'shop', '--no-drop'])
        assert result.exit_code == 0, result.output
        assert 'DROP DATABASE' not in (temp_dir / 'shop.sql').read_text(encoding='utf-8')

    def test_export_missing_database(self, runner, temp_dir):
        result = runner.invoke(cli, ['--data-dir', str(temp_dir), 'export', 'ghost'])
        assert result.exit_code == 1
        assert "Database 'ghost' not found" in result.output
        assert not (temp_dir / 'ghost.sql').exists()

    def test_data_dir_from_env(self, runner, shop, temp_dir):
        shop.save()
        result = runner.invoke(cli, ['export', 'shop'], env={'NESTORE_DATA_DIR': str(temp_dir)})
        assert result.exit_code == 0, result.output
        assert (temp_dir / 'shop.sql').exists()


class TestShellEntry:
    """不带子命令时进入交互式 Shell"""

    def test_default_runs_shell(self, runner, temp_dir):
        script = 'database notes\nnew_store todo\nsave\nexit\nexit\n'
        result = runner.invoke(cli, ['--data-dir', str(temp_dir)], input=script)
        assert result.exit_code == 0, result.output
        assert 'Database file not found! Creating a new one.' in result.output
        assert (temp_dir / 'notes.json').exists()

    def test_indent_option(self, runner, temp_dir):
        script = 'database notes\nnew_store todo\nsave\n'
        result = runner.invoke(cli, ['--data-dir', str(temp_dir), '--indent', '2', 'shell'], input=script)
        assert result.exit_code == 0, result.output
        assert '\n  "todo"' in (temp_dir / 'notes.json').read_text(encoding='utf-8')


class TestOptions:
    """全局选项"""

    def test_version(self, runner):
        result = runner.invoke(cli, ['--version'])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_invalid_json_impl(self, runner):
        result = runner.invoke(cli, ['--json-impl', 'simdjson', 'export', 'x'])
        assert result.exit_code == 2

    def test_help_lists_commands(self, runner):
        result = runner.invoke(cli, ['--help'])
        assert result.exit_code == 0
        assert 'export' in result.output
        assert 'shell' in result.output
