"""命令行工具"""

from click.testing import CliRunner

from modboot.cli import cli

TARGET = "app.app_module:AppModule"


def test_graph_prints_modules():
    result = CliRunner().invoke(cli, ["graph", TARGET])

    assert result.exit_code == 0
    assert "UsersModule" in result.output
    assert "forward_ref(ReviewsModule)" in result.output


def test_graph_json():
    import json

    result = CliRunner().invoke(cli, ["graph", TARGET, "--json"])

    graph = json.loads(result.output)
    assert graph["UsersModule"]["exports"] == ["UsersService"]
    assert graph["ConfigModule"]["global"] is True


def test_check_passes_for_course_app():
    result = CliRunner().invoke(cli, ["check", TARGET])

    assert result.exit_code == 0
    assert "✅" in result.output


def test_check_fails_on_cycle():
    result = CliRunner().invoke(cli, ["check", "tests.cyclic_modules:Root"])

    assert result.exit_code == 1
    assert "CIRCULAR_RESOLUTION" in result.output


def test_target_must_be_a_module():
    result = CliRunner().invoke(cli, ["graph", "app.main:create_application"])

    assert result.exit_code == 2
