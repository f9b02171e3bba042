import click
import pytest

from fleetapi.error_handlers import handle_cmd_exception
from fleetapi.errors import ConfigurationError, FleetException, RequestTimeoutError


def _command(error):
    @handle_cmd_exception
    def command():
        raise error

    return command


@pytest.mark.unit
class TestHandleCmdException:

    @pytest.mark.parametrize(
        "error, exit_code",
        [
            (RequestTimeoutError(), 67),
            (ConfigurationError("url", reason="not set"), 70),
            (FleetException(info="boom"), 1),
        ],
    )
    def test_fleet_errors_keep_their_exit_code(self, error, exit_code, capsys):
        with pytest.raises(SystemExit) as exc_info:
            _command(error)()

        assert exc_info.value.code == exit_code
        assert str(error) in capsys.readouterr().err

    def test_unexpected_error_exits_with_failure(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            _command(KeyError("missing"))()

        assert exc_info.value.code == 1
        assert "unexpected error" in capsys.readouterr().err

    def test_click_errors_are_left_to_click(self):
        with pytest.raises(click.BadParameter):
            _command(click.BadParameter("bad value"))()

    def test_return_value_is_passed_through(self):
        @handle_cmd_exception
        def command():
            return 42

        assert command() == 42
