import logging
import sys
from functools import wraps
from typing import NoReturn, Union

import click

from fleetapi.errors import FleetError, FleetException


LOG = logging.getLogger(__name__)


def output_exception(exception: Union[FleetError, FleetException]) -> NoReturn:
    """
    Print the error in red on stderr and exit with its exit code.
    """
    click.secho(str(exception), fg="red", err=True)
    sys.exit(exception.get_exit_code())


def handle_cmd_exception(func):
    """
    Turn errors raised by a command into a message and an exit code.

    Usage errors are left to click. Fleet errors keep their own exit code,
    anything else is reported as an unexpected failure.
    """

    @wraps(func)
    def inner(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except click.ClickException:
            raise
        except (FleetError, FleetException) as e:
            LOG.debug("Command failed: %s", e, exc_info=True)
            output_exception(e)
        except Exception as e:
            LOG.exception("Unexpected error: %s", e)
            output_exception(FleetException(info=str(e)))

    return inner
