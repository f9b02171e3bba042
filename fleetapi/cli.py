# -*- coding: utf-8 -*-
import logging
from typing import Dict, Tuple

import click

from fleetapi.config import get_fleet_settings, get_tls_config
from fleetapi.constants import CONFIG
from fleetapi.enroll import EnrollCmd
from fleetapi.error_handlers import handle_cmd_exception
from fleetapi.meta import collect_local_metadata, get_version
from fleetapi.models.enroll import EnrollRequest, Metadata
from fleetapi.models.enroll_type import ENROLLMENT_TYPES, parse_enrollment_type
from fleetapi.platform.client import FleetClient

LOG = logging.getLogger(__name__)

CLI_MAIN_INTRODUCTION = "Enroll agents into Fleet."
CLI_DEBUG_HELP = "Enable debug logging."
CLI_ENROLL_HELP = (
    "Enroll this agent into Fleet.\n\n"
    "The enrollment token is sent as a header, never in the request body. "
    "Settings not given on the command line are read from the environment "
    f"and from {CONFIG}."
)


def configure_logger(ctx, param, debug):
    level = logging.CRITICAL

    if debug:
        level = logging.DEBUG

    logging.basicConfig(format="%(asctime)s %(name)s => %(message)s", level=level)

    if debug:
        LOG.debug("fleetapi %s, config file: %s", get_version(), CONFIG)


def parse_metadata(ctx, param, values: Tuple[str, ...]) -> Dict[str, str]:
    metadata = {}
    for value in values:
        key, sep, item = value.partition("=")
        if not sep or not key.strip():
            raise click.BadParameter(f"expected KEY=VALUE, got {value!r}", param=param)
        metadata[key.strip()] = item
    return metadata


@click.group(help=CLI_MAIN_INTRODUCTION)
@click.option(
    "--debug",
    default=False,
    is_flag=True,
    expose_value=False,
    is_eager=True,
    callback=configure_logger,
    help=CLI_DEBUG_HELP,
)
@click.version_option(version=get_version() or "unknown", prog_name="fleetapi")
def cli():
    pass


@cli.command(help=CLI_ENROLL_HELP)
@click.option("--url", default=None, help="Fleet (Kibana) base URL.")
@click.option(
    "--enrollment-token",
    default=None,
    help="Enrollment token, sent as the kbn-fleet-enrollment-token header.",
)
@click.option(
    "--type",
    "enrollment_type",
    type=click.Choice(sorted(ENROLLMENT_TYPES)),
    default="PERMANENT",
    show_default=True,
    help="Enrollment type.",
)
@click.option("--shared-id", default="", help="Identifier shared between agents.")
@click.option(
    "--metadata",
    "-m",
    multiple=True,
    callback=parse_metadata,
    help="User provided metadata as KEY=VALUE, may be repeated.",
)
@click.option(
    "--tls-mode",
    type=click.Choice(["default", "system", "bundle"]),
    default=None,
    help="Certificate store used to verify Fleet.",
)
@click.option("--ca-bundle", default=None, help="Path to a CA bundle, implies --tls-mode bundle.")
@click.option("--timeout", type=float, default=None, help="Request timeout in seconds.")
@click.option("--json", "json_output", is_flag=True, default=False, help="Print the response as JSON.")
@handle_cmd_exception
def enroll(url, enrollment_token, enrollment_type, shared_id, metadata,
           tls_mode, ca_bundle, timeout, json_output):
    settings = get_fleet_settings(
        url=url, enrollment_token=enrollment_token, timeout=timeout, config_path=CONFIG
    )

    try:
        tls_config = get_tls_config(mode=tls_mode, ca_bundle=ca_bundle, config_path=CONFIG)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="--tls-mode/--ca-bundle")

    request = EnrollRequest(
        enrollment_token=settings.enrollment_token,
        type=parse_enrollment_type(enrollment_type),
        shared_id=shared_id,
        metadata=Metadata(local=collect_local_metadata(), user_provided=metadata),
    )

    with FleetClient(settings.url, tls_config=tls_config, timeout=settings.timeout) as client:
        response = EnrollCmd(client).execute(request)

    if json_output:
        click.echo(response.to_json(indent=2).decode("utf-8"))
        return

    click.secho("Enrollment successful", fg="green")
    click.echo(f"Agent ID: {response.item.id}")
    click.echo(f"Policy ID: {response.item.policy_id}")
    click.echo(f"Access token: {response.item.access_token}")
