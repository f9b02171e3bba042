"""Allow fleetapi to be executable through `python -m fleetapi`."""
from fleetapi.cli import cli


if __name__ == "__main__":  # pragma: no cover
    cli(prog_name="fleetapi")
