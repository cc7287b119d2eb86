"""Command-line interface for the EMSIG engine."""

import json
import logging
from pathlib import Path

import typer

from emsig_engine import __version__

app = typer.Typer(
    help="EMSIG battery and grid scheduling engine",
    no_args_is_help=True,
)


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging")):
    """Configure logging for all commands."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@app.command()
def version():
    """Show EMSIG version."""
    typer.echo(f"EMSIG Engine v{__version__}")


@app.command()
def validate(bundle_path: str):
    """Validate a run bundle.

    Args:
        bundle_path: Path to bundle directory
    """
    from emsig_engine.io.bundle import validate_bundle

    try:
        validate_bundle(bundle_path)
        typer.secho(f"✓ Bundle at {bundle_path} is valid", fg=typer.colors.GREEN)
    except Exception as e:
        typer.secho(f"✗ Bundle validation failed: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(1)


@app.command()
def schedule(bundle_path: str):
    """Build and solve the schedule for a bundle.

    Args:
        bundle_path: Path to bundle directory
    """
    from emsig_engine.runners.schedule import run_schedule

    try:
        run_schedule(bundle_path)
        typer.secho("\n✓ Schedule completed successfully", fg=typer.colors.GREEN)
    except Exception as e:
        typer.secho(f"\n✗ Schedule failed: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(1)


@app.command()
def report(bundle_path: str):
    """Print the solved schedule of a bundle.

    Args:
        bundle_path: Path to bundle directory
    """
    from emsig_engine.io.bundle import SCHEDULE_FILE
    from emsig_engine.io.formats import read_parquet_schedule

    bundle_path_obj = Path(bundle_path)

    schedule_file = bundle_path_obj / SCHEDULE_FILE
    if not schedule_file.exists():
        typer.secho(
            "✗ No results found in bundle. Run schedule first.",
            fg=typer.colors.RED,
            err=True,
        )
        raise typer.Exit(1)

    df = read_parquet_schedule(str(schedule_file))

    for i, (_, row) in enumerate(df.iterrows()):
        typer.echo(
            f"{i:2d} | Grid {row.grid_power_w:5.0f} "
            f"| GridBuy {row.grid_buy_power_w:5.0f} "
            f"| GridSell {row.grid_sell_power_w:5.0f} "
            f"| ESS {row.ess_power_w:5.0f} "
            f"| ESSCharge {row.ess_charge_power_w:5.0f} "
            f"| ESSDischarge {row.ess_discharge_power_w:5.0f} "
            f"| ESSEnergy {row.ess_energy_wh:5.0f}"
        )

    metrics_file = bundle_path_obj / "metrics.json"
    if metrics_file.exists():
        with open(metrics_file) as f:
            metrics = json.load(f)

        typer.echo("\n" + "=" * 60)
        typer.echo(f"  Net cost:         {metrics['net_cost']:.4f}")
        typer.echo(f"  Grid buy:         {metrics['total_buy_wh']:.1f} Wh")
        typer.echo(f"  Grid sell:        {metrics['total_sell_wh']:.1f} Wh")
        typer.echo(f"  ESS throughput:   {metrics['ess_throughput_wh']:.1f} Wh")
        typer.echo(f"  ESS final energy: {metrics['ess_final_energy_wh']:.1f} Wh")
        typer.echo("=" * 60)


if __name__ == "__main__":
    app()
