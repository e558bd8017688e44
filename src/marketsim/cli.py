"""marketsim CLI."""

from pathlib import Path

import click
import yaml

from marketsim.app import MarketSimApp
from marketsim.constants import BOOK_DISPLAY_DEPTH
from marketsim.errors import MarketSimError
from marketsim.snapshot import MarketSnapshot


def _build(ctx: click.Context) -> MarketSnapshot:
    """Build the snapshot once per invocation, exiting on startup errors."""
    app: MarketSimApp = ctx.obj["app"]
    try:
        return app.snapshot
    except (MarketSimError, FileNotFoundError, ValueError, yaml.YAMLError) as e:  # ValidationError is a ValueError
        click.echo(f"Fatal error: {e}", err=True)
        ctx.exit(1)


@click.group()
@click.option(
    "--config",
    type=click.Path(exists=True),
    default=None,
    help="Path to configuration file (built-in defaults if omitted)",
)
@click.option("--seed", type=int, default=None, help="Random seed for reproducible data")
@click.option("--ticks", type=int, default=None, help="Override ticks per instrument")
@click.option("--log-level", default=None, help="Override log level")
@click.pass_context
def cli(ctx, config, seed, ticks, log_level):
    """marketsim Command Line Interface."""
    ctx.ensure_object(dict)
    ctx.obj["app"] = MarketSimApp(
        config_path=config, seed=seed, tick_count=ticks, log_level=log_level
    )


@cli.command()
@click.pass_context
def summary(ctx):
    """List every instrument with its current state."""
    snapshot = _build(ctx)

    click.echo(f"{'TICKER':<8}{'NAME':<22}{'PRICE':>12}{'CHANGE':>10}{'VOLUME':>12}{'MKT CAP':>18}")
    for inst in snapshot.list_instruments():
        click.echo(
            f"{inst.ticker:<8}{inst.name:<22}{inst.current_price:>12,.2f}"
            f"{inst.change_percent:>+9.2f}%{inst.volume:>12,}{inst.market_cap:>18,.0f}"
        )


@cli.command()
@click.argument("ticker")
@click.option("--depth", default=BOOK_DISPLAY_DEPTH, help="Orders shown per side")
@click.pass_context
def show(ctx, ticker, depth):
    """Show one instrument and its order book."""
    snapshot = _build(ctx)
    ticker = ticker.upper()

    inst = snapshot.get_instrument(ticker)
    if inst is None:
        click.echo(f"No instrument named {ticker}. Known tickers: {', '.join(snapshot.tickers)}")
        return

    click.echo(f"{inst.ticker} - {inst.name}")
    click.echo(f"  Price:      {inst.current_price:,.2f} ({inst.price_change:+,.2f}, {inst.trend.value})")
    click.echo(f"  Open:       {inst.open_price:,.2f}")
    click.echo(f"  Range:      {inst.session_low:,.2f} - {inst.session_high:,.2f}")
    click.echo(f"  Volume:     {inst.volume:,}")
    click.echo(f"  Market cap: {inst.market_cap:,.0f}")

    book = snapshot.orders_for(ticker)
    shown = book.depth(depth)
    click.echo("\n  Bids")
    for o in shown.bids:
        click.echo(f"    {o.limit_price:>12,.2f} x {o.quantity:<5} {o.user_id}")
    if len(book.bids) > len(shown.bids):
        click.echo(f"    +{len(book.bids) - len(shown.bids)} more")
    click.echo("  Asks")
    for o in shown.asks:
        click.echo(f"    {o.limit_price:>12,.2f} x {o.quantity:<5} {o.user_id}")
    if len(book.asks) > len(shown.asks):
        click.echo(f"    +{len(book.asks) - len(shown.asks)} more")
    if book.spread is not None:
        click.echo(f"  Spread:     {book.spread:,.4f}")


@cli.command()
@click.option("--output", type=click.Path(), default=None, help="Write JSON to file instead of stdout")
@click.pass_context
def export(ctx, output):
    """Export the full snapshot as JSON."""
    snapshot = _build(ctx)
    payload = snapshot.to_json()

    if output is None:
        click.echo(payload)
        return

    path = Path(output)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(payload, encoding="utf-8")
    click.echo(f"Wrote snapshot to {path}")


@cli.command()
@click.pass_context
def smoke_test(ctx):
    """Build the snapshot and check its invariants."""
    snapshot = _build(ctx)

    crossed = [t for t in snapshot.tickers if snapshot.orders_for(t).is_crossed]
    if crossed:
        click.echo(f"Smoke test failed: crossed books for {crossed}", err=True)
        ctx.exit(1)

    click.echo(
        f"Smoke test passed: {len(snapshot.instruments)} instruments, "
        f"{len(snapshot.order_book)} orders."
    )


if __name__ == "__main__":
    cli()

# Alias for __main__.py
main = cli
