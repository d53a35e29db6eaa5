"""CLI for the vitalscore biometric intelligence engine."""

from __future__ import annotations

import logging

import click

from vitalscore.snapshot import InvalidSnapshotError, load_snapshots


def _load(path: str) -> list:
    try:
        snapshots = load_snapshots(path)
    except InvalidSnapshotError as e:
        raise click.ClickException(str(e)) from e
    if not snapshots:
        raise click.ClickException(f"No snapshots found in {path}")
    return snapshots


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
def main(verbose: bool) -> None:
    """vitalscore -- recovery, readiness, wellness and strain from wearable data."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@main.command("score")
@click.argument("file", type=click.Path(exists=True))
@click.option("--history", "-H", "history_file", default=None,
              type=click.Path(exists=True),
              help="JSON/JSONL file of prior snapshots for trend analysis.")
@click.option("--prior-recovery", default=None, type=click.IntRange(0, 100),
              help="Yesterday's recovery score to drive Performance Readiness.")
@click.option("--sleep-baseline", default=8.0, help="Nightly sleep target in hours.")
@click.option("--threshold", default=5.0, help="Trend threshold in percent.")
@click.option("--output", "-o", default=None, help="Write the report JSON to file.")
@click.option("--json", "as_json", is_flag=True, help="Print the full report as JSON.")
def score_cmd(
    file: str,
    history_file: str | None,
    prior_recovery: int | None,
    sleep_baseline: float,
    threshold: float,
    output: str | None,
    as_json: bool,
) -> None:
    """Score the most recent snapshot in FILE."""
    from vitalscore.engine.report import build_report

    snapshots = _load(file)
    snapshot = snapshots[-1]
    history = None
    if history_file:
        history = [
            s for s in _load(history_file) if s.subject_id == snapshot.subject_id
        ]

    report = build_report(
        snapshot,
        history=history,
        prior_recovery=prior_recovery,
        sleep_baseline_hours=sleep_baseline,
        threshold_pct=threshold,
    )

    if as_json:
        click.echo(report.to_json())
    else:
        click.echo(f"\n{'=' * 60}")
        click.echo(f"  Intelligence Report: {report.subject_id} {report.day}")
        click.echo(f"{'=' * 60}")
        for composite in (report.recovery, report.performance, report.wellness):
            label = f"{composite.name.capitalize()}:"
            if composite.insufficient_data:
                click.echo(f"  {label:<13}no data")
            else:
                click.echo(f"  {label:<13}{composite.score:>3}/100 "
                           f"{composite.grade:<3} ({composite.status})")
        click.echo(f"  {'Strain:':<13}{report.strain.score:.1f}/21 "
                   f"({report.strain.level})")
        click.echo(f"  {'Overall:':<13}{report.overall.score:>3}/100 "
                   f"{report.overall.grade:<3} ({report.overall.status})")
        click.echo(f"  {'Focus:':<13}{report.focus}")
        click.echo(f"  {'Tip:':<13}{report.quick_tip}")
        click.echo(f"  {'Clearance:':<13}{report.training.tier}")
        if report.trends is not None:
            trends = ", ".join(
                f"{k} {v.value}" for k, v in report.trends.directions.items()
            )
            click.echo(f"  {'Trends:':<13}{trends}")
        click.echo(f"{'=' * 60}")
        for advisory in report.recommendations:
            click.echo(f"  [{advisory.priority.value}] {advisory.title}: "
                       f"{advisory.message}")

    if output:
        with open(output, "w") as f:
            f.write(report.to_json())
        click.echo(f"\nReport written to {output}")


@main.command("trends")
@click.argument("file", type=click.Path(exists=True))
@click.option("--threshold", default=5.0, help="Trend threshold in percent.")
def trends_cmd(file: str, threshold: float) -> None:
    """Show per-metric trends over the snapshots in FILE."""
    from vitalscore.engine.trends import analyze_trends

    trends = analyze_trends(_load(file), threshold_pct=threshold)
    click.echo(f"Window: {trends.start} .. {trends.end} ({trends.days} days)")
    for name, direction in trends.directions.items():
        avg = trends.averages.get(name)
        avg_str = f"{avg:.1f}" if avg is not None else "-"
        click.echo(f"  {name:<12}{direction.value:<10} avg {avg_str}")


@main.command("deload")
@click.argument("file", type=click.Path(exists=True))
def deload_cmd(file: str) -> None:
    """Check whether the history in FILE calls for a deload."""
    from vitalscore.engine.trends import assess_deload

    advice = assess_deload(_load(file))
    if advice.recommend:
        click.echo(f"Deload recommended ({advice.severity}): {advice.reason}")
        click.echo(f"  {advice.suggestion}")
    else:
        click.echo(f"No deload needed: {advice.reason}")


if __name__ == "__main__":
    main()
