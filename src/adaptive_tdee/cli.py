"""CLI interface using Typer."""

from __future__ import annotations

import json
import logging
from datetime import date
from pathlib import Path
from typing import NoReturn, Optional

import typer
import yaml
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from adaptive_tdee.config.settings import ConfigError, Settings
from adaptive_tdee.data.loader import (
    LogLoader,
    load_daily_logs_csv,
    load_intake_csv,
    load_sleep_csv,
    load_weight_csv,
    load_workouts_csv,
)
from adaptive_tdee.tracking.models import Biometrics, WeightSample

app = typer.Typer(
    help="Adaptive TDEE estimation and behavioral insights from your logs",
    no_args_is_help=True,
)
console = Console()

config_app = typer.Typer(help="Inspect configuration")
app.add_typer(config_app, name="config")


# ============================================================================
# Helpers
# ============================================================================


def output_json(response: dict, file=None) -> None:
    """Output JSON response to stdout or file."""
    json_str = json.dumps(response, indent=2)
    if file:
        file.write(json_str)
    else:
        print(json_str)


def fail(message: str, json_output: bool, command: str) -> NoReturn:
    """Report an error in the requested format and exit with status 1."""
    if json_output:
        output_json({"success": False, "command": command, "errors": [message]})
    else:
        console.print(f"[red]{message}[/red]")
    raise typer.Exit(1)


def load_settings(config_path: Optional[Path], json_output: bool, command: str) -> Settings:
    try:
        return Settings.load(config_path)
    except ConfigError as e:
        fail(f"Invalid configuration: {e}", json_output, command)


def parse_today(value: Optional[str], json_output: bool, command: str) -> date:
    if value is None:
        return date.today()
    try:
        return date.fromisoformat(value)
    except ValueError:
        fail(f"Invalid date '{value}' (expected YYYY-MM-DD)", json_output, command)


def build_biometrics(
    settings: Settings,
    weights: list[WeightSample],
    weight_kg: Optional[float],
    height_cm: Optional[float],
    age: Optional[int],
    gender: Optional[str],
    activity: Optional[str],
    goal: Optional[str],
    weekly_goal: Optional[str],
) -> Biometrics:
    """Biometrics from options, falling back to the profile section of the config.

    Without --weight-kg the most recent logged weight is used.

    Raises:
        ValueError: If no weight is available or gender/goal are invalid
    """
    profile = settings.profile
    if weight_kg is None:
        if not weights:
            raise ValueError("No weight available: pass --weight-kg or log at least one weigh-in")
        weight_kg = max(weights, key=lambda w: w.date).weight_kg

    return Biometrics(
        weight_kg=weight_kg,
        height_cm=height_cm if height_cm is not None else profile.height_cm,
        age=age if age is not None else profile.age,
        gender=gender or profile.gender,
        activity_level=activity or profile.activity_level,
        goal_type=goal or profile.goal_type,
        weekly_goal=weekly_goal or profile.weekly_goal,
    )


# ============================================================================
# Global options
# ============================================================================


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Adaptive TDEE estimation and behavioral insights."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )


# ============================================================================
# TDEE Commands
# ============================================================================


@app.command()
def estimate(
    weights_csv: Path = typer.Option(..., "--weights", "-w", help="CSV with date,weight_kg"),
    intake_csv: Path = typer.Option(..., "--intake", "-i", help="CSV with date,calories"),
    weight_kg: Optional[float] = typer.Option(None, "--weight-kg", help="Current weight (default: latest logged)"),
    height_cm: Optional[float] = typer.Option(None, "--height-cm", help="Height in cm"),
    age: Optional[int] = typer.Option(None, "--age", help="Age in years"),
    gender: Optional[str] = typer.Option(None, "--gender", help="male or female"),
    activity: Optional[str] = typer.Option(None, "--activity", help="sedentary, light, moderate, active, extreme"),
    goal: Optional[str] = typer.Option(None, "--goal", help="cut, maintain or bulk"),
    weekly_goal: Optional[str] = typer.Option(None, "--weekly-goal", help="lose2, lose1, lose05, maintain, gain05, gain1"),
    today_str: Optional[str] = typer.Option(None, "--today", help="Reference day (YYYY-MM-DD)"),
    config_path: Optional[Path] = typer.Option(None, "--config", help="Path to config.yaml"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Estimate TDEE from weigh-ins and calorie logs."""
    from adaptive_tdee.tracking.diagnostics import format_estimate_report, result_to_dict
    from adaptive_tdee.tracking.estimator import estimate_tdee

    command = "estimate"
    settings = load_settings(config_path, json_output, command)
    today = parse_today(today_str, json_output, command)

    try:
        weights = load_weight_csv(weights_csv)
        intakes = load_intake_csv(intake_csv)
        biometrics = build_biometrics(
            settings, weights, weight_kg, height_cm, age, gender, activity, goal, weekly_goal
        )
    except (OSError, ValueError) as e:
        fail(str(e), json_output, command)

    result = estimate_tdee(weights, intakes, biometrics, today=today, config=settings.estimator)
    est = result.estimate

    if json_output:
        output_json({
            "success": True,
            "command": command,
            "data": result_to_dict(result),
            "human_summary": (
                f"TDEE: {est.tdee} kcal/day ({est.estimate_source.value}, "
                f"{est.confidence * 100:.0f}% confidence), eat {est.recommended_intake} kcal/day"
            ),
        })
    else:
        console.print(format_estimate_report(result))


@app.command()
def trend(
    weights_csv: Path = typer.Option(..., "--weights", "-w", help="CSV with date,weight_kg"),
    intake_csv: Path = typer.Option(..., "--intake", "-i", help="CSV with date,calories"),
    weight_kg: Optional[float] = typer.Option(None, "--weight-kg", help="Current weight (default: latest logged)"),
    height_cm: Optional[float] = typer.Option(None, "--height-cm", help="Height in cm"),
    age: Optional[int] = typer.Option(None, "--age", help="Age in years"),
    gender: Optional[str] = typer.Option(None, "--gender", help="male or female"),
    activity: Optional[str] = typer.Option(None, "--activity", help="Activity level"),
    plain: bool = typer.Option(False, "--plain", help="Plain text table instead of rich output"),
    config_path: Optional[Path] = typer.Option(None, "--config", help="Path to config.yaml"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Show the rolling TDEE trend over your logs."""
    from adaptive_tdee.tracking.diagnostics import format_trend_report, to_plain_dict
    from adaptive_tdee.tracking.estimator import compute_tdee_trend, formula_tdee

    command = "trend"
    settings = load_settings(config_path, json_output, command)

    try:
        weights = load_weight_csv(weights_csv)
        intakes = load_intake_csv(intake_csv)
        biometrics = build_biometrics(
            settings, weights, weight_kg, height_cm, age, gender, activity, None, None
        )
    except (OSError, ValueError) as e:
        fail(str(e), json_output, command)

    prior = formula_tdee(biometrics)
    points = compute_tdee_trend(weights, intakes, prior.tdee, settings.estimator)

    if json_output:
        output_json({
            "success": True,
            "command": command,
            "data": {
                "formula_tdee": prior.tdee,
                "points": [to_plain_dict(p) for p in points],
            },
            "human_summary": (
                f"{len(points)} trend points, latest TDEE {points[-1].tdee} kcal/day"
                if points
                else "Not enough aligned data for a TDEE trend"
            ),
        })
        return

    if plain:
        print(format_trend_report(points))
        return

    if not points:
        console.print("[yellow]Not enough aligned data for a TDEE trend (need 7 days with weight and intake).[/yellow]")
        return

    table = Table(title="TDEE Trend")
    table.add_column("Date", style="cyan")
    table.add_column("TDEE", justify="right")
    table.add_column("Smoothed weight (kg)", justify="right")
    table.add_column("Blend", justify="right")
    for p in points:
        table.add_row(p.date.isoformat(), str(p.tdee), f"{p.smoothed_weight:.1f}", f"{p.confidence:.2f}")

    console.print(table)
    console.print(f"\nFormula baseline: {prior.tdee} kcal/day")


# ============================================================================
# Behavioral Commands
# ============================================================================


@app.command()
def insights(
    logs_csv: Path = typer.Option(..., "--logs", "-l", help="Daily logs CSV (date,calories,protein,...)"),
    weights_csv: Optional[Path] = typer.Option(None, "--weights", "-w", help="CSV with date,weight_kg"),
    sleep_csv: Optional[Path] = typer.Option(None, "--sleep", help="CSV with date,hours,quality"),
    workouts_csv: Optional[Path] = typer.Option(None, "--workouts", help="CSV with date,duration,..."),
    goal_weight: Optional[float] = typer.Option(None, "--goal-weight", help="Goal weight (kg)"),
    start_weight: Optional[float] = typer.Option(None, "--start-weight", help="Starting weight (kg)"),
    weekly_rate: Optional[float] = typer.Option(None, "--weekly-rate", help="Planned kg/week"),
    max_insights: Optional[int] = typer.Option(None, "--max", help="Maximum insights to show"),
    today_str: Optional[str] = typer.Option(None, "--today", help="Reference day (YYYY-MM-DD)"),
    config_path: Optional[Path] = typer.Option(None, "--config", help="Path to config.yaml"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Generate prioritized insights from your logs."""
    from adaptive_tdee.insights import InsightInput, generate_insights, next_week_focus
    from adaptive_tdee.tracking.diagnostics import insight_to_dict

    command = "insights"
    settings = load_settings(config_path, json_output, command)
    today = parse_today(today_str, json_output, command)

    loader = LogLoader()
    try:
        daily_logs = load_daily_logs_csv(logs_csv, loader)
        weights = load_weight_csv(weights_csv, loader) if weights_csv else []
        sleep = load_sleep_csv(sleep_csv, loader) if sleep_csv else []
        workouts = load_workouts_csv(workouts_csv, loader) if workouts_csv else []
    except (OSError, ValueError) as e:
        fail(str(e), json_output, command)

    current_weight = max(weights, key=lambda w: w.date).weight_kg if weights else None
    data = InsightInput(
        daily_logs=daily_logs,
        weight_history=weights,
        sleep_data=sleep,
        workout_data=workouts,
        current_weight=current_weight,
        goal_weight=goal_weight,
        start_weight=start_weight,
        expected_weekly_rate=weekly_rate,
        logged_dates=sorted({d.date for d in daily_logs if d.tracked}),
        today=today,
    )
    results = generate_insights(data, max_insights or settings.insights.max_insights)
    focus = next_week_focus(results)

    if json_output:
        output_json({
            "success": True,
            "command": command,
            "data": {
                "insights": [insight_to_dict(i) for i in results],
                "next_week_focus": focus,
                "skipped_rows": loader.skipped,
            },
            "human_summary": f"{len(results)} insights",
        })
        return

    if not results:
        console.print("[yellow]No insights yet. Keep logging (at least 3 days needed).[/yellow]")
    for insight in results:
        body = insight.description
        if insight.actionable:
            body += f"\n[cyan]{insight.actionable}[/cyan]"
        console.print(
            Panel(
                body,
                title=f"[bold]{insight.title}[/bold]",
                subtitle=f"{insight.type.value} · priority {insight.priority}",
            )
        )

    console.print("\n[bold]Next week focus:[/bold]")
    for item in focus:
        console.print(f"  - {item}")


@app.command()
def streaks(
    logs_csv: Path = typer.Option(..., "--logs", "-l", help="Daily logs CSV (date,calories,...)"),
    today_str: Optional[str] = typer.Option(None, "--today", help="Reference day (YYYY-MM-DD)"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Show logging streaks and the day streaks usually break."""
    from adaptive_tdee.analytics.streaks import analyze_streaks
    from adaptive_tdee.tracking.diagnostics import to_plain_dict

    command = "streaks"
    today = parse_today(today_str, json_output, command)

    try:
        daily_logs = load_daily_logs_csv(logs_csv)
    except (OSError, ValueError) as e:
        fail(str(e), json_output, command)

    analysis = analyze_streaks([d.date for d in daily_logs if d.tracked], today=today)

    if json_output:
        output_json({
            "success": True,
            "command": command,
            "data": to_plain_dict(analysis),
            "human_summary": (
                f"Current streak {analysis.current_streak} days, "
                f"longest {analysis.longest_streak} days"
            ),
        })
        return

    table = Table(title="Logging Streaks")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")
    table.add_row("Current streak", f"{analysis.current_streak} days")
    table.add_row("Longest streak", f"{analysis.longest_streak} days")
    table.add_row("Average streak", f"{analysis.average_streak_length:.1f} days")
    table.add_row("Total streaks", str(analysis.total_streaks))
    table.add_row("Most likely break day", analysis.most_likely_break_day or "-")
    console.print(table)

    breaks = Table(title="Missed days by weekday")
    for day in analysis.streak_break_days:
        breaks.add_column(day, justify="right")
    breaks.add_row(*(str(n) for n in analysis.streak_break_days.values()))
    console.print(breaks)


# ============================================================================
# Config Commands
# ============================================================================


@config_app.command("show")
def config_show(
    config_path: Optional[Path] = typer.Option(None, "--config", help="Path to config.yaml"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
) -> None:
    """Show the effective configuration."""
    from adaptive_tdee.config.settings import default_config_path

    command = "config show"
    settings = load_settings(config_path, json_output, command)
    source = config_path or default_config_path()

    if json_output:
        output_json({
            "success": True,
            "command": command,
            "data": settings.to_dict(),
            "human_summary": f"Configuration from {source if source.exists() else 'defaults'}",
        })
        return

    console.print(f"[dim]Source: {source if source.exists() else 'built-in defaults'}[/dim]")
    console.print(yaml.dump(settings.to_dict(), default_flow_style=False, sort_keys=False))


if __name__ == "__main__":
    app()
