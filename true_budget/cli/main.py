"""
CLI interface for True Budget.

Provides command-line access to the budget: recording paychecks,
expenses and goals, and showing the current pay period.
"""

import logging
import sqlite3
import sys
from datetime import datetime
from decimal import Decimal
from typing import Callable, List, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from true_budget.config.loader import AppConfig, resolve_app_config
from true_budget.core.categories import add_category, move_category, remove_category
from true_budget.core.contributions import goal_progress, recurring_progress
from true_budget.core.proration import describe_cadence
from true_budget.core.spending import ExpenseWindow, filter_expenses
from true_budget.core.status import BudgetPeriod, get_budget_status
from true_budget.core.validation import (
    build_goal,
    build_goal_contribution,
    build_one_time_expense,
    build_paycheck,
    build_recurring_expense,
)
from true_budget.storage.models import (
    AppSettings,
    CustomUnit,
    Frequency,
    PaycheckFrequency,
)
from true_budget.storage.repository import BudgetRepository, get_repository, initialize_schema

app = typer.Typer()
console = Console()

EXIT_CODE_PASS = 0
EXIT_CODE_FAIL = 1

RECENT_EXPENSE_COUNT = 5


def _clock() -> datetime:
    return datetime.now()


def _config(ctx: typer.Context) -> AppConfig:
    return ctx.obj


def _repository(ctx: typer.Context) -> BudgetRepository:
    return get_repository(_config(ctx).database_path)


def _fail(error: Exception) -> None:
    """Print error and exit with the failing exit code."""
    if isinstance(error, sqlite3.OperationalError) and "no such table" in str(error).lower():
        console.print("\n[bold yellow]No budget database found[/]")
        console.print("Run `true-budget init` to initialize the database\n")
    else:
        console.print(f"[red]Error:[/] {error}")
    sys.exit(EXIT_CODE_FAIL)


def _format_currency(amount: Decimal) -> str:
    """Format currency with sign and two decimals."""
    sign = "-" if amount < 0 else ""
    return f"{sign}${abs(amount):,.2f}"


def _format_date(moment: datetime) -> str:
    return moment.strftime("%Y-%m-%d")


def _update_categories(
    repository: BudgetRepository,
    edit: Callable[[List[str]], List[str]],
    goal: bool = False,
) -> None:
    """Apply edit to the stored expense or goal category list."""
    settings = repository.load_settings()
    if goal:
        settings = AppSettings(settings.default_paycheck_frequency, settings.categories,
                               edit(settings.goal_categories))
    else:
        settings = AppSettings(settings.default_paycheck_frequency, edit(settings.categories),
                               settings.goal_categories)
    repository.save_settings(settings)


def _remember_category(repository: BudgetRepository, category: str, goal: bool = False) -> None:
    """Append category to the stored settings if it is new."""
    settings = repository.load_settings()
    existing = settings.goal_categories if goal else settings.categories
    if category not in existing:
        _update_categories(repository, lambda categories: add_category(categories, category), goal)


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    config: Optional[str] = typer.Option(
        None,
        "--config",
        "-c",
        envvar="TRUE_BUDGET_CONFIG",
        help="Path to YAML configuration file"
    ),
    db: Optional[str] = typer.Option(
        None,
        "--db",
        envvar="TRUE_BUDGET_DB",
        help="Path to SQLite database file"
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Show debug logging"
    ),
):
    """True Budget CLI."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=console, show_path=False)],
        )
    try:
        ctx.obj = resolve_app_config(config, db)
    except Exception as e:
        _fail(e)
    if ctx.invoked_subcommand is None:
        console.print("True Budget - Use --help to see available commands")


@app.command()
def init(ctx: typer.Context):
    """Initialize the True Budget database."""
    try:
        config = _config(ctx)
        initialize_schema(config.database_path)
        repository = _repository(ctx)
        if not repository.has_settings():
            repository.save_settings(config.settings)
        console.print("[green]✓[/] Database initialized successfully")
    except Exception as e:
        _fail(e)
    sys.exit(EXIT_CODE_PASS)


@app.command()
def status(ctx: typer.Context):
    """Show the budget for the current pay period."""
    try:
        snapshot = _repository(ctx).load_snapshot()
        budget = get_budget_status(
            snapshot.paychecks,
            snapshot.recurring_expenses,
            snapshot.one_time_expenses,
            snapshot.goals,
            clock=_clock,
        )
    except Exception as e:
        _fail(e)

    if budget is None:
        console.print("\n[bold]No Paycheck Set[/bold]")
        console.print("Add your first paycheck to get started.\n")
        sys.exit(EXIT_CODE_PASS)

    _display_budget(budget)
    sys.exit(EXIT_CODE_PASS)


def _display_budget(budget: BudgetPeriod) -> None:
    """Display the dashboard for a pay period."""
    console.print("\n[bold]Current Pay Period[/bold]")
    console.print(f"{_format_date(budget.start_date)} - {_format_date(budget.end_date)}")
    console.print("-" * 40)

    remaining_style = "green" if budget.remaining >= 0 else "red"
    console.print(f"Remaining: [{remaining_style}]{_format_currency(budget.remaining)}[/]")

    summary = Table(show_header=False, box=None)
    summary.add_column("Item")
    summary.add_column("Amount", justify="right")
    summary.add_row("Paycheck", _format_currency(budget.total_budget))
    summary.add_row("Recurring", _format_currency(budget.recurring_total))
    summary.add_row("Goals", _format_currency(budget.goals_total))
    summary.add_row("Spent", _format_currency(budget.spent))
    console.print(summary)

    console.print("\n[bold]Goals[/bold]")
    for goal in budget.goals:
        console.print(f"{goal.name}  {describe_cadence(goal, budget.paycheck_frequency)}")
    if not budget.goals:
        console.print("[dim]No goals set[/]")

    console.print("\n[bold]Recurring Expenses[/bold]")
    for expense in budget.recurring_expenses:
        console.print(f"{expense.name}  {describe_cadence(expense, budget.paycheck_frequency)}")
    if not budget.recurring_expenses:
        console.print("[dim]No recurring expenses[/]")

    console.print("\n[bold]Recent Expenses[/bold]")
    recent = sorted(budget.expenses, key=lambda e: e.date, reverse=True)[:RECENT_EXPENSE_COUNT]
    for expense in recent:
        console.print(f"{expense.name}  {_format_currency(expense.amount)}")
    if not recent:
        console.print("[dim]No expenses yet[/]")
    print()


@app.command("add-paycheck")
def add_paycheck(
    ctx: typer.Context,
    amount: str = typer.Option(..., "--amount", "-a", help="Paycheck amount"),
    date: Optional[str] = typer.Option(None, "--date", "-d", help="Pay date (YYYY-MM-DD), default today"),
    frequency: Optional[PaycheckFrequency] = typer.Option(
        None, "--frequency", "-f", help="Pay frequency, default from settings"
    ),
    name: Optional[str] = typer.Option(None, "--name", "-n", help="Optional paycheck name"),
):
    """Record a paycheck."""
    try:
        repository = _repository(ctx)
        if frequency is None:
            frequency = repository.load_settings().default_paycheck_frequency
        paycheck = build_paycheck(amount, date or _clock(), frequency, name)
        repository.save_paychecks(repository.load_paychecks() + [paycheck])
        console.print(f"[green]✓[/] Added paycheck {_format_currency(paycheck.amount)} ({paycheck.id})")
    except Exception as e:
        _fail(e)
    sys.exit(EXIT_CODE_PASS)


@app.command("add-expense")
def add_expense(
    ctx: typer.Context,
    amount: str = typer.Option(..., "--amount", "-a", help="Expense amount"),
    category: str = typer.Option(..., "--category", "-c", help="Expense category"),
    name: Optional[str] = typer.Option(None, "--name", "-n", help="Expense name"),
    date: Optional[str] = typer.Option(None, "--date", "-d", help="Expense date (YYYY-MM-DD), default now"),
):
    """Record a one-time expense."""
    try:
        repository = _repository(ctx)
        expense = build_one_time_expense(amount, category, name, date or _clock())
        repository.save_one_time_expenses(repository.load_one_time_expenses() + [expense])
        _remember_category(repository, expense.category)
        console.print(f"[green]✓[/] Added expense {expense.name} {_format_currency(expense.amount)}")
    except Exception as e:
        _fail(e)
    sys.exit(EXIT_CODE_PASS)


@app.command("add-recurring")
def add_recurring(
    ctx: typer.Context,
    amount: str = typer.Option(..., "--amount", "-a", help="Amount per cycle"),
    category: str = typer.Option(..., "--category", "-c", help="Expense category"),
    frequency: Frequency = typer.Option(Frequency.MONTHLY, "--frequency", "-f", help="Billing cadence"),
    start_date: Optional[str] = typer.Option(None, "--start-date", "-s", help="First billing date, default today"),
    name: Optional[str] = typer.Option(None, "--name", "-n", help="Expense name"),
    custom_number: Optional[int] = typer.Option(None, "--custom-number", help="N in 'amount per N units'"),
    custom_unit: CustomUnit = typer.Option(CustomUnit.DAYS, "--custom-unit", help="Unit of a custom cadence"),
):
    """Record a recurring expense."""
    try:
        repository = _repository(ctx)
        expense = build_recurring_expense(
            amount,
            category,
            frequency,
            start_date or _clock(),
            name=name,
            custom_number=custom_number,
            custom_unit=custom_unit,
        )
        repository.save_recurring_expenses(repository.load_recurring_expenses() + [expense])
        _remember_category(repository, expense.category)
        console.print(f"[green]✓[/] Added recurring expense {expense.name} ({expense.id})")
    except Exception as e:
        _fail(e)
    sys.exit(EXIT_CODE_PASS)


@app.command("add-goal")
def add_goal(
    ctx: typer.Context,
    name: str = typer.Option(..., "--name", "-n", help="Goal name"),
    target: str = typer.Option(..., "--target", "-t", help="Target amount"),
    category: Optional[str] = typer.Option(None, "--category", "-c", help="Goal category"),
    frequency: Frequency = typer.Option(Frequency.MONTHLY, "--frequency", "-f", help="Contribution cadence"),
    custom_number: Optional[int] = typer.Option(None, "--custom-number", help="N in 'amount per N units'"),
    custom_unit: CustomUnit = typer.Option(CustomUnit.MONTHS, "--custom-unit", help="Unit of a custom cadence"),
):
    """Create a savings goal."""
    try:
        repository = _repository(ctx)
        if category is None:
            goal_categories = repository.load_settings().goal_categories
            if not goal_categories:
                raise ValueError("Please choose a goal category")
            category = goal_categories[0]
        goal = build_goal(
            name,
            target,
            frequency,
            category,
            custom_number=custom_number,
            custom_unit=custom_unit,
            start_date=_clock(),
        )
        repository.save_goals(repository.load_goals() + [goal])
        _remember_category(repository, goal.category, goal=True)
        console.print(f"[green]✓[/] Added goal {goal.name} ({goal.id})")
    except Exception as e:
        _fail(e)
    sys.exit(EXIT_CODE_PASS)


@app.command()
def contribute(
    ctx: typer.Context,
    goal_id: str = typer.Argument(..., help="Goal id"),
    amount: str = typer.Argument(..., help="Contribution amount"),
):
    """Record a contribution toward a goal."""
    try:
        repository = _repository(ctx)
        goal = _find_goal(repository, goal_id)
        contribution = build_goal_contribution(goal, amount, _clock())
        repository.save_one_time_expenses(repository.load_one_time_expenses() + [contribution])
        console.print(f"[green]✓[/] Contributed {_format_currency(contribution.amount)} to {goal.name}")
    except Exception as e:
        _fail(e)
    sys.exit(EXIT_CODE_PASS)


def _find_goal(repository: BudgetRepository, goal_id: str):
    for goal in repository.load_goals():
        if goal.id == goal_id:
            return goal
    raise ValueError(f"Goal not found: {goal_id}")


@app.command()
def goal(
    ctx: typer.Context,
    goal_id: str = typer.Argument(..., help="Goal id"),
):
    """Show progress toward a goal."""
    try:
        repository = _repository(ctx)
        found = _find_goal(repository, goal_id)
        progress = goal_progress(found, repository.load_one_time_expenses())
    except Exception as e:
        _fail(e)

    console.print(f"\n[bold]{found.name}[/bold]")
    console.print(f"Saved {_format_currency(progress.total)} of {_format_currency(progress.target)}")
    console.print(f"{progress.percentage:.1f}% complete")
    if progress.next_due is not None:
        console.print(f"Next contribution: {_format_date(progress.next_due)}")
    _display_expense_table(sorted(progress.related, key=lambda e: e.date, reverse=True), "Contributions")
    sys.exit(EXIT_CODE_PASS)


@app.command()
def recurring(
    ctx: typer.Context,
    expense_id: str = typer.Argument(..., help="Recurring expense id"),
):
    """Show payments recorded against a recurring expense."""
    try:
        repository = _repository(ctx)
        matches = [r for r in repository.load_recurring_expenses() if r.id == expense_id]
        if not matches:
            raise ValueError(f"Recurring expense not found: {expense_id}")
        expense = matches[0]
        progress = recurring_progress(expense, repository.load_one_time_expenses())
    except Exception as e:
        _fail(e)

    console.print(f"\n[bold]{expense.name}[/bold]")
    console.print(f"Paid {_format_currency(progress.total)} of {_format_currency(progress.target)}")
    console.print(f"{progress.percentage:.1f}% complete")
    if progress.next_due is not None:
        console.print(f"Next payment: {_format_date(progress.next_due)}")
    _display_expense_table(sorted(progress.related, key=lambda e: e.date, reverse=True), "Payments")
    sys.exit(EXIT_CODE_PASS)


@app.command()
def expenses(
    ctx: typer.Context,
    window: ExpenseWindow = typer.Option(
        ExpenseWindow.PAYCHECK, "--window", "-w", help="Which expenses to list"
    ),
):
    """List one-time expenses for a time window."""
    try:
        repository = _repository(ctx)
        selected = filter_expenses(
            repository.load_one_time_expenses(),
            repository.load_paychecks(),
            window,
            _clock(),
        )
    except Exception as e:
        _fail(e)

    _display_expense_table(selected, f"Expenses ({window.value})")
    total = sum((e.amount for e in selected), Decimal("0"))
    console.print(f"Total spent: {_format_currency(total)}")
    sys.exit(EXIT_CODE_PASS)


def _display_expense_table(rows: List, title: str) -> None:
    if not rows:
        console.print(f"\n[dim]No {title.lower()}[/]")
        return
    table = Table(title=title)
    table.add_column("Date")
    table.add_column("Name")
    table.add_column("Category")
    table.add_column("Amount", justify="right")
    for expense in rows:
        table.add_row(
            _format_date(expense.date),
            expense.name,
            expense.category,
            _format_currency(expense.amount),
        )
    console.print(table)


@app.command()
def settings(
    ctx: typer.Context,
    default_frequency: Optional[PaycheckFrequency] = typer.Option(
        None, "--default-frequency", help="Set the default paycheck frequency"
    ),
    add_expense_category: Optional[str] = typer.Option(None, "--add-category", help="Add an expense category"),
    add_goal_category: Optional[str] = typer.Option(None, "--add-goal-category", help="Add a goal category"),
    remove_expense_category: Optional[str] = typer.Option(
        None, "--remove-category", help="Remove an expense category"
    ),
    remove_goal_category: Optional[str] = typer.Option(
        None, "--remove-goal-category", help="Remove a goal category"
    ),
    move_expense_category: Optional[str] = typer.Option(
        None, "--move-category", help="Move an expense category one place (see --up/--down)"
    ),
    move_goal_category: Optional[str] = typer.Option(
        None, "--move-goal-category", help="Move a goal category one place (see --up/--down)"
    ),
    up: bool = typer.Option(True, "--up/--down", help="Direction for --move-category and --move-goal-category"),
):
    """Show or change settings."""
    try:
        repository = _repository(ctx)
        if default_frequency is not None:
            current = repository.load_settings()
            repository.save_settings(
                AppSettings(default_frequency, current.categories, current.goal_categories)
            )
        if add_expense_category is not None:
            _update_categories(repository, lambda c: add_category(c, add_expense_category))
        if add_goal_category is not None:
            _update_categories(repository, lambda c: add_category(c, add_goal_category), goal=True)
        if remove_expense_category is not None:
            _update_categories(repository, lambda c: remove_category(c, remove_expense_category))
        if remove_goal_category is not None:
            _update_categories(repository, lambda c: remove_category(c, remove_goal_category), goal=True)
        if move_expense_category is not None:
            _update_categories(repository, lambda c: move_category(c, move_expense_category, up))
        if move_goal_category is not None:
            _update_categories(repository, lambda c: move_category(c, move_goal_category, up), goal=True)
        current = repository.load_settings()
    except Exception as e:
        _fail(e)

    console.print(f"\nDefault paycheck frequency: {current.default_paycheck_frequency.value}")
    console.print(f"Expense categories: {', '.join(current.categories)}")
    console.print(f"Goal categories: {', '.join(current.goal_categories)}\n")
    sys.exit(EXIT_CODE_PASS)


if __name__ == "__main__":
    app()
