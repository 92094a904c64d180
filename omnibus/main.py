"""
OmniBus command line.

Serves the web app and runs staff operations (routes, tickets, manifests,
check-in, reset) plus a scripted booking and the debounced insight demo.
"""

import asyncio
import logging
from typing import List, Optional

import typer
from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.prompt import Confirm
from rich.table import Table

from . import catalog
from .controller import ApplicationController, build_controller
from .errors import OmnibusError, RouteNotFoundError
from .models.manifest import TicketModel
from .services.insight_provider import InsightPanel
from .utils.config import get_config
from .utils.log import configure_logging

logger = logging.getLogger(__name__)

# Initialize typer app and rich console
app = typer.Typer(help="OmniBus bus booking demo")
console = Console()

STATUS_COLORS = {
    "CONFIRMED": "yellow",
    "CHECKED_IN": "green",
    "CANCELLED": "red",
}


def _controller() -> ApplicationController:
    return build_controller(get_config())


def _print_ticket(ticket: TicketModel) -> None:
    booking, route = ticket.booking, ticket.route
    status = booking.status.value
    console.print(Panel(
        f"[bold]{booking.passenger.full_name}[/bold] ({booking.passenger.email})\n"
        f"{route.label} · bus {route.bus_number}\n"
        f"Departs {route.departure_time:%d %b %Y %H:%M}, arrives {route.arrival_time:%H:%M}\n"
        f"Seat [cyan]{booking.seat_number}[/cyan] · [{STATUS_COLORS[status]}]{status}[/{STATUS_COLORS[status]}]",
        title=f"🎫 Boarding pass {booking.id}",
        box=box.ROUNDED,
    ))


@app.callback()
def main(
    log_level: str = typer.Option(None, "--log-level", help="Override OMNIBUS_LOG_LEVEL"),
):
    """Configure logging before any command runs."""
    configure_logging(log_level or get_config().omnibus_log_level)


@app.command()
def serve(
    host: str = typer.Option("127.0.0.1", help="Bind address"),
    port: int = typer.Option(5000, help="Port"),
    config_name: str = typer.Option(None, "--config", help="development, testing or production"),
):
    """Run the web application."""
    from .web import create_app

    flask_app = create_app(config_name)
    console.print(f"[green]✓[/green] OmniBus listening on http://{host}:{port}")
    flask_app.run(host=host, port=port, debug=flask_app.config.get("DEBUG", False))


@app.command()
def routes(
    origin: Optional[str] = typer.Option(None, help="Departure city"),
    destination: Optional[str] = typer.Option(None, help="Arrival city"),
):
    """List scheduled routes, optionally filtered by origin and destination."""
    if origin and destination:
        found = catalog.search_routes(origin, destination)
    else:
        found = [
            route for route in catalog.ROUTES
            if (origin is None or route.origin == origin)
            and (destination is None or route.destination == destination)
        ]

    if not found:
        console.print(f"[yellow]No routes found for {origin or 'any'} → {destination or 'any'}[/yellow]")
        raise typer.Exit(code=1)

    table = Table(title="🚌 Routes", box=box.ROUNDED)
    table.add_column("ID", style="cyan")
    table.add_column("Route")
    table.add_column("Departure")
    table.add_column("Arrival")
    table.add_column("Price", justify="right")
    table.add_column("Seats", justify="right")
    table.add_column("Bus")
    for route in found:
        table.add_row(
            route.id,
            route.label,
            f"{route.departure_time:%d %b %H:%M}",
            f"{route.arrival_time:%H:%M}",
            f"€{route.price}",
            str(route.total_seats),
            route.bus_number,
        )
    console.print(table)


@app.command()
def lookup(query: str = typer.Argument("", help="Booking ID or email; latest booking if empty")):
    """Show a boarding pass."""
    ticket = _controller().lookup.ticket(query)
    if ticket is None:
        console.print(f"[red]❌ No booking found for '{query}'[/red]")
        raise typer.Exit(code=1)
    _print_ticket(ticket)


@app.command()
def manifest(route: Optional[str] = typer.Option(None, "--route", help="Route ID (defaults to the first route)")):
    """Show the passenger manifest and dashboard metrics."""
    admin = _controller().admin
    try:
        result = admin.manifest(route)
    except RouteNotFoundError as e:
        console.print(f"[red]❌ {e.message}[/red]")
        raise typer.Exit(code=1)

    table = Table(
        title=f"📋 Manifest {result.route.id} · {result.route.label}",
        caption=f"{result.checked_in_count}/{result.total_passengers} boarded",
        box=box.ROUNDED,
    )
    table.add_column("Booking", style="cyan")
    table.add_column("Passenger")
    table.add_column("Seat", justify="right")
    table.add_column("Status")
    for booking in result.bookings:
        color = STATUS_COLORS[booking.status.value]
        table.add_row(
            booking.id,
            booking.passenger.full_name,
            str(booking.seat_number),
            f"[{color}]{booking.status.value}[/{color}]",
        )
    console.print(table)

    metrics = admin.metrics()
    console.print(
        f"Total bookings: [bold]{metrics.total_bookings}[/bold] | "
        f"Checked in: [bold]{metrics.checked_in}[/bold] | "
        f"Revenue: [bold]€{metrics.revenue}[/bold]"
    )


@app.command("check-in")
def check_in(booking_id: str = typer.Argument(..., help="Exact booking ID")):
    """Check in a passenger."""
    result = _controller().admin.check_in(booking_id)
    if not result.found:
        console.print(f"[red]❌ {result.message}[/red]")
        raise typer.Exit(code=1)
    console.print(f"[green]✓[/green] {result.message}")


@app.command()
def reset(yes: bool = typer.Option(False, "--yes", help="Skip the confirmation prompt")):
    """Replace all bookings with the demo data."""
    confirmed = yes or Confirm.ask("Delete all bookings and restore the demo data?")
    if not _controller().reset_data(confirmed):
        console.print("[yellow]Reset cancelled[/yellow]")
        raise typer.Exit(code=1)
    console.print("[green]✓[/green] Bookings reset to demo data")


@app.command()
def book(
    first_name: str = typer.Option(..., "--first-name", help="Passenger first name"),
    last_name: str = typer.Option(..., "--last-name", help="Passenger last name"),
    email: str = typer.Option(..., "--email", help="Passenger email"),
    origin: str = typer.Option("Paris", help="Departure city"),
    destination: str = typer.Option("Lyon", help="Arrival city"),
    route_id: Optional[str] = typer.Option(None, "--route", help="Route ID (first match if omitted)"),
    seat: Optional[int] = typer.Option(None, help="Seat number (first free seat if omitted)"),
):
    """Run the booking flow end to end without the web UI."""
    controller = _controller()
    flow = controller.start_booking()

    try:
        matches = flow.search(origin, destination)
        if not matches:
            console.print(f"[red]❌ No routes found for {origin} → {destination}[/red]")
            raise typer.Exit(code=1)
        if flow.destination_changed:
            console.print(Panel(controller.get_insight(destination), title=f"✨ {destination}", box=box.ROUNDED))

        flow.select_route(route_id or matches[0].id)
        seat_map = flow.seat_map()
        if seat is None:
            seat = next((s.seat_number for row in seat_map.rows for s in row.left + row.right if s.available), None)
            if seat is None:
                console.print(f"[red]❌ No free seat on {flow.selected_route.id}[/red]")
                raise typer.Exit(code=1)
        flow.select_seat(seat)
        flow.continue_to_details()
        flow.submit_passenger(first_name, last_name, email)

        console.print(f"Total: [bold]€{flow.total}[/bold] (incl. €{flow.booking_fee} booking fee)")
        with console.status("Processing payment..."):
            booking = controller.confirm_payment()
    except OmnibusError as e:
        console.print(f"[red]❌ {e.message}[/red]")
        raise typer.Exit(code=1)

    console.print(f"[green]✓[/green] Booking confirmed: [bold]{booking.id}[/bold]")
    _print_ticket(controller.lookup.ticket(booking.id))


async def _run_insights(panel: InsightPanel, cities: List[str], interval: float) -> Optional[str]:
    for city in cities:
        panel.request(city)
        await asyncio.sleep(interval)
    return await panel.wait()


@app.command()
def insight(
    cities: List[str] = typer.Argument(..., help="Destinations, as if picked one after another"),
    interval: float = typer.Option(0.1, help="Seconds between picks"),
):
    """Request destination blurbs the way the booking screen does (debounced)."""
    config = get_config()
    controller = _controller()
    panel = InsightPanel(controller.insight_provider, debounce=config.insight_debounce_seconds)

    text = asyncio.run(_run_insights(panel, cities, interval))
    console.print(Panel(
        text or "[dim]No insight[/dim]",
        title=f"✨ {panel.destination}",
        subtitle=f"provider: {controller.insight_provider.name}",
        box=box.ROUNDED,
    ))


if __name__ == "__main__":
    app()
