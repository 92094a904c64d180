"""Main routes for the OmniBus booking screens."""

from flask import Blueprint, render_template, request, redirect, url_for, flash, jsonify, current_app

from ... import catalog
from ...errors import OmnibusError, RouteNotFoundError, BookingNotFoundError
from ...models.enums import FlowStep, ViewState
from .. import get_controller

# Create blueprint
main_bp = Blueprint('main', __name__)

VIEW_ENDPOINTS = {
    ViewState.HOME: 'main.booking',
    ViewState.BOOKING: 'main.booking',
    ViewState.TICKET: 'main.ticket',
    ViewState.ADMIN: 'main.admin',
}


@main_bp.route('/')
def index():
    """Show whichever screen is active."""
    controller = get_controller()
    return redirect(url_for(VIEW_ENDPOINTS[controller.current_view]))


@main_bp.route('/health')
def health():
    """Liveness check with booking store backend details."""
    controller = get_controller()
    return jsonify({
        'status': 'ok',
        'bookings': len(controller.store),
        'store': controller.store.client.get_stats(),
        'insight_provider': controller.insight_provider.name,
    })


@main_bp.route('/booking', methods=['GET'])
def booking():
    """Booking wizard at its current step."""
    controller = get_controller()
    if controller.current_view != ViewState.HOME:
        controller.navigate(ViewState.BOOKING)
    flow = controller.flow

    return render_template(
        'booking.html',
        flow=flow,
        steps=list(FlowStep),
        cities=catalog.CITIES,
        destinations=catalog.destinations_for(flow.origin),
        routes=flow.matching_routes,
        seat_map=flow.seat_map() if flow.selected_route is not None else None,
    )


def _apply_booking_action(controller, action, form):
    """Run one booking wizard action. Returns a redirect target or None."""
    flow = controller.flow

    if action == 'search':
        flow.search(form.get('origin', ''), form.get('destination', ''))
    elif action == 'select-route':
        flow.select_route(form.get('route_id', ''))
    elif action == 'select-seat':
        try:
            seat_number = int(form.get('seat_number', ''))
        except ValueError:
            flash('Please select a seat', 'error')
            return None
        flow.select_seat(seat_number)
    elif action == 'continue':
        flow.continue_to_details()
    elif action == 'passenger':
        flow.submit_passenger(form.get('first_name'), form.get('last_name'), form.get('email'))
    elif action == 'pay':
        booking = controller.confirm_payment()
        flash(f'Booking confirmed! Your booking ID is {booking.id}', 'success')
        return url_for('main.ticket', q=booking.id)
    elif action == 'back':
        target = form.get('step')
        flow.back(FlowStep(target) if target else None)
    elif action == 'restart':
        controller.start_booking()
    else:
        flash(f'Unknown action: {action}', 'error')
    return None


@main_bp.route('/booking', methods=['POST'])
def booking_action():
    """Handle a booking wizard form post, then show the wizard again."""
    controller = get_controller()
    action = request.form.get('action', '')

    try:
        target = _apply_booking_action(controller, action, request.form)
    except OmnibusError as e:
        current_app.logger.info(f"Booking action '{action}' rejected: {e.message}")
        flash(e.message, 'error')
        target = None
    except ValueError:
        flash('Invalid booking step', 'error')
        target = None

    return redirect(target or url_for('main.booking'))


@main_bp.route('/ticket')
def ticket():
    """Boarding pass for a booking ID or email; the latest booking by default."""
    controller = get_controller()
    controller.navigate(ViewState.TICKET)

    query = request.args.get('q', '').strip()
    found = controller.lookup.ticket(query)
    if found is None and query:
        current_app.logger.info(f"Ticket lookup miss for '{query}'")

    return render_template('ticket.html', ticket=found, query=query)


@main_bp.route('/admin')
def admin():
    """Manifest, metrics and check-in for staff."""
    controller = get_controller()
    controller.navigate(ViewState.ADMIN)

    route_id = request.args.get('route')
    if route_id:
        try:
            controller.admin.select_route(route_id)
        except RouteNotFoundError as e:
            flash(e.message, 'error')

    return render_template(
        'admin.html',
        routes=catalog.ROUTES,
        manifest=controller.admin.manifest(),
        metrics=controller.admin.metrics(),
        occupancy=controller.admin.occupancy(),
    )


@main_bp.route('/admin/check-in', methods=['POST'])
def admin_check_in():
    """Check in by booking ID typed at the counter."""
    controller = get_controller()
    result = controller.admin.check_in(request.form.get('booking_id', ''))
    flash(result.message, 'success' if result.found else 'error')
    return redirect(url_for('main.admin'))


@main_bp.route('/admin/board/<booking_id>', methods=['POST'])
def admin_board(booking_id):
    """Mark a manifest row as boarded."""
    controller = get_controller()
    try:
        booking = controller.admin.board(booking_id)
        flash(f'{booking.passenger.full_name} boarded', 'success')
    except BookingNotFoundError as e:
        flash(e.message, 'error')
    return redirect(url_for('main.admin'))


@main_bp.route('/admin/reset', methods=['POST'])
def admin_reset():
    """Restore demo data once the confirmation box is ticked."""
    controller = get_controller()
    if controller.reset_data(request.form.get('confirm') == 'yes'):
        current_app.logger.warning("Booking data reset from the admin screen")
        flash('All bookings reset to demo data', 'success')
    else:
        flash('Reset not confirmed', 'error')
    return redirect(url_for('main.admin'))
