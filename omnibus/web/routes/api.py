"""JSON API routes for the OmniBus booking demo."""

from flask import Blueprint, jsonify, request, current_app

from ... import catalog
from ...errors import RouteNotFoundError
from ...services.insight_provider import is_fallback_text
from .. import flask_cache, get_controller

# Create blueprint
api_bp = Blueprint('api', __name__)


def _dump(model):
    return model.model_dump(mode='json', by_alias=True)


def _error(message, status):
    return jsonify({'success': False, 'data': None, 'error': message}), status


def _ok(data):
    return jsonify({'success': True, 'data': data, 'error': None})


@api_bp.route('/routes')
def api_routes():
    """Route catalog, filtered by exact origin and destination when both are given."""
    origin = request.args.get('origin')
    destination = request.args.get('destination')

    if origin and destination:
        for city in (origin, destination):
            if not catalog.is_known_city(city):
                return _error(f'Unknown city: {city}', 400)
        routes = catalog.search_routes(origin, destination)
    else:
        routes = list(catalog.ROUTES)

    return _ok({
        'routes': [_dump(route) for route in routes],
        'cities': list(catalog.CITIES),
    })


@api_bp.route('/bookings')
def api_bookings():
    """All bookings in store order, in the persisted record format."""
    bookings = get_controller().store.bookings
    return _ok({'bookings': [_dump(b) for b in bookings], 'total': len(bookings)})


@api_bp.route('/tickets')
def api_ticket():
    """Ticket by booking ID or email; latest booking when no query is given."""
    query = request.args.get('q', '')
    ticket = get_controller().lookup.ticket(query)
    if ticket is None:
        return _error('Booking not found', 404)
    return _ok({'ticket': _dump(ticket), 'boarded': ticket.boarded})


@api_bp.route('/admin/manifest')
def api_manifest():
    """Passenger manifest for a route (the selected route by default)."""
    controller = get_controller()
    try:
        manifest = controller.admin.manifest(request.args.get('route'))
    except RouteNotFoundError as e:
        return _error(e.message, 404)
    return _ok({'manifest': _dump(manifest)})


@api_bp.route('/admin/metrics')
def api_metrics():
    """Dashboard counters and per-route occupancy."""
    admin = get_controller().admin
    return _ok({
        'metrics': _dump(admin.metrics()),
        'occupancy': [_dump(row) for row in admin.occupancy()],
    })


@api_bp.route('/admin/check-in', methods=['POST'])
def api_check_in():
    """Check in a passenger by exact booking ID."""
    payload = request.get_json(silent=True) or {}
    booking_id = payload.get('bookingId') or payload.get('booking_id')
    if not booking_id:
        return _error('bookingId is required', 400)

    result = get_controller().admin.check_in(booking_id)
    if not result.found:
        return _error(result.message, 404)

    current_app.logger.info(f"Checked in booking {booking_id} via API")
    return _ok({'booking': _dump(result.booking), 'message': result.message})


@api_bp.route('/admin/reset', methods=['POST'])
def api_reset():
    """Restore the demo bookings. Requires {"confirm": true}."""
    payload = request.get_json(silent=True) or {}
    controller = get_controller()
    if not controller.reset_data(payload.get('confirm') is True):
        return _error('Reset must be confirmed', 400)

    current_app.logger.warning("Booking data reset via API")
    return _ok({'bookings': [_dump(b) for b in controller.store.bookings]})


@flask_cache.memoize(response_filter=lambda text: not is_fallback_text(text))
def cached_insight(city):
    """Provider blurb for a city, memoized per city. Fallback texts are not cached."""
    return get_controller().get_insight(city)


@api_bp.route('/insights/<city>')
def api_insight(city):
    """Marketing blurb for a destination city."""
    if not catalog.is_known_city(city):
        return _error(f'Unknown city: {city}', 404)
    return _ok({'city': city, 'text': cached_insight(city)})
