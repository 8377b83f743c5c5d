"""Reports blueprint (read-only)."""
from flask import Blueprint, request, jsonify, current_app, Response

from smartsales.exceptions import ClientPreconditionError
from smartsales.repositories import get_stores
from smartsales.services import report_service

reports_bp = Blueprint('reports', __name__, url_prefix='/reports')


def _int_arg(name: str, default: int) -> int:
    raw = request.args.get(name)
    if raw is None or raw == '':
        return default
    try:
        return int(raw)
    except ValueError:
        raise ClientPreconditionError(f'{name} must be a whole number')


@reports_bp.route('/inventory', methods=['GET'])
def inventory() -> Response:
    report = report_service.inventory_report(get_stores().catalog)
    return jsonify({
        'products': [p.to_dict() for p in report['products']],
        'total_skus': report['total_skus'],
        'total_units': report['total_units'],
    })


@reports_bp.route('/low-stock', methods=['GET'])
def low_stock() -> Response:
    threshold = _int_arg('threshold', current_app.config.get('LOW_STOCK_THRESHOLD', 10))
    report = report_service.low_stock_report(get_stores().catalog, threshold)
    return jsonify({
        'threshold': report['threshold'],
        'products': [p.to_dict() for p in report['products']],
    })


@reports_bp.route('/recent-sales', methods=['GET'])
def recent_sales() -> Response:
    limit = _int_arg('limit', current_app.config.get('RECENT_SALES_LIMIT', 10))
    report = report_service.recent_sales_report(get_stores().sales, limit)
    return jsonify({
        'sales': [s.to_dict() for s in report['summaries']],
        'count': report['count'],
        'grand_total': str(report['grand_total']),
    })
