"""
Routes package - Flask Blueprints for modular route organization.

- auth: session login/logout
- reports: day-close submission, daily reports and sales totals
- payment_plans: overdue/outstanding plan lookups
- patients: patient creation with allocated identifiers
- stock: low-stock lists

Usage:
    from routes import register_blueprints
    register_blueprints(app)
"""

from flask import Flask


def register_blueprints(app: Flask) -> None:
    """Register all blueprints with the Flask application."""
    from routes.auth import auth_bp
    from routes.reports import reports_bp
    from routes.payment_plans import payment_plans_bp
    from routes.patients import patients_bp
    from routes.stock import stock_bp

    app.register_blueprint(auth_bp)
    app.register_blueprint(reports_bp, url_prefix='/api')
    app.register_blueprint(payment_plans_bp, url_prefix='/api')
    app.register_blueprint(patients_bp, url_prefix='/api')
    app.register_blueprint(stock_bp, url_prefix='/api')
