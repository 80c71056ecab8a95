from flask import Flask, jsonify
from flask_bcrypt import Bcrypt
from flask_cors import CORS
from flask_jwt_extended import JWTManager

from billsplit.config import Config
from billsplit.core.errors import BillSplitError
from billsplit.extensions import init_store

bcrypt = Bcrypt()
jwt = JWTManager()


def create_app(config_class=Config):
    app = Flask(__name__)
    app.config.from_object(config_class)

    # Disable strict slashes to prevent 308 redirects that break CORS preflight
    app.url_map.strict_slashes = False

    # Allow the front-end to talk to Flask
    CORS(
        app,
        supports_credentials=True,
        resources={r"/api/*": {"origins": app.config["CORS_ORIGINS"]}}
    )
    # Init extensions
    bcrypt.init_app(app)
    jwt.init_app(app)
    init_store(app, bcrypt)

    @app.errorhandler(BillSplitError)
    def handle_billsplit_error(error):
        return jsonify(error.to_dict()), error.status_code

    # Register API blueprints
    from billsplit.auth.routes import auth_bp
    from billsplit.bills.routes import bills_bp
    from billsplit.expenses.routes import expenses_bp
    from billsplit.dashboards.routes import dashboard_bp

    app.register_blueprint(auth_bp, url_prefix='/api/v1/auth')
    app.register_blueprint(bills_bp, url_prefix='/api/v1/bills')
    app.register_blueprint(expenses_bp, url_prefix='/api/v1/bills/<bill_id>/expenses')
    app.register_blueprint(dashboard_bp, url_prefix='/api/v1/dashboard')

    return app
