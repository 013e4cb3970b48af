import logging
import os

from flask import Flask, jsonify

from parkwise.commands import register_commands
from parkwise.config import Config
from parkwise.errors import register_error_handlers
from parkwise.extensions import bcrypt, cors, db, jwt, mail, migrate
from parkwise.seed import seed_demo_data
from parkwise.services import init_services

# Import Blueprints
from parkwise.blueprints.auth import auth_bp
from parkwise.blueprints.lots import lots_bp
from parkwise.blueprints.notifications import notifications_bp
from parkwise.blueprints.reservations import reservations_bp
from parkwise.blueprints.user import user_bp


def configure_logging(app):
    level = app.config.get('LOG_LEVEL', 'INFO')
    logging.basicConfig(level=level, format='%(asctime)s %(levelname)s %(name)s: %(message)s')
    logging.getLogger('parkwise').setLevel(level)
    app.logger.setLevel(level)


def create_app(config_class=Config, storage=None):
    app = Flask(__name__, instance_relative_config=True)
    app.config.from_object(config_class)
    configure_logging(app)

    uri = app.config['SQLALCHEMY_DATABASE_URI']
    if uri.startswith('sqlite:///'):
        os.makedirs(os.path.dirname(uri[len('sqlite:///'):]) or app.instance_path, exist_ok=True)

    # 1. INITIALIZE EXTENSIONS
    db.init_app(app)
    jwt.init_app(app)
    bcrypt.init_app(app)
    cors.init_app(app, supports_credentials=True)
    mail.init_app(app)
    migrate.init_app(app, db)

    # 2. STORE + SERVICES (one instance per app, handed to every request)
    services = init_services(app, storage)

    # 3. REGISTER BLUEPRINTS
    app.register_blueprint(auth_bp, url_prefix='/api/auth')
    app.register_blueprint(user_bp, url_prefix='/api')
    app.register_blueprint(lots_bp, url_prefix='/api/parking-lots')
    app.register_blueprint(reservations_bp, url_prefix='/api/reservations')
    app.register_blueprint(notifications_bp, url_prefix='/api/notifications')

    register_error_handlers(app)
    register_commands(app)

    @app.route('/api/health')
    def health():
        return jsonify({'status': 'ok', 'store': app.config['STORE_BACKEND']})

    if app.config['SEED_DEMO_DATA']:
        with app.app_context():
            if app.config['STORE_BACKEND'] == 'sql':
                db.create_all()
            seed_demo_data(services)

    return app


if __name__ == '__main__':
    app = create_app()
    with app.app_context():
        db.create_all()
    app.run(debug=True, port=5000)
