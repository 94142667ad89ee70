from flask import Flask

from .extensions import db, evaluation_queue


def create_app(config_object='config.Config'):
    """App factory shared by the web process, the RQ worker and the scripts."""
    app = Flask(__name__)
    app.config.from_object(config_object)
    app.logger.setLevel(app.config.get("LOG_LEVEL", "INFO"))

    db.init_app(app)
    evaluation_queue.init_app(app)

    # models must be imported before create_all() sees the tables
    from . import models  # noqa: F401
    from .api.evaluations import bp as evaluations_bp
    app.register_blueprint(evaluations_bp)

    return app
