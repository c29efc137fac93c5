from flask import Flask, jsonify

from tinydb import TinyDB
from tinydb.storages import MemoryStorage

from potau.config import load_config
from potau.log import init_logging

from ceremony_routes import ceremony_bp, init_ceremony_bp


def create_app(config=None, db=None):
    """Flask 앱을 만든다.

    Args:
        config: CeremonyConfig. 없으면 환경 변수에서 읽는다.
        db: TinyDB 인스턴스. 없으면 config.db_path 파일을 연다.
    """
    if config is None:
        config = load_config()
    init_logging(config.log_level, config.log_file)

    if db is None:
        if config.db_path == ":memory:":
            db = TinyDB(storage=MemoryStorage)  # Memory DB
        else:
            db = TinyDB(config.db_path)         # Storage DB

    app = Flask(__name__)
    init_ceremony_bp(db.table("ceremony"), config)
    app.register_blueprint(ceremony_bp)

    @app.route("/")
    def index():
        return jsonify({
            "service": "powers-of-tau",
            "endpoints": sorted(
                str(rule) for rule in app.url_map.iter_rules()
                if str(rule).startswith("/ceremony")
            ),
        })

    return app


if __name__ == "__main__":
    create_app().run(debug=True)
