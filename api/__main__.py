"""
Entrypoint for running the API in development.
  python -m api           # serve
  python -m api --seed    # create the demo Admin/Manager/Employee accounts, then serve
"""
import argparse
import os

from . import create_app
from models import storage
from models.seed import seed_default_users


def main():
    parser = argparse.ArgumentParser(prog="python -m api")
    parser.add_argument("--seed", action="store_true", help="create demo users before serving")
    parser.add_argument("--seed-only", action="store_true", help="create demo users and exit")
    args = parser.parse_args()

    # Respect APP_ENV for configuration selection (handled in get_config())
    app = create_app()

    if args.seed or args.seed_only:
        manager = app.extensions["auth_manager"]
        with app.app_context():
            seed_default_users(storage, manager.users, manager.hasher)
        if args.seed_only:
            return

    # Dev-friendly defaults; in production you'd run via a WSGI server (gunicorn/uwsgi)
    host = os.getenv("FLASK_RUN_HOST", "0.0.0.0")
    port = int(os.getenv("FLASK_RUN_PORT", "8000"))
    debug = os.getenv("FLASK_DEBUG", str(app.config.get("DEBUG", True))).lower() in ("1", "true", "yes")
    app.run(host=host, port=port, debug=debug)


if __name__ == "__main__":
    main()
