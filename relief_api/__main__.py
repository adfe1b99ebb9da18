"""
Run the development server: ``python -m relief_api``.
"""

from .app import create_app


def main():
    app = create_app()
    app.run(host="0.0.0.0", port=app.settings.port, debug=app.settings.is_development)


if __name__ == "__main__":
    main()
