"""WSGI entry point: `flask --app menucom_api.wsgi run`."""

from menucom_api.app import create_app

app = create_app()
