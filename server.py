"""ASGI entry point for the markup preview service.

    uvicorn server:app --host 127.0.0.1 --port 8090

Running this module directly serves the app on the configured host and port.
"""

from api.app import app, create_app

__all__ = ["app", "create_app"]

if __name__ == "__main__":
    import uvicorn
    from config.settings import get_settings

    settings = get_settings()
    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        log_level="info",
        timeout_graceful_shutdown=5,
    )
