"""FastAPI dependencies resolving per-application resources."""

from fastapi import Request

from registros.services.record_store import RecordStore


def get_record_store(request: Request) -> RecordStore:
    """
    The RecordStore opened by the lifespan of the app serving this request.

    Handlers receive the store through Depends() instead of importing a
    module-level instance, so each app built by create_app() owns its own.
    """
    return request.app.state.record_store
