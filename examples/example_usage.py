"""Example: drive the working-session service directly (no Flask).

Controllers are a thin layer; the state machine lives in the service.
"""

import importlib

from config import get_settings_module

from src.timeclock.timeclock.container import build_container


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG, lock_wait_timeout=settings.LOCK_WAIT_TIMEOUT)
    service = container.working_session_service

    ws = service.start(user_id=1, location_id=1)
    service.pause(ws.session_id)
    service.resume(ws.session_id)
    print(service.stop(ws.session_id))
    for tt in service.get_time_trackings(1, limit=5):
        print(tt.starts_at, tt.ends_at, tt.worked_minutes)


if __name__ == "__main__":
    main()
