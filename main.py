# main.py
import sys

import uvicorn

from face_attendance import api
from face_attendance.config_loader import Settings, load_config
from face_attendance.database import connect
from face_attendance.logger_setup import setup_logging


def main():
    try:
        config = load_config('config.ini')
        logger = setup_logging(config)
    except Exception as e:
        print(f"FATAL: Failed to load config or setup logger: {e}")
        sys.exit(1)

    client, registry, attendance_log = connect(config)
    try:
        attendance_log.ensure_indexes()
        settings = Settings.from_config(config)
        api.init_api(registry, attendance_log, settings)
        logger.info(
            f"Matching threshold={settings.similarity_threshold} "
            f"ambiguity_margin={settings.ambiguity_margin} cooldown={settings.cooldown_seconds}s"
        )

        host = config.get('API', 'host', fallback='0.0.0.0')
        port = config.getint('API', 'port', fallback=8000)
        uvicorn.run(api.app, host=host, port=port, log_config=None)
    finally:
        client.close()
        logger.info("MongoDB connection closed.")


if __name__ == "__main__":
    main()
