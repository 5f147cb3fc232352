#!/usr/bin/env python3
"""
Run the Task Manager API with uvicorn using the values from AppConfig.

Usage: python start_server.py [--no-reload]
"""

import sys

import uvicorn

from app.config.settings import AppConfig


def main(argv=None):
    argv = sys.argv[1:] if argv is None else argv
    server = AppConfig.SERVER
    reload = server['reload'] and not AppConfig.is_production() and "--no-reload" not in argv
    base_url = f"http://{server['host']}:{server['port']}{server['api_prefix']}"

    print(f"Task Manager API ({server['env']})")
    print(f"Database: {'PostgreSQL' if AppConfig.is_postgres() else AppConfig.DATABASE['url']}")
    print(f"Docs:     {base_url}/{AppConfig.DOCS['path']}")
    print(f"Health:   {base_url}/health")
    print("=" * 50)

    uvicorn.run(
        "main:app",
        host=server['host'],
        port=server['port'],
        reload=reload,
        log_level=AppConfig.LOGGING['level'].lower(),
    )


if __name__ == "__main__":
    main()
