# app/config/settings.py
# Application configuration loaded from environment variables

import os
from typing import Any, Dict, List

from dotenv import load_dotenv

load_dotenv()


class AppConfig:
    """Configuration for the Task Manager API"""

    # Server settings
    SERVER = {
        'env': os.getenv('APP_ENV', 'development').lower(),
        'host': os.getenv('HOST', '0.0.0.0'),
        'port': int(os.getenv('PORT', 8000)),
        'reload': os.getenv('RELOAD', 'true').lower() == 'true',
        'api_prefix': os.getenv('API_PREFIX', '').rstrip('/'),
        'auto_create_tables': os.getenv('AUTO_CREATE_TABLES', 'false').lower() == 'true',
    }

    # Database settings
    DATABASE = {
        'url': os.getenv('DATABASE_URL', 'sqlite:///./taskmanager.db'),
        'sslmode': os.getenv('DATABASE_SSLMODE', 'require'),
        'echo': os.getenv('DATABASE_ECHO', 'false').lower() == 'true',
    }

    # Authentication settings
    AUTH = {
        'secret_key': os.getenv('SECRET_KEY', 'dev-secret-change-me'),
        'algorithm': os.getenv('ALGORITHM', 'HS256'),
        'access_token_expire_minutes': int(os.getenv('ACCESS_TOKEN_EXPIRE_MINUTES', 24 * 60)),
        'bcrypt_rounds': int(os.getenv('BCRYPT_ROUNDS', 12)),
    }

    # Logging
    LOGGING = {
        'level': os.getenv('LOG_LEVEL', 'INFO').upper(),
        'format': os.getenv('LOG_FORMAT', '%(asctime)s %(levelname)s [%(name)s] %(message)s'),
    }

    # API documentation
    DOCS = {
        'title': os.getenv('DOCS_TITLE', 'Task Manager API'),
        'description': os.getenv('DOCS_DESCRIPTION', 'Projects, tasks and membership-based access control'),
        'version': os.getenv('DOCS_VERSION', '1.0'),
        'path': os.getenv('DOCS_PATH', 'docs'),
    }

    # CORS
    CORS = {
        'origins': [
            "http://localhost:3000",
            "http://localhost:3001",
            "http://127.0.0.1:3000",
        ],
        'extra_origins': os.getenv('CORS_ORIGINS', ''),
    }

    @classmethod
    def get_cors_origins(cls) -> List[str]:
        """Default development origins plus any comma separated CORS_ORIGINS"""
        origins = list(cls.CORS['origins'])
        for origin in cls.CORS['extra_origins'].split(','):
            origin = origin.strip()
            if origin and origin not in origins:
                origins.append(origin)
        return origins

    @classmethod
    def is_postgres(cls) -> bool:
        return cls.DATABASE['url'].startswith(('postgres://', 'postgresql://', 'postgresql+'))

    @classmethod
    def is_sqlite(cls) -> bool:
        return cls.DATABASE['url'].startswith('sqlite')

    @classmethod
    def engine_options(cls) -> Dict[str, Any]:
        """Keyword arguments for sqlalchemy.create_engine"""
        options: Dict[str, Any] = {'echo': cls.DATABASE['echo']}
        if cls.is_postgres():
            options['connect_args'] = {'sslmode': cls.DATABASE['sslmode']}
            options['pool_pre_ping'] = True
        elif cls.is_sqlite():
            options['connect_args'] = {'check_same_thread': False}
        return options

    @classmethod
    def is_production(cls) -> bool:
        return cls.SERVER['env'] == 'production'

    @classmethod
    def validate(cls) -> None:
        """Refuse to run in production with development defaults"""
        if cls.is_production() and not os.getenv('SECRET_KEY'):
            raise RuntimeError("SECRET_KEY must be set when APP_ENV=production")
        if cls.AUTH['access_token_expire_minutes'] <= 0:
            raise RuntimeError("ACCESS_TOKEN_EXPIRE_MINUTES must be positive")
