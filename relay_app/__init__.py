# relay_app/__init__.py
import os
import logging
from logging.config import dictConfig
from flask import Flask
import redis
from .config import Config
from .utils.logging_utils import JsonFormatter

# --- Logging Configuration ---
log_level_env = os.environ.get('LOG_LEVEL', 'INFO').upper()
log_dir_path = Config.LOG_DIR
os.makedirs(log_dir_path, exist_ok=True)

logging_config = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'standard': {
            'format': '%(asctime)s [%(levelname)s] %(name)s: %(message)s',
            'datefmt': '%Y-%m-%d %H:%M:%S'
        },
        'json': {
            '()': JsonFormatter,
            'datefmt': '%Y-%m-%d %H:%M:%S'
        },
    },
    'handlers': {
        'console': {
            'level': log_level_env,
            'class': 'logging.StreamHandler',
            'formatter': 'standard',
            'stream': 'ext://sys.stdout',
        },
        'app_file': {
            'level': log_level_env,
            'class': 'logging.handlers.RotatingFileHandler',
            'formatter': 'standard',
            'filename': Config.LOG_FILE,
            'maxBytes': 10485760,
            'backupCount': 5,
            'encoding': 'utf8',
        },
        'json_file': {
            'level': log_level_env,
            'class': 'logging.handlers.RotatingFileHandler',
            'formatter': 'json',
            'filename': Config.LOG_JSON_FILE,
            'maxBytes': 10485760,
            'backupCount': 5,
            'encoding': 'utf8',
        }
    },
    'loggers': {
        '': {
            'handlers': ['console', 'app_file', 'json_file'],
            'level': log_level_env,
            'propagate': True
        },
        'werkzeug': {'handlers': ['console', 'app_file', 'json_file'], 'level': 'INFO', 'propagate': False,},
        'urllib3': {'handlers': ['console', 'app_file', 'json_file'], 'level': 'WARNING', 'propagate': False,},
        'relay_app': {'handlers': ['console', 'app_file', 'json_file'], 'level': log_level_env, 'propagate': False}
    }
}
dictConfig(logging_config)
logger = logging.getLogger(__name__)


def create_app(config_class=Config):
    logger.info("--- Creating Flask Application Instance ---")
    app = Flask(__name__)
    app.config.from_object(config_class)

    # Shared Redis client for the session -> thread cache.
    try:
        app.redis_client = redis.Redis.from_url(app.config["REDIS_URL"], decode_responses=True)
        logger.info(f"Redis client initialized using URL: {app.config['REDIS_URL']}")
    except Exception as e:
        logger.exception(f"Failed to initialize Redis client: {e}")
        app.redis_client = None

    logger.info(f"Flask Environment: {app.config.get('FLASK_ENV', 'not_set')}")
    logger.info(f"Debug Mode: {app.config.get('DEBUG', False)}")
    if not app.config.get('OPENAI_API_KEY'):
        logger.warning("OPENAI_API_KEY is not set. Every /api/chat request will fail until it is configured.")
    logger.info(f"Assistant ID: {app.config.get('OPENAI_ASSISTANT_ID')}")

    from .api import api_bp as api_module_blueprint
    app.register_blueprint(api_module_blueprint)
    logger.info(f"API Blueprint '{api_module_blueprint.name}' registered under url_prefix: {api_module_blueprint.url_prefix}")

    logger.info("--- Relay Application Initialization Complete ---")
    return app
