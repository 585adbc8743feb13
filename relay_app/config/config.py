# relay_app/config/config.py
# -*- coding: utf-8 -*-
import os
from dotenv import load_dotenv

# Project root (two levels up from relay_app/config/).
project_root_dir = os.path.abspath(os.path.join(os.path.dirname(__file__), '..', '..'))

# When running tests, let .env.test override anything from the main .env.
if os.environ.get('FLASK_ENV') == 'testing':
    test_dotenv_path = os.path.join(project_root_dir, '.env.test')
    if os.path.exists(test_dotenv_path):
        load_dotenv(dotenv_path=test_dotenv_path, override=True)

basedir = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
dotenv_path = os.path.join(project_root_dir, '.env')

if os.path.exists(dotenv_path):
    # Real environment variables win over the file.
    load_dotenv(dotenv_path=dotenv_path, override=False)


class Config:
    # --- Flask App ---
    SECRET_KEY = os.environ.get('SECRET_KEY', 'default-insecure-secret-key')
    FLASK_ENV = os.environ.get('FLASK_ENV', 'production')
    DEBUG = FLASK_ENV == 'development'

    # --- Logging ---
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO').upper()
    LOG_DIR = os.environ.get('LOG_DIR', os.path.join(project_root_dir, 'logs'))
    LOG_FILE = os.path.join(LOG_DIR, 'app.log')
    LOG_JSON_FILE = os.path.join(LOG_DIR, 'app.json')

    # --- Assistant provider ---
    OPENAI_API_KEY = os.environ.get('OPENAI_API_KEY')
    OPENAI_ASSISTANT_ID = os.environ.get('OPENAI_ASSISTANT_ID', 'asst_8Iw8xHDNqFYSLva0KmRChr4C')
    OPENAI_API_BASE = os.environ.get('OPENAI_API_BASE', 'https://api.openai.com/v1').rstrip('/')
    OPENAI_BETA_HEADER = os.environ.get('OPENAI_BETA_HEADER', 'assistants=v1')
    OPENAI_REQUEST_TIMEOUT = float(os.environ.get('OPENAI_REQUEST_TIMEOUT', 60))
    # Only used by create_assistant.py
    OPENAI_ASSISTANT_MODEL = os.environ.get('OPENAI_ASSISTANT_MODEL', 'gpt-4o-mini')

    # --- Redis (session -> thread cache) ---
    REDIS_URL = os.environ.get('REDIS_URL', 'redis://localhost:6379/0')
    THREAD_TTL_SECONDS = int(os.environ.get('THREAD_TTL_SECONDS', 60 * 60 * 24))
    THREAD_CACHE_PREFIX = os.environ.get('THREAD_CACHE_PREFIX', '')
