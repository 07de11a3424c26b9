"""
Configuration settings for the bencode decoder.
Loads configuration from .env file with fallback to defaults.
"""
import os
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# ===== Decoding Defaults =====
BENCODE_CHARSET = os.getenv('BENCODE_CHARSET', 'utf-8')
BENCODE_DECODE_AS_STRING = os.getenv('BENCODE_DECODE_AS_STRING', 'False').lower() in ('true', '1', 't')
# Codec error handler used when byte-strings are turned into text
BENCODE_TEXT_ERRORS = os.getenv('BENCODE_TEXT_ERRORS', 'replace')
# Deepest list/dictionary nesting a decoder accepts
BENCODE_MAX_DEPTH = int(os.getenv('BENCODE_MAX_DEPTH', '200'))

# ===== Application Settings =====
DEBUG = os.getenv('DEBUG', 'False').lower() in ('true', '1', 't')
LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO' if not DEBUG else 'DEBUG')
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
