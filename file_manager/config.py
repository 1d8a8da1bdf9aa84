"""Configuration settings for the File Manager server."""
import os

# Upload limits
MAX_FILE_SIZE = int(os.getenv("MAX_FILE_SIZE", 10 * 1024 * 1024))  # 10MB
CHUNK_SIZE = int(os.getenv("CHUNK_SIZE", 8192))

# Name constraints
MAX_ID_LENGTH = 200
MAX_NAME_LENGTH = 150

# Directory paths
UPLOAD_DIR = os.getenv("UPLOAD_DIR", "./uploads")
TEMP_DIR = os.getenv("TEMP_DIR", "./temp")
PUBLIC_DIR = os.getenv("PUBLIC_DIR", "./public")
LOG_DIR = os.getenv("LOG_DIR", "./logs")

# Server
HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", 3000))
CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*")
APP_ENV = os.getenv("APP_ENV", "development")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
