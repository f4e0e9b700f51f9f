"""Server-wide constants shared by the application factory and routers."""

PROJECT_NAME = "BookClubApp"
API_V1_STR = "/api/v1"
API_VERSION = "1.0.0"
SCHEMA_VERSION = "v1"
