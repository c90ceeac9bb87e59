from pydantic_settings import BaseSettings

MIRT_ENV_PREFIX = "MIRT_"


class ApiSettings(BaseSettings):
    model_config = {"env_prefix": MIRT_ENV_PREFIX}

    max_respondents: int = 10000
    max_items: int = 500
    max_dimensions: int = 10
    n_quadrature_points: int = 41
    host: str = "127.0.0.1"
    port: int = 8000
    max_concurrent_jobs: int = 4
    job_ttl_seconds: int = 3600
