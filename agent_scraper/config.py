from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    firecrawl_api_key: str
    firecrawl_base_url: str = "https://api.firecrawl.dev/v1"
    fetch_max_attempts: int = 3
    fetch_base_delay: float = 2.0
    fetch_request_timeout: float = 90.0
    scrape_wait_ms: int = 5000
    scrape_timeout_ms: int = 60000
    supabase_url: str = ""
    supabase_service_key: str = ""
    log_level: str = "INFO"
