from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file='.env', env_file_encoding='utf-8', extra='ignore')

    provider: str = 'openai'
    openai_api_key: str = ''
    openai_base_url: str = 'https://api.openai.com/v1'
    vision_model: str = 'gpt-4o'
    upstream_timeout_ms: int = 60000
    max_image_bytes: int = 3 * 1024 * 1024
    max_items: int = 5
    parse_excerpt_chars: int = 400
    extra_banned_terms: str = ''
    log_level: str = 'INFO'
    version: str = '1.0.0'


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
