from pydantic_settings import BaseSettings

from mortgage_analyzer.models.refinance import RecommendationPolicy


class Settings(BaseSettings):
    LOG_LEVEL: str = "INFO"
    REPORT_DIR: str = "./reports"
    RECOMMENDATION_POLICY: RecommendationPolicy = RecommendationPolicy()

    model_config = {
        "env_prefix": "MORTGAGE_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "env_nested_delimiter": "__",
        "extra": "ignore",
    }


settings = Settings()
