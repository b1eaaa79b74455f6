from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./pareido.db"
    APP_NAME: str = "Pareido Symbiote API"

    # Gemini: analysis uses a flash model, merge and card art use image-capable models
    GEMINI_API_KEY: str = ""
    GEMINI_MODEL: str = "gemini-2.5-flash"
    GEMINI_MERGE_MODEL: str = "gemini-3-pro-image-preview"
    GEMINI_IMAGE_MODEL: str = "gemini-2.5-flash-image"
    GEMINI_THINKING_LEVEL: str = "low"
    GEMINI_TIMEOUT_SECONDS: int = 60
    GEMINI_IMAGE_TIMEOUT_SECONDS: int = 120

    # S3-compatible object storage (Cloudflare R2). Empty = save to local uploads/
    S3_ENDPOINT_URL: str = ""
    S3_ACCESS_KEY: str = ""
    S3_SECRET_ACCESS_KEY: str = ""
    S3_BUCKET_NAME: str = ""
    S3_PUBLIC_URL: str = ""

    # Material normalization range (inclusive)
    MATERIAL_MIN_TOTAL: int = 10
    MATERIAL_MAX_TOTAL: int = 20

    # Leveling curve
    LEVEL_BASE_XP: int = 100
    LEVEL_GROWTH_FACTOR: float = 1.5

    MAX_UPLOAD_BYTES: int = 10 * 1024 * 1024

    class Config:
        env_file = ".env"


settings = Settings()
