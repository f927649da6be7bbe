"""Application configuration from environment variables."""

from __future__ import annotations

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    stylecanvas_env: str = "development"
    stylecanvas_log_level: str = "debug"

    # CORS
    cors_origins: list[str] = ["http://localhost:3000"]

    # Simulated model acquisition: base + U(0, 1) * jitter seconds
    model_load_base_seconds: float = 1.5
    model_load_jitter_seconds: float = 1.0

    # Upload limits
    max_upload_bytes: int = 10 * 1024 * 1024
    max_dimension: int = 1024
    # Checked from the image header before decoding
    max_image_pixels: int = 50_000_000
    accepted_content_types: list[str] = ["image/jpeg", "image/png", "image/webp"]

    # In-memory sessions: oldest evicted past the cap, idle ones expire
    max_sessions: int = 100
    session_ttl_seconds: float = 3600.0

    # Seed for the noise stages; unset means a fresh seed per process
    noise_seed: int | None = None

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "protected_namespaces": ()}


settings = Settings()
