from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Extra draws allowed for a single exploding die (x mode).
    explode_cap: int = 1000
    # Extra rounds allowed when the whole roll explodes on its total (e mode).
    explode_all_cap: int = 1000


settings = Settings()
