from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_prefix="CODEGEN_", extra="ignore")

    app_name: str = "watcher-codegen"
    log_level: str = "INFO"

    # Package the generated entities import column transformers from
    util_package: str = "@cerc-io/util"
    entity_file_extension: str = ".ts"
    entity_dir_name: str = "entity"

settings = Settings()
