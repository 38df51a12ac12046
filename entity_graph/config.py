from pathlib import Path
from typing import List, Optional
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_prefix="ENTITY_GRAPH_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Graph Build Configuration
    separate_array_nodes: bool = Field(default=False)
    linked_field_names: str = Field(default="")
    identity_scheme: str = Field(default="positional")

    # Document Root Configuration
    root_entity_name: str = Field(default="ROOT")
    root_entity_id: str = Field(default="root")
    root_collection_key: str = Field(default="items")

    # Session Storage Configuration
    graph_storage_path: Optional[str] = Field(default=None)

    # API Configuration
    api_host: str = Field(default="localhost")
    api_port: int = Field(default=8000)

    # Logging Configuration
    log_level: str = Field(default="INFO")
    log_file: Optional[str] = Field(default="logs/app.log")

    @property
    def linked_field_names_list(self) -> List[str]:
        """Get linked field names as a list."""
        return [name.strip() for name in self.linked_field_names.split(",") if name.strip()]

    @property
    def log_dir(self) -> Optional[Path]:
        """Get log directory path."""
        if not self.log_file:
            return None
        return Path(self.log_file).parent

    def ensure_directories(self):
        """Ensure necessary directories exist."""
        if self.log_dir is not None:
            self.log_dir.mkdir(parents=True, exist_ok=True)
        if self.graph_storage_path:
            Path(self.graph_storage_path).parent.mkdir(parents=True, exist_ok=True)


settings = Settings()
settings.ensure_directories()
