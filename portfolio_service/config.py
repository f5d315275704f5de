from pathlib import Path
from dotenv import load_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field

# Load .env from repo root for local development and scripts.
ENV_PATH = Path(__file__).resolve().parents[1] / ".env"
load_dotenv(dotenv_path=ENV_PATH)

class Settings(BaseSettings):
    model_config = SettingsConfigDict(case_sensitive=True)
    workbook_path: str = Field(default="./data/Sample-Portfolio-Dataset-for-Assignment.xlsx", alias="WORKBOOK_PATH")
    host: str = Field(default="0.0.0.0", alias="HOST")
    port: int = Field(default=4000, alias="PORT")
    cors_origins: str = Field(default="*", alias="CORS_ORIGINS")
    export_filename: str = Field(default="holdings.xlsx", alias="EXPORT_FILENAME")
    alert_gain_threshold_pct: float = Field(default=20.0, alias="ALERT_GAIN_THRESHOLD_PCT")
    alert_loss_threshold_pct: float = Field(default=-10.0, alias="ALERT_LOSS_THRESHOLD_PCT")
    summary_value_tolerance_pct: float = Field(default=1.0, alias="SUMMARY_VALUE_TOLERANCE_PCT")

    def cors_origin_list(self) -> list[str]:
        return [part.strip() for part in self.cors_origins.split(",") if part.strip()]

settings = Settings()
