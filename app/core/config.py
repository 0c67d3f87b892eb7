from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List, Literal, Optional


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")
    APP_NAME: str = "Push Dispatch API"
    APP_ENV: str = "dev"
    HOST: str = "0.0.0.0"
    PORT: int = 3000
    CORS_ORIGINS: str = "*"
    LOG_LEVEL: str = "INFO"
    # Push provider
    PUSH_PROVIDER: Literal["fcm", "log"] = "fcm"
    FIREBASE_SERVICE_ACCOUNT: Optional[str] = None
    FIREBASE_CREDENTIALS_PATH: str = "serviceAccountKey.json"
    FCM_DRY_RUN: bool = False
    FCM_HTTP_TIMEOUT_S: float = 10.0
    # Dispatch limits and retry policy
    MAX_PAYLOAD_BYTES: int = 4096
    RETRY_MAX_ATTEMPTS: int = 3
    RETRY_BASE_DELAY_S: float = 0.5
    RETRY_BACKOFF_MULTIPLIER: float = 2.0
    RETRY_MAX_DELAY_S: Optional[float] = None
    DISPATCH_TIMEOUT_S: Optional[float] = 30.0

    @property
    def cors_origin_list(self) -> List[str]:
        val = self.CORS_ORIGINS
        if not val: return []
        if val == "*": return ["*"]
        return [v.strip() for v in val.split(",")]

settings = Settings()
