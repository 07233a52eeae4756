# kubequest/core/config.py
from pydantic_settings import BaseSettings
from pydantic import Field, SecretStr, validator
from typing import Optional
import logging

logger = logging.getLogger(__name__)

class Settings(BaseSettings):
    APP_NAME: str = "KubeQuest Cluster Simulator"
    API_V1_STR: str = "/api/v1"
    LOG_LEVEL: str = "INFO"

    # Cluster Settings
    INITIAL_NODE_COUNT: int = Field(2, ge=0, description="Number of nodes created at bootstrap")
    MAX_PODS_PER_NODE: int = Field(4, ge=1, description="Fixed pod slot capacity of every node")
    RECOVERY_DELAY_MS: int = Field(2000, ge=0, description="Delay before a crashed node's pods are rescheduled")
    CLOCK_MODE: str = Field("realtime", description="'realtime' (asyncio timers) or 'virtual' (advanced on demand)")

    # Display labels
    BOOTSTRAP_NODE_PREFIX: str = "Ship-Alpha"
    ADDED_NODE_PREFIX: str = "Ship-Beta"

    # Groq API Key for the tutor
    GROQ_API_KEY: Optional[SecretStr] = Field(None, description="API Key for Groq service")
    TUTOR_MODEL: str = "llama-3.3-70b-versatile"
    TUTOR_TEMPERATURE: float = Field(0.7, ge=0.0, le=2.0)
    TUTOR_MAX_TOKENS: int = Field(300, ge=1)

    @validator('CLOCK_MODE')
    def validate_clock_mode(cls, v):
        if v not in ['realtime', 'virtual']:
            raise ValueError("CLOCK_MODE must be either 'realtime' or 'virtual'")
        return v

    class Config:
        env_file = '.env' # Load environment variables from .env file
        env_file_encoding = 'utf-8'
        extra = 'ignore' # Ignore extra fields from environment

settings = Settings()

if not settings.GROQ_API_KEY:
    logger.warning("GROQ_API_KEY environment variable not set. The AI tutor will be disabled.")
