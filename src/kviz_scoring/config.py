"""
kviz-scoring configuration

API endpoint, leaderboard windows and logging settings live here.
Environment variables override defaults for deployment flexibility.
"""

import os
from dataclasses import dataclass, field


@dataclass
class ApiConfig:
    """Where the Kviz REST API lives"""
    base_url: str = os.getenv("KVIZ_API_URL", "http://localhost:5000/api/v1/")
    token: str = os.getenv("KVIZ_API_TOKEN", "")
    timeout_seconds: float = float(os.getenv("KVIZ_API_TIMEOUT", "30.0"))


@dataclass
class LeaderboardConfig:
    """Leaderboard windows and filters"""
    weekly_days: int = int(os.getenv("LEADERBOARD_WEEKLY_DAYS", "7"))
    monthly_days: int = int(os.getenv("LEADERBOARD_MONTHLY_DAYS", "30"))
    all_quizzes_sentinel: str = "all"


@dataclass
class LoggingConfig:
    """Log output"""
    level: str = os.getenv("KVIZ_LOG_LEVEL", "WARNING")


@dataclass
class Config:
    """Master config, import this"""
    api: ApiConfig = field(default_factory=ApiConfig)
    leaderboard: LeaderboardConfig = field(default_factory=LeaderboardConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


# Singleton
config = Config()
