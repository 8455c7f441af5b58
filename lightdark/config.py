"""
Configuration management for the Light-Dark planning package.
"""

import os
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables from .env file if it exists
load_dotenv()


class Config:
    """Application configuration settings."""
    
    # Base paths
    PROJECT_ROOT: Path = Path(__file__).parent.parent
    SCENARIOS_DIR: Path = Path(os.getenv("SCENARIOS_DIR", str(PROJECT_ROOT / "scenarios")))
    RUNS_DIR: Path = Path(os.getenv("RUNS_DIR", str(PROJECT_ROOT / "runs")))
    
    # Logging settings
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    LOG_FORMAT: str = os.getenv(
        "LOG_FORMAT",
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )
    
    # Simulation settings
    DEFAULT_RANDOM_SEED: int = int(os.getenv("RANDOM_SEED", "42"))
    DEFAULT_MAX_STEPS: int = int(os.getenv("MAX_STEPS", "100"))
    
    @classmethod
    def ensure_directories(cls) -> None:
        """Ensure all output directories exist."""
        cls.RUNS_DIR.mkdir(parents=True, exist_ok=True)
