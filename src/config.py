"""
Configuration for Champion Matchup Analysis
"""
import os
from dataclasses import dataclass
from datetime import timedelta
from typing import Dict, List

from dotenv import load_dotenv

# Load .env file from project root
load_dotenv(os.path.join(os.path.dirname(__file__), '..', '.env'))

# API Configuration
RIOT_API_KEY = os.getenv('RIOT_API_KEY', '')
RIOT_ID = os.getenv('RIOT_ID', '')  # GameName#TAG
RIOT_REGION = os.getenv('RIOT_REGION', 'EUW')

# Region Configuration
REGIONS = {
    'NA': {
        'platform': 'na1',
        'routing': 'americas'       # account-v1, match-v5
    },
    'EUW': {
        'platform': 'euw1',
        'routing': 'europe'
    },
    'EUNE': {
        'platform': 'eun1',
        'routing': 'europe'
    },
    'KR': {
        'platform': 'kr',
        'routing': 'asia'
    }
}

# Rate Limits - Production Key
PRODUCTION_RATE_LIMITS = {
    'match-v5': {
        'per_second': 20,
        'per_2min': 100
    },
    'account-v1': {
        'per_second': 20,
        'per_2min': 100
    }
}

# Rate Limits - Development Key
DEV_RATE_LIMITS = {
    'match-v5': {
        'per_second': 20,
        'per_2min': 100
    },
    'account-v1': {
        'per_second': 20,
        'per_2min': 100
    }
}

# Queue Configuration
RANKED_SOLO_QUEUE_ID = 420
MATCH_PAGE_SIZE = 100

# Local match cache
MATCH_DATA_DIR = os.getenv('MATCH_DATA_DIR', os.path.join('data', 'matches'))
PLAYER_FILE_NAME = 'player.json'

# Analysis Configuration
DEFAULT_RECENCY_DAYS = 300
SIGNIFICANCE_THRESHOLD = 5   # Minimum matchup samples for ranked summary inclusion
SUMMARY_LIMIT = 6            # Entries per best/worst list
SATURATION_CAP = 50          # Matchup samples after which further observations are dropped

# Output Configuration
OUTPUT_DIR = 'output'
RESULTS_FILE_NAME = 'results.json'

# Logging Configuration
LOG_FORMAT = '[%(asctime)s] %(levelname)s %(name)s: %(message)s'
LOG_DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

# Chart Configuration
CHART_DPI = 150
CHART_FIGSIZE_MEDIUM = (10, 8)


@dataclass(frozen=True)
class AnalysisConfig:
    target_player_id: str
    recency_limit: timedelta = timedelta(days=DEFAULT_RECENCY_DAYS)
    saturation_cap: int = SATURATION_CAP
    significance_threshold: int = SIGNIFICANCE_THRESHOLD
    summary_limit: int = SUMMARY_LIMIT

    def validate(self) -> List[str]:
        """
        Validate analysis settings

        Returns:
            List of validation errors (empty if valid)
        """
        errors = []
        if not self.target_player_id:
            errors.append("target player id is empty")
        if self.recency_limit < timedelta(0):
            errors.append("recency limit must not be negative")
        for name in ('saturation_cap', 'significance_threshold', 'summary_limit'):
            if getattr(self, name) < 1:
                errors.append(f"{name} must be >= 1")
        return errors


def get_rate_limits(use_dev_key: bool = False) -> Dict:
    """
    Get rate limits based on key type

    Args:
        use_dev_key: Whether to use dev key rate limits

    Returns:
        Dictionary of rate limits by endpoint group
    """
    return DEV_RATE_LIMITS if use_dev_key else PRODUCTION_RATE_LIMITS


def validate_config() -> List[str]:
    """
    Validate API configuration settings

    Returns:
        List of validation errors (empty if valid)
    """
    errors = []

    if not RIOT_API_KEY:
        errors.append("RIOT_API_KEY environment variable not set")

    if RIOT_REGION not in REGIONS:
        errors.append(f"RIOT_REGION '{RIOT_REGION}' is not one of {sorted(REGIONS)}")

    return errors
