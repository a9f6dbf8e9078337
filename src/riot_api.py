"""
Riot API client with rate limiting

Covers the two endpoint groups the match collector needs: account-v1 to
resolve a Riot ID to a PUUID, and match-v5 for match id pages and match
details.
"""
import time
import logging
import threading
from collections import deque
from typing import Dict, List, Optional, Any
from urllib.parse import quote

import requests

import config

logger = logging.getLogger(__name__)

TRANSIENT_STATUS_CODES = (500, 502, 503, 504)


class TransientAPIError(Exception):
    """Server-side errors persisted through every retry"""


class RateLimiter:
    """
    Thread-safe rate limiter with per-second and per-2-minute limits
    Tracks limits per (endpoint_group, region) pair
    """

    RATE_LIMIT_BUFFER = 0.1  # 100ms safety margin

    def __init__(self, endpoint_group: str, region: str, limits: Dict[str, int]):
        self.endpoint_group = endpoint_group
        self.region = region
        self.per_second_limit = limits['per_second']
        self.per_2min_limit = int(limits['per_2min'] * 0.95)  # 5% margin for timing drift

        # Sliding window tracking
        self.per_second_requests = deque()
        self.per_2min_requests = deque()

        self.lock = threading.Lock()

        logger.debug(
            f"RateLimiter initialized for {endpoint_group}/{region}: "
            f"{self.per_second_limit}/s, {self.per_2min_limit}/2min"
        )

    def _clean_old_requests(self, now: float):
        """Remove timestamps outside the tracking windows"""
        while self.per_second_requests and self.per_second_requests[0] < now - 1:
            self.per_second_requests.popleft()
        while self.per_2min_requests and self.per_2min_requests[0] < now - 120:
            self.per_2min_requests.popleft()

    def reset(self):
        """Backfill to capacity after a 429 to prevent burst"""
        with self.lock:
            now = time.time()
            self.per_second_requests.clear()
            self.per_2min_requests.clear()
            self.per_second_requests.extend([now] * self.per_second_limit)
            self.per_2min_requests.extend([now] * self.per_2min_limit)
            logger.debug(f"Rate limiter backfilled for {self.endpoint_group}/{self.region}")

    def wait_if_needed(self) -> float:
        """
        Wait if necessary to respect rate limits

        Returns:
            Time waited in seconds
        """
        wait_time = 0.0
        with self.lock:
            now = time.time()
            self._clean_old_requests(now)

            if len(self.per_second_requests) >= self.per_second_limit:
                wait_until = self.per_second_requests[0] + 1
                if wait_until > now:
                    wait_time = max(wait_time, wait_until - now + self.RATE_LIMIT_BUFFER)

            if len(self.per_2min_requests) >= self.per_2min_limit:
                wait_until = self.per_2min_requests[0] + 120
                if wait_until > now:
                    wait_time = max(wait_time, wait_until - now + self.RATE_LIMIT_BUFFER)

            # Reserve the slot at its estimated send time
            estimated_time = now + wait_time
            self.per_second_requests.append(estimated_time)
            self.per_2min_requests.append(estimated_time)

        if wait_time > 0:
            logger.debug(
                f"Rate limit reached for {self.endpoint_group}/{self.region}, "
                f"waiting {wait_time:.2f}s"
            )
            time.sleep(wait_time)

        return wait_time


class RiotAPIClient:
    """
    Riot API client with automatic rate limiting and retry logic
    """

    def __init__(self, api_key: Optional[str] = None, use_dev_key: bool = False,
                 session: Optional[requests.Session] = None):
        """
        Initialize Riot API client

        Args:
            api_key: Riot API key (defaults to config.RIOT_API_KEY)
            use_dev_key: Use development key rate limits
            session: Pre-built session (defaults to a new requests.Session)
        """
        self.api_key = api_key or config.RIOT_API_KEY
        if not self.api_key:
            raise ValueError("Riot API key not provided")

        self.use_dev_key = use_dev_key
        self.rate_limits = config.get_rate_limits(use_dev_key)

        self.limiters: Dict[tuple, RateLimiter] = {}
        self.limiter_lock = threading.Lock()

        # Session for connection pooling
        self.session = session or requests.Session()
        self.session.headers.update({'X-Riot-Token': self.api_key})

        logger.info(
            f"RiotAPIClient initialized with "
            f"{'development' if use_dev_key else 'production'} rate limits"
        )

    def _get_limiter(self, endpoint_group: str, region: str) -> RateLimiter:
        """Get or create rate limiter for endpoint group and region"""
        key = (endpoint_group, region)

        with self.limiter_lock:
            if key not in self.limiters:
                limits = self.rate_limits[endpoint_group]
                self.limiters[key] = RateLimiter(endpoint_group, region, limits)

            return self.limiters[key]

    def _make_request(self, url: str, endpoint_group: str, region: str,
                      params: Optional[Dict] = None, max_retries: int = 3) -> Any:
        """
        Make an API request with rate limiting and retry logic

        Args:
            url: Full API URL
            endpoint_group: API endpoint group for rate limiting
            region: Region code
            params: Query parameters
            max_retries: Maximum number of retries

        Returns:
            Response JSON data, or None for 400/404 responses

        Raises:
            TransientAPIError: When server errors or timeouts outlast every retry
            requests.exceptions.HTTPError: On other HTTP errors (401, 403, ...)
        """
        limiter = self._get_limiter(endpoint_group, region)

        for attempt in range(max_retries):
            limiter.wait_if_needed()

            try:
                response = self.session.get(url, params=params, timeout=10)
            except (requests.exceptions.Timeout, requests.exceptions.ConnectionError) as e:
                logger.warning(f"Request failed ({e}), attempt {attempt + 1}/{max_retries}")
                time.sleep(2 ** attempt)
                continue

            if response.status_code == 429:
                retry_after = int(response.headers.get('Retry-After', 1))
                logger.warning(
                    f"Rate limited (429) for {endpoint_group}/{region}, "
                    f"retrying after {retry_after}s"
                )
                limiter.reset()
                time.sleep(retry_after)
                continue

            # Permanent client error, no point retrying
            if response.status_code == 400:
                logger.warning(f"Bad request (400): {url} | Response: {response.text}")
                return None

            if response.status_code == 404:
                logger.debug(f"Resource not found (404): {url}")
                return None

            if response.status_code in TRANSIENT_STATUS_CODES:
                logger.warning(
                    f"Server error ({response.status_code}) for {endpoint_group}/{region}, "
                    f"attempt {attempt + 1}/{max_retries}, retrying after {2 ** attempt}s"
                )
                time.sleep(2 ** attempt)
                continue

            response.raise_for_status()
            return response.json()

        raise TransientAPIError(f"Max retries ({max_retries}) exceeded for {url}")

    # Account-v1 endpoints
    def get_account_by_riot_id(self, region: str, game_name: str,
                               tag_line: str) -> Optional[Dict]:
        """
        Get account by Riot ID

        Args:
            region: Region code
            game_name: Riot ID game name (before '#')
            tag_line: Riot ID tag line (after '#')

        Returns:
            Account data including puuid, or None if not found
        """
        routing = config.REGIONS[region]['routing']
        url = (f"https://{routing}.api.riotgames.com/riot/account/v1/accounts/"
               f"by-riot-id/{quote(game_name)}/{quote(tag_line)}")
        return self._make_request(url, 'account-v1', region)

    # Match-v5 endpoints
    def get_match_ids_by_puuid(self, region: str, puuid: str,
                               queue: Optional[int] = None,
                               start: int = 0, count: int = 100) -> List[str]:
        """
        Get one page of match IDs for a player, most recent first

        Args:
            region: Region code
            puuid: Player PUUID
            queue: Queue ID (420 for ranked solo)
            start: Start index
            count: Number of matches to return (max 100)

        Returns:
            List of match IDs
        """
        routing = config.REGIONS[region]['routing']
        url = f"https://{routing}.api.riotgames.com/lol/match/v5/matches/by-puuid/{puuid}/ids"

        params = {'start': start, 'count': count}
        if queue:
            params['queue'] = queue

        result = self._make_request(url, 'match-v5', region, params)
        return result if result else []

    def get_match(self, region: str, match_id: str) -> Optional[Dict]:
        """
        Get match details

        Returns:
            Match data dictionary or None if not found
        """
        routing = config.REGIONS[region]['routing']
        url = f"https://{routing}.api.riotgames.com/lol/match/v5/matches/{match_id}"
        return self._make_request(url, 'match-v5', region)

    def close(self):
        """Close the session"""
        self.session.close()
        logger.info("RiotAPIClient session closed")
