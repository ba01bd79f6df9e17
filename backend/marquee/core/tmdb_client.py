import requests
import logging
from typing import Dict
from .interfaces import TMDBClientInterface, TMDBResponse, TMDBConfig, TMDBError

logger = logging.getLogger(__name__)

class TMDBClient(TMDBClientInterface):
    """HTTP client for the TMDB v3 API"""

    def __init__(self, config: TMDBConfig, session: requests.Session = None):
        self.config = config
        self.session = session or requests.Session()
        self.session.headers.update({
            "accept": "application/json"
        })

    def make_request(self, endpoint: str, params: Dict = None) -> TMDBResponse:
        """Make GET request to TMDB API.

        Non-2xx answers come back as an unsuccessful ``TMDBResponse`` so callers
        can tell a missing record (404) from other failures. Transport problems
        and undecodable bodies raise ``TMDBError``.
        """
        url = f"{self.config.base_url.rstrip('/')}/{endpoint.lstrip('/')}"
        params = dict(params or {})
        params['api_key'] = self.config.api_key
        if self.config.language:
            params['language'] = self.config.language

        try:
            logger.info(f"Making request to: {url}")
            response = self.session.get(url, params=params, timeout=self.config.timeout)
        except requests.exceptions.RequestException as e:
            logger.error(f"Request exception: {str(e)}")
            raise TMDBError(f"Request failed: {str(e)}")

        if not response.ok:
            logger.error(f"API request failed: {response.status_code} - {response.text}")
            return TMDBResponse({}, response.status_code, False)

        try:
            return TMDBResponse(response.json(), response.status_code, True)
        except ValueError as e:
            logger.error(f"Invalid JSON from {url}: {str(e)}")
            raise TMDBError(f"Invalid response body: {str(e)}", response.status_code)
