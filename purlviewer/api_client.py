import json
import logging
import os
import random
import time
from typing import Any, Callable, Dict, Iterator, Optional, Tuple, Union
import concurrent.futures
import threading

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from purlviewer.config import API_CONFIG


class APIClient:
    """
    Handles HTTP communication with the PurlDB API.

    This client manages optional token authentication, automatic retries for
    transient errors, per-request timeouts, rate limiting, and provides a
    thread pool for concurrent API calls.

    Attributes:
        base_url (str): The base URL for the PurlDB API. Defaults to 'https://public.purldb.io'
                        or the value of the PURLDB_API environment variable.
        token (Optional[str]): Optional PurlDB API key. Read from the PURLDB_TOKEN environment variable.
        timeout (float): Seconds to wait for a response before giving up.
        session (requests.Session): The session object used for making HTTP requests.
        logger (logging.Logger): Logger instance for this client.
        executor (concurrent.futures.ThreadPoolExecutor): Thread pool for concurrent tasks.
        rate_limit_delay (float): Current delay in seconds due to rate limiting.
        last_request_time (float): Timestamp of the last request made.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        max_retries: Optional[int] = None,
        backoff_factor: Optional[float] = None,
        status_forcelist: Optional[Tuple[int, ...]] = None,
        timeout: Optional[float] = None,
        logging_level: Optional[int] = None,
        max_workers: Optional[int] = None,
    ):
        """Initializes the APIClient.

        Args:
            base_url: Root URL of the PurlDB instance. Overrides config if provided.
            max_retries: Maximum number of retries for failed requests.
                Overrides config if provided.
            backoff_factor: Factor by which to increase delay between retries.
                Overrides config if provided.
            status_forcelist: HTTP status codes that trigger a retry.
                Overrides config if provided.
            timeout: Per-request timeout in seconds. Overrides config if provided.
            logging_level: The logging level for the client's logger
                (e.g., `logging.DEBUG`). Overrides config if provided.
            max_workers: Max worker threads for concurrent API calls.
                Overrides config if provided. If None here and in config,
                it defaults to `min(32, os.cpu_count() + 4)`.
        """
        _max_retries = (
            max_retries if max_retries is not None else API_CONFIG["max_retries"]
        )
        _backoff_factor = (
            backoff_factor
            if backoff_factor is not None
            else API_CONFIG["backoff_factor"]
        )
        _status_forcelist = (
            status_forcelist
            if status_forcelist is not None
            else tuple(API_CONFIG["status_forcelist"])
        )
        _logging_level = (
            logging_level
            if logging_level is not None
            else API_CONFIG["logging_level_int"]
        )
        _max_workers = max_workers if max_workers is not None else API_CONFIG.get("max_workers")

        logging.basicConfig(
            level=_logging_level, format="%(asctime)s-%(levelname)s-%(message)s"
        )
        self.base_url = (base_url or API_CONFIG["base_url"]).rstrip("/")
        self.token = os.getenv("PURLDB_TOKEN")
        self.timeout = timeout if timeout is not None else API_CONFIG["timeout"]

        self.session = requests.Session()
        self.session.headers.update({"Accept": "application/json"})
        self.logger = logging.getLogger(__name__)
        self.logger.setLevel(_logging_level)

        retry_strategy = Retry(
            total=_max_retries,
            read=_max_retries,
            connect=_max_retries,
            backoff_factor=_backoff_factor,
            status_forcelist=_status_forcelist,
            allowed_methods=["GET"],
            raise_on_status=False,
        )

        if _max_workers is None:
            _max_workers = min(32, (os.cpu_count() or 1) + 4)

        self.executor = concurrent.futures.ThreadPoolExecutor(max_workers=_max_workers)
        self.logger.debug(f"[APIClient] initialized with ThreadPoolExecutor (max_workers={_max_workers})")

        adapter = HTTPAdapter(
            max_retries=retry_strategy,
            pool_connections=_max_workers,
            pool_maxsize=_max_workers,
        )
        self.session.mount("http://", adapter)
        self.session.mount("https://", adapter)

        self.rate_limit_delay = 0.0
        self.last_request_time = 0.0
        self._rate_limit_lock = threading.Lock()

    def __enter__(self) -> "APIClient":
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.close()

    def _rate_limit(self):
        """
        Applies a delay if a rate limit was previously encountered. Thread-safe.

        If a `rate_limit_delay` is active, sleeps for whatever part of it has
        not yet elapsed since `last_request_time`, then resets the delay.
        """
        if self.rate_limit_delay <= 0:
            return

        with self._rate_limit_lock:
            if self.rate_limit_delay > 0:
                wait_time = self.rate_limit_delay - (
                    time.time() - self.last_request_time
                )
                if wait_time > 0:
                    self.logger.warning(
                        f"Thread {threading.get_ident()}: Rate limit active. Global wait for {wait_time:.2f} seconds."
                    )
                    time.sleep(wait_time)
                self.rate_limit_delay = 0.0
                # Stagger the requests that were waiting on the lock.
                time.sleep(random.uniform(0.1, 0.5))

    def _handle_response(self, response: requests.Response) -> requests.Response:
        """
        Processes an HTTP response, handling errors and rate limit headers.

        If a 429 (rate limit) error occurs, `self.rate_limit_delay` is updated
        from the 'Retry-After' header before the error is raised.

        Args:
            response (requests.Response): The HTTP response object to process.

        Returns:
            requests.Response: The same response object if no errors occurred.

        Raises:
            requests.exceptions.HTTPError: If the response status code indicates an error.
        """
        current_time = time.time()
        try:
            response.raise_for_status()
            with self._rate_limit_lock:
                self.last_request_time = current_time
            return response
        except requests.exceptions.HTTPError as e:
            with self._rate_limit_lock:
                self.last_request_time = current_time
                if response.status_code == 429:
                    retry_after_header = response.headers.get("Retry-After")
                    if retry_after_header and retry_after_header.isdigit():
                        self.rate_limit_delay = float(int(retry_after_header) + 1)
                    else:
                        self.rate_limit_delay = max(
                            self.rate_limit_delay,
                            API_CONFIG["default_rate_limit_retry_after"],
                        )
                    self.logger.warning(
                        f"Thread {threading.get_ident()}: Rate limited (429). Updated rate_limit_delay to {self.rate_limit_delay}s"
                    )
                else:
                    self.logger.error(
                        f"Thread {threading.get_ident()}: API error: {response.status_code} - {e}"
                    )
            raise

    def _url_for(self, endpoint: str) -> str:
        # Pagination links are absolute.
        if endpoint.startswith(("http://", "https://")):
            return endpoint
        return f"{self.base_url}/{endpoint.lstrip('/')}"

    def get(
        self,
        endpoint: str,
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> requests.Response:
        """
        Sends a GET request to the specified API endpoint.

        Args:
            endpoint (str): The API endpoint path (e.g., '/api/packages/') or an absolute URL.
            params (Optional[Dict[str, Any]]): A dictionary of query parameters.
            headers (Optional[Dict[str, str]]): A dictionary of request headers.

        Returns:
            requests.Response: The response object from the API.

        Raises:
            requests.exceptions.RequestException: On HTTP errors, timeouts and
                connection failures.
        """
        self._rate_limit()
        url = self._url_for(endpoint)
        self.logger.debug(f"Thread {threading.get_ident()}: GET request to: {url} with params: {params}")
        effective_headers = dict(self.session.headers)
        if headers:
            effective_headers.update(headers)
        if self.token and "Authorization" not in effective_headers:
            effective_headers["Authorization"] = f"Token {self.token}"

        try:
            response = self.session.get(url, params=params, headers=effective_headers, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            self.logger.error(f"Thread {threading.get_ident()}: Request exception: {e}")
            raise
        self.logger.debug(
            f"Thread {threading.get_ident()}: GET response: {response.status_code} - {response.text[:100]}..."
        )
        return self._handle_response(response)

    def submit_task(
        self, func: Callable[..., Any], *args: Any, **kwargs: Any
    ) -> concurrent.futures.Future:
        """
        Submits a callable to the internal thread pool executor.

        Args:
            func (Callable[..., Any]): The function or method to execute.
            *args (Any): Positional arguments to pass to the function.
            **kwargs (Any): Keyword arguments to pass to the function.

        Returns:
            concurrent.futures.Future: A Future object representing the execution
                                       of the callable.
        """
        self.logger.debug(f"Thread {threading.get_ident()}: Submitting task {getattr(func, '__name__', repr(func))} to executor.")
        return self.executor.submit(func, *args, **kwargs)

    def close(self):
        """
        Shuts down the thread pool executor and closes the HTTP session.

        Waits for all submitted tasks to complete before returning.
        """
        self.logger.debug(
            f"Thread {threading.get_ident()}: Shutting down ThreadPoolExecutor."
        )
        self.executor.shutdown(wait=True)
        self.session.close()

    def _get_next_page(
        self,
        response_json: Dict[str, Any],
        pagination_key: str,
    ) -> Optional[str]:
        next_page = response_json.get(pagination_key)
        if isinstance(next_page, str) and next_page:
            return next_page
        return None

    def paginate(
        self,
        endpoint: str,
        params: Optional[Dict[str, Any]] = None,
        pagination_key: str = "next",
        data_key: Optional[str] = "results",
        max_pages: Optional[int] = None,
        **kwargs: Any,
    ) -> Iterator[Union[Dict[str, Any], Any]]:
        """Iterates over a paginated `count/next/previous/results` listing.

        Yields the items under `data_key` (or whole pages when `data_key` is
        None), following the absolute `next` link until it is null or
        `max_pages` pages have been read.
        """
        current_params = params.copy() if params else {}
        page_count = 0

        next_page_url: Optional[str] = endpoint

        while next_page_url and (max_pages is None or page_count < max_pages):
            response_obj = self.get(endpoint=next_page_url, params=current_params, **kwargs)
            page_count += 1

            try:
                response_json = response_obj.json()
            except json.JSONDecodeError as e_json:
                self.logger.error(f"JSONDecodeError on page {page_count}: {e_json}")
                break

            if data_key:
                items = response_json.get(data_key)
                if items is not None and isinstance(items, list):
                    yield from items
                elif items is not None:
                    self.logger.warning(f"Data key '{data_key}' is not a list.")
                    yield items
                else:
                    self.logger.warning(f"Data key '{data_key}' not found in response.")
                    break
            else:
                yield response_json

            next_page_url = self._get_next_page(response_json, pagination_key)
            # The next link already carries the query string.
            current_params = {}
