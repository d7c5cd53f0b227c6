"""Retrieval of schema documents referenced by URI."""

import json
import logging
import os
from typing import Any, Dict, Union
from urllib.parse import ParseResult, unquote, urlparse

import requests
import yaml

logger = logging.getLogger(__name__)

YAML_EXTENSIONS = ('.yaml', '.yml')


class DefaultSchemaLoader:
    """
    Fetches schema documents over HTTP(S) or from the local file system.

    Instances are callable and can be passed to ``Parser(uri_resolver=...)``.
    Fetched text is cached per URI for the lifetime of the loader.
    """

    def __init__(self, timeout: float = 30):
        self.timeout = timeout
        self.content_cache: Dict[str, str] = {}

    def __call__(self, uri: str) -> str:
        return self.fetch_content(uri)

    def fetch_content(self, url: Union[str, ParseResult]) -> str:
        """
        Fetches the content from the specified URL.

        Args:
            url (str or ParseResult): The URL to fetch the content from.

        Returns:
            str: The fetched content.

        Raises:
            requests.RequestException: If there is an error while making the HTTP request.
            OSError: If there is an error while reading the file.
            NotImplementedError: If the URL scheme is not supported.
        """
        parsed_url = urlparse(url) if isinstance(url, str) else url
        key = parsed_url.geturl()
        if key in self.content_cache:
            return self.content_cache[key]
        scheme = parsed_url.scheme

        if scheme in ['http', 'https']:
            logger.debug("Fetching schema document %s", key)
            response = requests.get(key, timeout=self.timeout)
            # Raises an HTTPError if the response status code is 4XX/5XX
            response.raise_for_status()
            self.content_cache[key] = response.text
            return response.text

        if scheme == 'file':
            file_path = unquote(parsed_url.path)
            if parsed_url.netloc and parsed_url.netloc != 'localhost':
                file_path = '//' + parsed_url.netloc + file_path
            # On Windows, a file URL starts with a '/' that is not part of the actual path
            if os.name == 'nt' and file_path.startswith('/'):
                file_path = file_path[1:]
            logger.debug("Reading schema document %s", file_path)
            with open(file_path, 'r', encoding='utf-8') as file:
                text = file.read()
            self.content_cache[key] = text
            return text

        raise NotImplementedError(f'Unsupported URL scheme: {scheme}')


def parse_schema_text(content: Any, uri: str = '') -> Any:
    """
    Turn what a loader returned into a JSON document.

    Args:
        content: Text, bytes, a readable file-like object, or an already parsed document.
        uri (str): The URI the content was loaded from; a ``.yaml`` or ``.yml``
            path selects the YAML parser.

    Returns:
        The parsed document.
    """
    if hasattr(content, 'read'):
        content = content.read()
    if isinstance(content, bytes):
        content = content.decode('utf-8')
    if not isinstance(content, str):
        return content
    path = urlparse(uri).path if uri else ''
    if path.lower().endswith(YAML_EXTENSIONS):
        return yaml.safe_load(content)
    return json.loads(content)
