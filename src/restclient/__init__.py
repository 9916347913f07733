"""restclient 公開API。"""

from restclient.client import AsyncRestClient, RestClient, api_get, api_post
from restclient.codecs import (
    CodecRegistry,
    decode_payload,
    encode_payload,
    format_for,
    json_format,
    register_codec,
    register_format,
    xml_format,
)
from restclient.config import RequestConfig
from restclient.endpoint import Endpoint, ListEndpoint, SingleEndpoint
from restclient.enums import EndpointKind, Format, Method
from restclient.errors import (
    RestConfigurationError,
    RestDecodeError,
    RestError,
    RestRateLimitError,
    RestRequestError,
    RestTransportError,
    RestUnrecoverableRateLimitError,
    RestValidationError,
)
from restclient.http import AsyncRateLimitCoordinator, RateLimitCoordinator
from restclient.models import List, ListResponse, Single, SingleResponse
from restclient.request import Request
from restclient.urls import build_url, encode_uri_component, url_parameters

__all__ = [
    "AsyncRateLimitCoordinator",
    "AsyncRestClient",
    "CodecRegistry",
    "Endpoint",
    "EndpointKind",
    "Format",
    "List",
    "ListEndpoint",
    "ListResponse",
    "Method",
    "RateLimitCoordinator",
    "Request",
    "RequestConfig",
    "RestClient",
    "RestConfigurationError",
    "RestDecodeError",
    "RestError",
    "RestRateLimitError",
    "RestRequestError",
    "RestTransportError",
    "RestUnrecoverableRateLimitError",
    "RestValidationError",
    "Single",
    "SingleEndpoint",
    "SingleResponse",
    "api_get",
    "api_post",
    "build_url",
    "decode_payload",
    "encode_payload",
    "encode_uri_component",
    "format_for",
    "json_format",
    "register_codec",
    "register_format",
    "url_parameters",
    "xml_format",
]
