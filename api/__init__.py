"""REST API envelope, error codes and error text."""

from api.base import APIResponse, Pagination, ErrorCodes, decode_json, raise_for_api_error
from api.exceptions import APIClientError, APIConnectionError, APIRequestError
from api.errors import error_code, error_message, backend_error_text, GENERIC_ERROR_MESSAGE
