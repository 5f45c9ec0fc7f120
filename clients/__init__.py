# HTTP and storage clients
from clients.valkey_client import ValkeyClient
from clients.auth_client import AuthClient
