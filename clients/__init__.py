# Infrastructure clients
from clients.vault_client import (
    VaultClient,
    get_valkey_url,
    get_admin_token,
)
from clients.valkey_client import ValkeyClient
from clients.http_transport import HttpResult, HttpTransport, RequestsTransport, TransportError
from clients.icloud_client import (
    ICloudHmeClient,
    ReservedAlias,
    UpstreamError,
    UpstreamDiscoveryError,
    UpstreamRejectedError,
    UpstreamTransportError,
)
