"""gRPC hosting for the coupon service.

The service listens on TCP by default or on a Unix domain socket when
``TRANSPORT_TYPE=uds``. An explicit port always wins over ``PORT``.
"""

import os
from concurrent import futures
from typing import Callable, Optional

import grpc
import structlog
from grpc_health.v1 import health, health_pb2, health_pb2_grpc

DEFAULT_PORT = "50061"
DEFAULT_UDS_BASE_PATH = "/tmp/storefront"
DEFAULT_SOCKET_NAME = "coupons"


def configure_logging() -> None:
    """Render structlog events as JSON lines with level and ISO timestamp."""
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(0),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
    )


def _socket_address() -> str:
    base_path = os.environ.get("UDS_BASE_PATH", DEFAULT_UDS_BASE_PATH)
    socket_name = os.environ.get("SERVICE_NAME", DEFAULT_SOCKET_NAME)
    socket_path = os.path.join(base_path, f"{socket_name}.sock")

    os.makedirs(base_path, exist_ok=True)
    # a socket left by a previous run blocks the bind
    if os.path.exists(socket_path):
        os.remove(socket_path)
    return f"unix:{socket_path}"


def get_transport_config(port: Optional[str] = None) -> tuple[str, str]:
    """Resolve the listen address.

    Args:
        port: TCP port to listen on. Falls back to ``PORT``, then 50061.
            Ignored for UDS.

    Returns:
        ``("tcp", "[::]:<port>")`` or ``("uds", "unix:<path>")``. The
        socket path is ``$UDS_BASE_PATH/$SERVICE_NAME.sock``.
    """
    if os.environ.get("TRANSPORT_TYPE", "tcp").lower() == "uds":
        return "uds", _socket_address()

    port = port or os.environ.get("PORT") or DEFAULT_PORT
    return "tcp", f"[::]:{port}"


def create_server(
    add_service_func: Callable,
    service: object,
    service_name: str = "",
    port: Optional[str] = None,
    max_workers: int = 10,
) -> tuple[grpc.Server, str]:
    """Build a thread-pool gRPC server with the health service attached.

    The server is bound but not started. Returns the server and the
    address it was bound to.
    """
    _, address = get_transport_config(port)

    server = grpc.server(futures.ThreadPoolExecutor(max_workers=max_workers))
    add_service_func(service, server)

    health_servicer = health.HealthServicer()
    health_pb2_grpc.add_HealthServicer_to_server(health_servicer, server)
    for name in {"", service_name}:
        health_servicer.set(name, health_pb2.HealthCheckResponse.SERVING)

    server.add_insecure_port(address)
    return server, address


def run_server(
    add_service_func: Callable,
    service: object,
    service_name: str = "",
    port: Optional[str] = None,
    logger: Optional[structlog.BoundLogger] = None,
) -> None:
    """Serve until the process is terminated."""
    server, address = create_server(add_service_func, service, service_name, port)

    log = logger or structlog.get_logger()
    log.info("server_started", service=service_name, address=address)

    server.start()
    server.wait_for_termination()
