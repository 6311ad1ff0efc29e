"""Wire a FormSubmissionClient from settings."""
from leadqueue.client.gateway import SubmissionGateway
from leadqueue.client.submit import FormSubmissionClient
from leadqueue.config.settings import Settings, load_settings
from leadqueue.offline.queue import OfflineQueue
from leadqueue.offline.reconnect import ConnectivityObserver, GatewayProbeObserver, ManualObserver
from leadqueue.offline.store import FileSlotStore


def build_client(
    settings: Settings | None = None,
    observer: ConnectivityObserver | None = None,
    offline: bool = False,
) -> FormSubmissionClient:
    """Client backed by the file queue and the HTTP gateway.

    Args:
        settings: Resolved settings (default: load_settings())
        observer: Connectivity observer (default: gateway health probe)
        offline: Force the offline state regardless of observer
    """
    settings = settings or load_settings()
    gateway = SubmissionGateway(settings.api_base_url, timeout_ms=settings.timeout_ms)
    queue = OfflineQueue(FileSlotStore(settings.storage_dir))

    if offline:
        observer = ManualObserver(online=False)
    elif observer is None:
        observer = GatewayProbeObserver(gateway)

    return FormSubmissionClient(gateway=gateway, queue=queue, observer=observer)
