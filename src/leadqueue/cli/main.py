"""leadq CLI entry point - assembles all command groups."""
import sys

import click

from leadqueue import __version__
from leadqueue.client.factory import build_client
from leadqueue.config.settings import load_settings
from leadqueue.core.receipt import set_receipt_stream

from .offline_cmd import offline
from .submit_cmd import submit


@click.group()
@click.version_option(version=__version__)
@click.option('--api-url', help='Submission gateway base URL')
@click.option('--storage-dir', type=click.Path(file_okay=False),
              help='Directory holding the offline queue')
@click.option('--timeout', 'timeout_ms', type=int, help='Gateway timeout in milliseconds')
@click.option('--offline', 'force_offline', is_flag=True, help='Treat the device as offline')
@click.option('--receipts', is_flag=True, help='Write JSON receipts to stderr')
@click.pass_context
def cli(ctx, api_url, storage_dir, timeout_ms, force_offline, receipts):
    """leadq: lead form submissions that survive going offline."""
    if receipts:
        set_receipt_stream(sys.stderr)
    else:
        set_receipt_stream(None, enabled=False)

    ctx.ensure_object(dict)
    if "client" not in ctx.obj:
        settings = load_settings(api_url, storage_dir, timeout_ms)
        ctx.obj["client"] = build_client(settings, offline=force_offline)


cli.add_command(submit)
cli.add_command(offline)


if __name__ == "__main__":
    cli()
