"""Offline queue CLI commands."""
import sys

import click

from leadqueue.core.constants import MONITOR_INTERVAL_SECONDS
from leadqueue.core.receipt import StopRule

from .output import print_error, print_json, print_success, queued_label, table


@click.group()
def offline():
    """Offline queue commands."""
    pass


@offline.command()
@click.pass_context
def status(ctx):
    """Show connectivity and queue size."""
    client = ctx.obj["client"]
    try:
        online = client.is_online()
        size = client.queue.size()
        print_json({
            "connected": online,
            "status": "online" if online else "offline",
            "pending_count": size,
            "badge": queued_label(size),
        })
    except StopRule as e:
        print_error(f"Status check failed: {e}")
        sys.exit(3)


@offline.command('queue')
@click.option('--limit', '-n', default=10, help='Number of submissions to show')
@click.pass_context
def show_queue(ctx, limit: int):
    """List pending submissions, oldest first."""
    client = ctx.obj["client"]
    try:
        entries = client.get_submission_queue()
    except StopRule as e:
        print_error(f"Queue list failed: {e}")
        sys.exit(3)

    if not entries:
        click.echo("Queue is empty")
        return

    shown = entries[:limit]
    click.echo(f"Showing {len(shown)} of {len(entries)} pending submissions:\n")
    table(
        ["#", "ID", "Form", "Enqueued", "Attempts"],
        [[str(i + 1), e.id[:8], e.form_type, e.enqueued_at, str(e.attempts)]
         for i, e in enumerate(shown)],
    )


@offline.command('drain')
@click.pass_context
def drain(ctx):
    """Send queued submissions now, oldest first."""
    client = ctx.obj["client"]
    try:
        result = client.process_queued_submissions()
    except StopRule as e:
        print_error(f"Drain failed: {e}")
        sys.exit(3)

    if result.get("reason") == "offline":
        print_error("Not connected. Queued submissions stay queued.")
        print_json(result)
        sys.exit(1)

    if result.get("success"):
        print_success(f"Delivered {result['delivered']} submissions")
    else:
        print_error(f"Drain stopped: {result.get('error')}")
    print_json(result)
    if not result.get("success"):
        sys.exit(1)


@offline.command()
@click.option('--yes', is_flag=True, help='Do not ask for confirmation')
@click.pass_context
def clear(ctx, yes: bool):
    """Discard every queued submission. Cannot be undone."""
    client = ctx.obj["client"]
    try:
        size = client.queue.size()
    except StopRule:
        size = None  # unreadable queue; clearing is the way out

    if size == 0:
        click.echo("Queue already empty")
        return

    prompt = f"Clear {size} queued submissions?" if size is not None else "Queue is unreadable. Clear it?"
    if yes or click.confirm(prompt):
        client.clear_submission_queue()
        print_success("Queue cleared")


@offline.command()
@click.pass_context
def connected(ctx):
    """Check if the submission gateway is reachable."""
    is_online = ctx.obj["client"].is_online()
    print_json({
        "connected": is_online,
        "status": "online" if is_online else "offline",
    })


@offline.command()
@click.option('--interval', default=MONITOR_INTERVAL_SECONDS, show_default=True, type=float,
              help='Seconds between connectivity checks')
@click.pass_context
def watch(ctx, interval: float):
    """Watch connectivity and drain the queue whenever it comes back online."""
    client = ctx.obj["client"]

    monitor = client.setup_connection_listeners(
        on_online=lambda: click.echo("Online. Sending queued submissions..."),
        on_offline=lambda: click.echo("Offline. New submissions will be queued."),
        on_queue_change=lambda size: click.echo(queued_label(size)),
    )
    monitor.interval_seconds = interval

    online = client.is_online()
    click.echo(f"{'Online' if online else 'Offline'}, {queued_label(client.queue.size())}. Ctrl+C to stop.")
    try:
        if online:
            monitor.drain()
        monitor.run_forever()
    except KeyboardInterrupt:
        click.echo("\nStopped.")
    except StopRule as e:
        print_error(f"Monitor stopped: {e}")
        sys.exit(3)
